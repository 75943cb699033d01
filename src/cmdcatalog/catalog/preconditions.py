# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Host compatibility checks that hide records during strict builds."""

from __future__ import annotations

import os
import shutil
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from .types import JSONValue
from .utils import expect_mapping, expect_string, optional_bool, string_array


class PreconditionKind(str, Enum):
    """Enumerate supported host checks."""

    ENVIRONMENT = "environment"
    CONTAINING_FILE = "containingFile"
    COMMAND_EXISTS = "commandExists"
    FILE_EXISTS = "fileExists"


@runtime_checkable
class HostProbe(Protocol):
    """Read-only view of the host used to evaluate preconditions."""

    def getenv(self, name: str) -> str | None:
        """Return the value of environment variable ``name`` if set."""

    def read_text(self, path: str) -> str | None:
        """Return the contents of ``path`` or ``None`` when unreadable."""

    def command_exists(self, name: str) -> bool:
        """Return whether ``name`` resolves to an executable on ``PATH``."""

    def file_exists(self, path: str) -> bool:
        """Return whether ``path`` exists."""


class SystemHostProbe:
    """Host probe backed by the running process and its filesystem."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ

    def getenv(self, name: str) -> str | None:
        return self._environ.get(name)

    def read_text(self, path: str) -> str | None:
        try:
            return Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None

    def command_exists(self, name: str) -> bool:
        return shutil.which(name) is not None

    def file_exists(self, path: str) -> bool:
        return Path(path).exists()


@dataclass(frozen=True, slots=True)
class Precondition:
    """One declared host check and the outcome it expects."""

    kind: PreconditionKind
    matches: bool
    values: tuple[str, ...]
    target: str | None = None

    @staticmethod
    def from_mapping(data: Mapping[str, JSONValue], *, context: str) -> Precondition:
        """Create a ``Precondition`` from schema-validated JSON data.

        Args:
            data: Mapping holding ``matches`` and ``data`` keys.
            context: Human-readable context used in error messages.

        Returns:
            Precondition: Frozen precondition definition.
        """

        matches = optional_bool(data.get("matches"), key="matches", context=context)
        body = expect_mapping(data.get("data"), key="data", context=context)
        ((raw_kind, raw_spec),) = body.items()
        kind = PreconditionKind(raw_kind)
        spec = expect_mapping(raw_spec, key=raw_kind, context=context)
        values = string_array(spec.get("values"), key=f"{raw_kind}.values", context=context)
        target: str | None = None
        if kind is PreconditionKind.ENVIRONMENT:
            target = expect_string(spec.get("variable"), key=f"{raw_kind}.variable", context=context)
        elif kind is PreconditionKind.CONTAINING_FILE:
            target = expect_string(spec.get("file"), key=f"{raw_kind}.file", context=context)
        return Precondition(kind=kind, matches=matches, values=values, target=target)

    def check(self, host: HostProbe) -> bool:
        """Return the raw check result on ``host`` (before ``matches`` is applied)."""

        if self.kind is PreconditionKind.ENVIRONMENT:
            value = host.getenv(self.target or "")
            return value is not None and value in self.values
        if self.kind is PreconditionKind.CONTAINING_FILE:
            contents = host.read_text(self.target or "")
            return contents is not None and any(value in contents for value in self.values)
        if self.kind is PreconditionKind.COMMAND_EXISTS:
            return all(host.command_exists(value) for value in self.values)
        return all(host.file_exists(value) for value in self.values)

    def holds(self, host: HostProbe) -> bool:
        """Return whether the check outcome on ``host`` equals ``matches``."""

        return self.check(host) is self.matches

    def describe(self) -> str:
        """Return a short description used in build diagnostics."""

        expectation = "" if self.matches else "not "
        subject = f"{self.target}: " if self.target else ""
        return f"expected {expectation}{self.kind.value}({subject}{', '.join(self.values)})"


def parse_preconditions(value: JSONValue | None, *, context: str) -> tuple[Precondition, ...]:
    """Return the preconditions declared by a record.

    Args:
        value: Raw ``preconditions`` value from the record, if any.
        context: Human-readable context used in error messages.

    Returns:
        tuple[Precondition, ...]: Parsed preconditions in declaration order.
    """

    if value is None or not isinstance(value, Sequence) or isinstance(value, str):
        return ()
    return tuple(
        Precondition.from_mapping(
            expect_mapping(item, key=f"preconditions[{index}]", context=context),
            context=f"{context}.preconditions[{index}]",
        )
        for index, item in enumerate(value)
    )


def first_failing(preconditions: Sequence[Precondition], host: HostProbe) -> Precondition | None:
    """Return the first precondition that does not hold on ``host``."""

    for precondition in preconditions:
        if not precondition.holds(host):
            return precondition
    return None


__all__ = [
    "HostProbe",
    "Precondition",
    "PreconditionKind",
    "SystemHostProbe",
    "first_failing",
    "parse_preconditions",
]
