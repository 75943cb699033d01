# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema validation for catalog definition records."""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol, cast, runtime_checkable

from .io import load_record_schema
from .types import JSONValue


class SchemaValidationError(Protocol):
    """Represent schema validation errors surfaced by jsonschema."""

    @property
    def message(self) -> str:
        """Return the descriptive validation error message."""

    @property
    def absolute_path(self) -> Iterable[str | int]:
        """Return the location of the failing value within the instance."""


@runtime_checkable
class SchemaValidator(Protocol):
    """Protocol describing the minimal interface exposed by jsonschema validators."""

    def iter_errors(self, instance: JSONValue) -> Iterable[SchemaValidationError]:
        """Iterate over validation errors for ``instance``."""


SchemaValidatorFactory = Callable[[JSONValue], SchemaValidator]

jsonschema_module = importlib.import_module("jsonschema")
Draft202012Validator = cast(SchemaValidatorFactory, jsonschema_module.Draft202012Validator)


@dataclass(frozen=True, slots=True)
class RecordSchema:
    """Validate raw record payloads against the packaged record schema."""

    validator: SchemaValidator

    @classmethod
    def load(cls) -> RecordSchema:
        """Return a schema wrapper bound to the packaged record schema.

        Returns:
            RecordSchema: Wrapper configured with a Draft 2020-12 validator.
        """

        return cls(validator=Draft202012Validator(load_record_schema()))

    def problems(self, record: Mapping[str, JSONValue]) -> tuple[str, ...]:
        """Return human-readable schema violations for ``record``.

        Args:
            record: Raw record payload read from a definition document.

        Returns:
            tuple[str, ...]: One message per violation, empty when ``record`` is valid.
        """

        messages: list[str] = []
        for error in self.validator.iter_errors(record):
            location = "/".join(str(part) for part in error.absolute_path)
            messages.append(f"{location}: {error.message}" if location else error.message)
        return tuple(sorted(messages))


@lru_cache(maxsize=1)
def default_record_schema() -> RecordSchema:
    """Return the process-wide record schema wrapper."""

    return RecordSchema.load()


__all__ = ["RecordSchema", "SchemaValidator", "default_record_schema"]
