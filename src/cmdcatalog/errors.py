# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exception taxonomy shared by the catalog loader and the execution bridge."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .execution.executor import ExecutionResult


class CatalogError(RuntimeError):
    """Base class for every error raised by the command catalog."""


class SourceError(CatalogError):
    """Raised when the definition source cannot be scanned or read."""

    def __init__(self, path: Path, reason: str) -> None:
        """Create the error for ``path`` with a human readable ``reason``.

        Args:
            path: Filesystem path that could not be scanned or read.
            reason: Description of the underlying failure.
        """

        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class DocumentError(CatalogError):
    """Raised when a definition document is not well-formed JSON or has the wrong shape."""


class BuildError(CatalogError):
    """Base class for structural validation failures during a strict build."""


class DuplicateNameError(BuildError):
    """Raised when two siblings (or two tabs) share the same name."""

    def __init__(self, tab: str, name: str, *, parent: Sequence[str] = ()) -> None:
        """Create the error for the colliding ``name``.

        Args:
            tab: Name of the tab containing the collision.
            name: Name declared more than once at the same level.
            parent: Names leading from the tab root to the colliding level.
        """

        location = "/".join((tab, *parent))
        super().__init__(f"duplicate name '{name}' in {location}")
        self.tab = tab
        self.name = name
        self.parent = tuple(parent)


class EmptyTabError(BuildError):
    """Raised when a tab contains no nodes after a strict build."""

    def __init__(self, tab: str) -> None:
        super().__init__(f"tab '{tab}' contains no entries")
        self.tab = tab


class InvalidRecordError(BuildError):
    """Raised when a definition record is malformed or structurally unusable."""

    def __init__(self, source: Path, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class NodeNotFoundError(CatalogError, LookupError):
    """Raised when a tab or node reference does not resolve."""


class ExecutionError(CatalogError):
    """Base class for failures to run a catalog entry."""


class NotExecutableError(ExecutionError):
    """Raised when a grouping node is handed to the executor."""

    def __init__(self, path: Sequence[str]) -> None:
        super().__init__(f"'{'/'.join(path)}' is a group and cannot be executed")
        self.path = tuple(path)


class NotMultiSelectableError(ExecutionError):
    """Raised when a batch includes entries that may only run on their own."""

    def __init__(self, paths: Sequence[Sequence[str]]) -> None:
        names = ", ".join("/".join(path) for path in paths)
        super().__init__(f"cannot run in a multi-selection: {names}")
        self.paths = tuple(tuple(path) for path in paths)


class SpawnFailedError(ExecutionError):
    """Raised when the process for an entry could not be created or completed."""

    def __init__(self, argv: Sequence[str], reason: str) -> None:
        """Create the error for the command ``argv``.

        Args:
            argv: Argument vector that failed to spawn.
            reason: Description of the spawn failure.
        """

        head = argv[0] if argv else "<empty>"
        super().__init__(f"failed to run '{head}': {reason}")
        self.argv = tuple(argv)
        self.reason = reason


class ExecutionTimeoutError(SpawnFailedError):
    """Raised when the hard timeout killed a running entry."""

    def __init__(self, argv: Sequence[str], timeout: float, *, stdout: str, stderr: str) -> None:
        super().__init__(argv, f"timed out after {timeout:.1f}s")
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr


class BatchExecutionError(ExecutionError):
    """Raised when a batch aborts because one member could not be spawned."""

    def __init__(self, failed: Sequence[str], results: Sequence[ExecutionResult]) -> None:
        """Create the error for the batch member at ``failed``.

        Args:
            failed: Path of the member whose spawn failed.
            results: Results collected before the failure, in selection order.
        """

        super().__init__(f"batch aborted at '{'/'.join(failed)}' after {len(results)} result(s)")
        self.failed = tuple(failed)
        self.results = tuple(results)


__all__ = [
    "BatchExecutionError",
    "BuildError",
    "CatalogError",
    "DocumentError",
    "DuplicateNameError",
    "EmptyTabError",
    "ExecutionError",
    "ExecutionTimeoutError",
    "InvalidRecordError",
    "NodeNotFoundError",
    "NotExecutableError",
    "NotMultiSelectableError",
    "SourceError",
    "SpawnFailedError",
]
