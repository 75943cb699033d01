# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Immutable catalog aggregates produced by the builder."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeAlias

from ..errors import NodeNotFoundError
from .model_command import Command, CommandKind

NodeRef: TypeAlias = str | Sequence[str]
NodeShape: TypeAlias = tuple[str, str, tuple["NodeShape", ...]]


class DiagnosticKind(str, Enum):
    """Enumerate the non-fatal problems a tolerant build can report."""

    INVALID_RECORD = "invalid_record"
    DUPLICATE_NAME = "duplicate_name"
    EMPTY_TAB = "empty_tab"
    EMPTY_GROUP = "empty_group"
    PRECONDITION = "precondition"


@dataclass(frozen=True, slots=True)
class BuildDiagnostic:
    """Non-fatal build finding returned alongside the catalog."""

    kind: DiagnosticKind
    tab: str
    message: str
    source: Path | None = None

    def __str__(self) -> str:
        location = f" ({self.source})" if self.source is not None else ""
        return f"[{self.tab}] {self.message}{location}"


@dataclass(frozen=True, slots=True)
class CommandNode:
    """Element of a tab tree: a group or an executable leaf."""

    name: str
    description: str
    command: Command
    task_list: str
    multi_select: bool
    path: tuple[str, ...]
    source: Path | None = None
    children: tuple[CommandNode, ...] = ()

    @property
    def is_group(self) -> bool:
        """Return ``True`` when the node carries no command."""

        return self.command.kind is CommandKind.NONE

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def parent_path(self) -> tuple[str, ...]:
        """Return the names leading from the tab root to this node's parent."""

        return self.path[:-1]

    @property
    def display_path(self) -> str:
        return "/".join(self.path)

    def walk(self) -> Iterator[CommandNode]:
        """Yield this node followed by its descendants depth-first."""

        yield self
        for child in self.children:
            yield from child.walk()

    def shape(self) -> NodeShape:
        """Return the name/variant skeleton of the subtree for structural comparison."""

        return (self.name, self.command.kind.value, tuple(child.shape() for child in self.children))


@dataclass(frozen=True, slots=True)
class Tab:
    """Named root of one definition tree."""

    name: str
    directory: Path
    nodes: tuple[CommandNode, ...] = ()

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.walk())

    def walk(self) -> Iterator[CommandNode]:
        """Yield every node of the tab depth-first, in tree order."""

        for node in self.nodes:
            yield from node.walk()

    def find(self, ref: NodeRef) -> CommandNode:
        """Return the node addressed by ``ref``.

        Args:
            ref: Sequence of names from the tab root, or a single leaf name
                matched anywhere in the tab (first match in tree order).

        Returns:
            CommandNode: Resolved node.

        Raises:
            NodeNotFoundError: If nothing matches ``ref``.
        """

        if isinstance(ref, str):
            for node in self.walk():
                if node.name == ref and not node.has_children:
                    return node
            raise NodeNotFoundError(f"no entry named '{ref}' in tab '{self.name}'")
        names = tuple(ref)
        if not names:
            raise NodeNotFoundError(f"empty entry path in tab '{self.name}'")
        level = self.nodes
        found: CommandNode | None = None
        for name in names:
            found = next((node for node in level if node.name == name), None)
            if found is None:
                break
            level = found.children
        if found is None:
            raise NodeNotFoundError(f"no entry '{'/'.join(names)}' in tab '{self.name}'")
        return found

    def parent_of(self, node: CommandNode) -> CommandNode | None:
        """Return the parent of ``node``, or ``None`` for top-level nodes."""

        if not node.parent_path:
            return None
        return self.find(node.parent_path)

    def shape(self) -> tuple[str, tuple[NodeShape, ...]]:
        return (self.name, tuple(node.shape() for node in self.nodes))


@dataclass(frozen=True, slots=True)
class Catalog:
    """Ordered tabs produced by one successful build."""

    tabs: tuple[Tab, ...]
    validated: bool
    checksum: str
    diagnostics: tuple[BuildDiagnostic, ...] = ()

    @property
    def tab_names(self) -> tuple[str, ...]:
        return tuple(tab.name for tab in self.tabs)

    @property
    def node_count(self) -> int:
        return sum(tab.node_count for tab in self.tabs)

    def tab(self, name: str) -> Tab:
        """Return the tab called ``name``.

        Raises:
            NodeNotFoundError: If no tab carries ``name``.
        """

        for tab in self.tabs:
            if tab.name == name:
                return tab
        raise NodeNotFoundError(f"no tab named '{name}'")

    def resolve(self, tab_name: str, ref: NodeRef) -> CommandNode:
        """Return the node addressed by ``ref`` inside tab ``tab_name``."""

        return self.tab(tab_name).find(ref)

    def shape(self) -> tuple[tuple[str, tuple[NodeShape, ...]], ...]:
        """Return the structural skeleton of the catalog (names, order, variants)."""

        return tuple(tab.shape() for tab in self.tabs)


__all__ = [
    "BuildDiagnostic",
    "Catalog",
    "CommandNode",
    "DiagnosticKind",
    "NodeRef",
    "Tab",
]
