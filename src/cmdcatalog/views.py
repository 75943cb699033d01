# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Flattened, front-end friendly projections of catalog tabs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Final

from .catalog.model_catalog import CommandNode, Tab
from .catalog.model_command import LocalFileCommand, RawCommand
from .execution.executor import read_shebang

_SCRIPT_ENCODING: Final[str] = "utf-8"


class EntryType(str, Enum):
    """Enumerate how an entry presents itself to a front-end."""

    RAW = "raw"
    SCRIPT = "script"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class EntryView:
    """One catalog node flattened for list and search views."""

    id: str
    name: str
    description: str
    command_type: EntryType
    command_content: str
    task_list: str
    multi_select: bool
    has_children: bool
    depth: int
    path: tuple[str, ...]

    @classmethod
    def from_node(cls, node: CommandNode) -> EntryView:
        command = node.command
        if isinstance(command, RawCommand):
            command_type, content = EntryType.RAW, command.text
        elif isinstance(command, LocalFileCommand):
            command_type, content = EntryType.SCRIPT, " ".join((str(command.path), *command.args))
        else:
            command_type, content = EntryType.DIRECTORY, ""
        return cls(
            id=node.display_path,
            name=node.name,
            description=node.description,
            command_type=command_type,
            command_content=content,
            task_list=node.task_list,
            multi_select=node.multi_select,
            has_children=node.has_children,
            depth=len(node.path) - 1,
            path=node.path,
        )


def flatten_tab(tab: Tab) -> tuple[EntryView, ...]:
    """Return every node of ``tab`` depth-first, excluding the implicit root."""

    return tuple(EntryView.from_node(node) for node in tab.walk())


def filter_entries(entries: Iterable[EntryView], query: str) -> tuple[EntryView, ...]:
    """Return entries whose name or description contains ``query``.

    Matching is case-insensitive; a blank query keeps every entry.
    """

    needle = query.strip().casefold()
    if not needle:
        return tuple(entries)
    return tuple(
        entry for entry in entries if needle in entry.name.casefold() or needle in entry.description.casefold()
    )


def render_preview(node: CommandNode) -> str:
    """Return the text shown when previewing ``node``.

    Args:
        node: Node to describe.

    Returns:
        str: Raw command text, script content with execution details, or a
        directory summary, always followed by the description.
    """

    command = node.command
    if isinstance(command, RawCommand):
        body = f"Raw Command:\n{command.text}"
    elif isinstance(command, LocalFileCommand):
        try:
            script = command.path.read_text(encoding=_SCRIPT_ENCODING, errors="replace")
            interpreter = " ".join(read_shebang(command.path)) or "(runs directly)"
        except OSError:
            script = f"Could not read script file: {command.path}"
            interpreter = "(unknown)"
        execution_info = "\n".join(
            (
                f"Interpreter: {interpreter}",
                f"Arguments: {' '.join(command.args)}",
                f"Script File: {command.path}",
            ),
        )
        body = f"Script Preview:\n{script}\n\nExecution Info:\n{execution_info}"
    else:
        body = f"Directory: {node.name}"
    return f"{body}\n\nDescription:\n{node.description}"


__all__ = ["EntryType", "EntryView", "filter_entries", "flatten_tab", "render_preview"]
