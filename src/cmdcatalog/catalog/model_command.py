# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Command variants attached to catalog nodes and the rule inferring them."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from functools import partial
from pathlib import Path, PurePath
from typing import ClassVar, Final, TypeAlias


class CommandKind(str, Enum):
    """Enumerate the command variants a node can carry."""

    RAW = "raw"
    LOCAL_FILE = "local_file"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class RawCommand:
    """Inline shell command executed verbatim through a shell interpreter."""

    kind: ClassVar[CommandKind] = CommandKind.RAW

    text: str

    @property
    def executable(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class LocalFileCommand:
    """Script file shipped beside the definition, invoked with positional arguments."""

    kind: ClassVar[CommandKind] = CommandKind.LOCAL_FILE

    path: Path
    args: tuple[str, ...] = ()

    @property
    def executable(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class NoCommand:
    """Marker for grouping nodes; never executable."""

    kind: ClassVar[CommandKind] = CommandKind.NONE

    @property
    def executable(self) -> bool:
        return False


Command: TypeAlias = RawCommand | LocalFileCommand | NoCommand
FileProbe: TypeAlias = Callable[[str], Path | None]

NO_COMMAND = NoCommand()
_SHELL_OPERATOR_CHARS: Final[frozenset[str]] = frozenset("();<>|&")
_SHELL_EXPANSION_CHARS: Final[frozenset[str]] = frozenset("$`*?[]{}~#\n")


def infer_command(text: str | None, probe: FileProbe) -> Command:
    """Return the command variant described by ``text``.

    Blank text marks a group. Plain text (no operators, redirections,
    expansions or globs) whose first word ``probe`` resolves to an adjacent
    file becomes a :class:`LocalFileCommand` carrying the remaining words as
    arguments. Everything else, including text that looks like a path to a
    missing file or cannot be tokenised, stays a :class:`RawCommand`.

    Args:
        text: Command text declared by the record, if any.
        probe: Callable resolving a relative token to an existing adjacent file.

    Returns:
        Command: Inferred command variant.
    """

    if text is None or not text.strip():
        return NO_COMMAND
    tokens = _plain_words(text)
    if not tokens:
        return RawCommand(text)
    head, *rest = tokens
    if PurePath(head).is_absolute():
        return RawCommand(text)
    resolved = probe(head)
    if resolved is None:
        return RawCommand(text)
    return LocalFileCommand(path=resolved, args=tuple(rest))


def _plain_words(text: str) -> list[str] | None:
    """Return the words of ``text``, or ``None`` when it needs a shell to run."""

    if any(char in _SHELL_EXPANSION_CHARS for char in text):
        return None
    lexer = shlex.shlex(text, posix=True, punctuation_chars=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    try:
        words = list(lexer)
    except ValueError:
        return None
    if any(word and set(word) <= _SHELL_OPERATOR_CHARS for word in words):
        return None
    return words


def adjacent_file_probe(base_dir: Path) -> FileProbe:
    """Return a probe resolving tokens to regular files beneath ``base_dir``.

    Args:
        base_dir: Directory containing the definition document.

    Returns:
        FileProbe: Probe returning the resolved path, or ``None`` when absent.
    """

    root = base_dir.resolve()
    return partial(_probe_file, root)


def _probe_file(root: Path, token: str) -> Path | None:
    candidate = (root / token).resolve()
    if not candidate.is_relative_to(root):
        return None
    return candidate if candidate.is_file() else None


__all__ = [
    "NO_COMMAND",
    "Command",
    "CommandKind",
    "FileProbe",
    "LocalFileCommand",
    "NoCommand",
    "RawCommand",
    "adjacent_file_probe",
    "infer_command",
]
