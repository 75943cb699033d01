# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Raw items produced by the definition reader."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

from .types import JSONValue


@dataclass(frozen=True, slots=True)
class TabHeader:
    """Announce a tab directory; emitted before the tab's records, even when it has none."""

    name: str
    directory: Path


@dataclass(frozen=True, slots=True)
class RawRecord:
    """Unvalidated record read from a definition document."""

    tab_directory: Path
    key: tuple[str, ...]
    source: Path
    data: Mapping[str, JSONValue]

    @property
    def base_dir(self) -> Path:
        """Return the directory that relative script references resolve against."""

        return self.source.parent

    @property
    def label(self) -> str:
        """Return a short location string used in diagnostics."""

        return "/".join(self.key)


@dataclass(frozen=True, slots=True)
class RecordParseFailure:
    """Describe a definition document that could not be turned into records."""

    tab_directory: Path
    source: Path
    message: str


SourceItem: TypeAlias = TabHeader | RawRecord | RecordParseFailure

__all__ = ["RawRecord", "RecordParseFailure", "SourceItem", "TabHeader"]
