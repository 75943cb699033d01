# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem scanning utilities for the definition source."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .types import METADATA_PREFIX, RECORD_SUFFIX, TAB_METADATA_FILENAME, TAB_ORDER_FILENAME


def path_sort_key(path: Path, root: Path) -> tuple[str, ...]:
    """Return the lexicographic ordering key of ``path`` relative to ``root``."""

    return path.relative_to(root).parts


@dataclass(slots=True)
class CatalogScanner:
    """Scan the definition root for tab directories and record documents."""

    catalog_root: Path

    def tab_directories(self) -> tuple[Path, ...]:
        """Return tab directories sorted by name.

        Returns:
            tuple[Path, ...]: Immediate subdirectories of the root, hidden ones excluded.
        """

        candidates = (path for path in self.catalog_root.iterdir() if path.is_dir())
        return tuple(sorted(path for path in candidates if not path.name.startswith(".")))

    def record_documents(self, tab_directory: Path) -> tuple[Path, ...]:
        """Return record documents beneath ``tab_directory`` in stable order.

        Args:
            tab_directory: Directory holding one tab's definitions.

        Returns:
            tuple[Path, ...]: Record document paths sorted by their relative parts.
        """

        paths: list[Path] = []
        for json_path in tab_directory.rglob(f"*{RECORD_SUFFIX}"):
            if not json_path.is_file():
                continue
            relative = json_path.relative_to(tab_directory)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if json_path.name.startswith(METADATA_PREFIX):
                continue
            paths.append(json_path)
        return tuple(sorted(paths, key=lambda path: path_sort_key(path, tab_directory)))

    def tab_metadata(self, tab_directory: Path) -> Path | None:
        """Return the optional tab metadata document for ``tab_directory``."""

        candidate = tab_directory / TAB_METADATA_FILENAME
        return candidate if candidate.is_file() else None

    def tab_order(self) -> Path | None:
        """Return the optional tab ordering document at the root."""

        candidate = self.catalog_root / TAB_ORDER_FILENAME
        return candidate if candidate.is_file() else None

    def catalog_files(self) -> tuple[Path, ...]:
        """Return all files contributing to the catalog checksum.

        Returns:
            tuple[Path, ...]: Ordering document, tab metadata, and record documents.
        """

        paths: list[Path] = []
        order = self.tab_order()
        if order is not None:
            paths.append(order)
        for tab_directory in self.tab_directories():
            metadata = self.tab_metadata(tab_directory)
            if metadata is not None:
                paths.append(metadata)
            paths.extend(self.record_documents(tab_directory))
        return tuple(sorted(_dedupe(paths), key=lambda path: path_sort_key(path, self.catalog_root)))


def _dedupe(paths: Iterable[Path]) -> Sequence[Path]:
    """Return ``paths`` with duplicates removed while preserving order.

    Args:
        paths: Iterable of filesystem paths that may contain duplicates.

    Returns:
        Sequence[Path]: Ordered sequence containing the first instance of each path.
    """
    seen: set[Path] = set()
    ordered: list[Path] = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        ordered.append(path)
    return ordered


__all__ = ["CatalogScanner", "path_sort_key"]
