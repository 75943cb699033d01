# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Definition source reader turning a directory tree into raw records."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from ..errors import DocumentError, SourceError
from .io import parse_document
from .model_record import RawRecord, RecordParseFailure, SourceItem, TabHeader
from .scanner import CatalogScanner
from .types import ENTRIES_KEY, JSONValue

LOGGER = logging.getLogger(__name__)

_DIRECTORIES_KEY: Final[str] = "directories"
_NAME_KEY: Final[str] = "name"


def _read_text(path: Path) -> str:
    """Return the UTF-8 contents of ``path``.

    Raises:
        DocumentError: If the bytes are not valid UTF-8.
        SourceError: If the file cannot be read.
    """

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentError(f"{path}: not valid UTF-8") from exc
    except OSError as exc:
        raise SourceError(path, f"unreadable ({exc.strerror or exc})") from exc


@dataclass(slots=True)
class DefinitionReader:
    """Enumerate tab directories and read their definition documents."""

    catalog_root: Path
    _scanner: CatalogScanner = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Bind the filesystem scanner to the catalog root."""

        self._scanner = CatalogScanner(self.catalog_root)

    @property
    def scanner(self) -> CatalogScanner:
        """Return the scanner used to enumerate definition files."""

        return self._scanner

    def scan(self) -> Iterator[SourceItem]:
        """Return a lazy iterator over tab headers, records, and parse failures.

        The root and the tab ordering are checked eagerly; documents are read
        lazily while iterating.

        Returns:
            Iterator[SourceItem]: Items in stable lexicographic order.

        Raises:
            SourceError: If the root is missing, not a directory, or unreadable.
        """

        if not self.catalog_root.exists():
            raise SourceError(self.catalog_root, "definition root does not exist")
        if not self.catalog_root.is_dir():
            raise SourceError(self.catalog_root, "definition root is not a directory")
        try:
            tabs = self._ordered_tabs()
        except OSError as exc:
            raise SourceError(self.catalog_root, f"unreadable ({exc.strerror or exc})") from exc
        LOGGER.debug("scanning %d tab director(ies) under %s", len(tabs), self.catalog_root)
        return self._iter_items(tabs)

    def _iter_items(self, tabs: Sequence[Path]) -> Iterator[SourceItem]:
        for directory in tabs:
            name, failure = self._tab_name(directory)
            yield TabHeader(name=name, directory=directory)
            if failure is not None:
                yield failure
            try:
                documents = self._scanner.record_documents(directory)
            except OSError as exc:
                raise SourceError(directory, f"unreadable ({exc.strerror or exc})") from exc
            for path in documents:
                yield from self._read_records(directory, path)

    def _ordered_tabs(self) -> tuple[Path, ...]:
        """Return tab directories, honouring the optional ordering document."""

        discovered = self._scanner.tab_directories()
        order_path = self._scanner.tab_order()
        if order_path is None:
            return discovered
        try:
            payload = parse_document(_read_text(order_path), context=str(order_path))
        except DocumentError as exc:
            raise SourceError(order_path, str(exc)) from exc
        declared = payload.get(_DIRECTORIES_KEY) if isinstance(payload, Mapping) else None
        if not isinstance(declared, Sequence) or isinstance(declared, str):
            raise SourceError(order_path, f"expected '{_DIRECTORIES_KEY}' to be an array of strings")
        ordered: list[Path] = []
        for entry in declared:
            if not isinstance(entry, str):
                raise SourceError(order_path, f"expected '{_DIRECTORIES_KEY}' to be an array of strings")
            directory = self.catalog_root / entry
            if directory not in discovered:
                raise SourceError(order_path, f"declared tab directory '{entry}' does not exist")
            if directory not in ordered:
                ordered.append(directory)
        ordered.extend(directory for directory in discovered if directory not in ordered)
        return tuple(ordered)

    def _tab_name(self, directory: Path) -> tuple[str, RecordParseFailure | None]:
        """Return the display name of the tab stored in ``directory``."""

        metadata_path = self._scanner.tab_metadata(directory)
        if metadata_path is None:
            return directory.name, None
        try:
            payload = parse_document(_read_text(metadata_path), context=str(metadata_path))
        except DocumentError as exc:
            return directory.name, RecordParseFailure(directory, metadata_path, str(exc))
        name = payload.get(_NAME_KEY) if isinstance(payload, Mapping) else None
        if not isinstance(name, str) or not name.strip():
            message = f"{metadata_path}: expected '{_NAME_KEY}' to be a non-empty string"
            return directory.name, RecordParseFailure(directory, metadata_path, message)
        return name, None

    def _read_records(self, tab_directory: Path, path: Path) -> Iterator[RawRecord | RecordParseFailure]:
        """Yield the records stored in ``path``, or a single parse failure."""

        try:
            payload = parse_document(_read_text(path), context=str(path))
        except DocumentError as exc:
            yield RecordParseFailure(tab_directory, path, str(exc))
            return
        if not isinstance(payload, Mapping):
            yield RecordParseFailure(tab_directory, path, f"{path}: expected a JSON object")
            return
        key = path.relative_to(tab_directory).with_suffix("").parts
        if ENTRIES_KEY not in payload:
            yield RawRecord(tab_directory=tab_directory, key=key, source=path, data=payload)
            return
        yield from self._read_entries(tab_directory, path, key, payload)

    @staticmethod
    def _read_entries(
        tab_directory: Path,
        path: Path,
        key: tuple[str, ...],
        payload: Mapping[str, JSONValue],
    ) -> Iterator[RawRecord | RecordParseFailure]:
        """Yield sibling records declared in an ``entries`` document."""

        extra = sorted(name for name in payload if name != ENTRIES_KEY)
        entries = payload[ENTRIES_KEY]
        if extra:
            yield RecordParseFailure(tab_directory, path, f"{path}: unexpected keys beside '{ENTRIES_KEY}': {extra}")
            return
        if not isinstance(entries, Sequence) or isinstance(entries, str):
            yield RecordParseFailure(tab_directory, path, f"{path}: expected '{ENTRIES_KEY}' to be an array")
            return
        *parents, stem = key
        for index, entry in enumerate(entries):
            if not isinstance(entry, Mapping):
                message = f"{path}: expected '{ENTRIES_KEY}[{index}]' to be an object"
                yield RecordParseFailure(tab_directory, path, message)
                continue
            entry_key = (*parents, f"{stem}[{index}]")
            yield RawRecord(tab_directory=tab_directory, key=entry_key, source=path, data=entry)


__all__ = ["DefinitionReader"]
