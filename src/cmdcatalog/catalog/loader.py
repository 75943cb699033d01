# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""High-level loader that materialises catalogs from a definition root."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import SourceError
from .builder import CatalogBuilder
from .checksum import compute_catalog_checksum
from .model_catalog import Catalog
from .reader import DefinitionReader

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CatalogLoader:
    """Run one reader pass and hand its output to the builder."""

    catalog_root: Path
    builder: CatalogBuilder = field(default_factory=CatalogBuilder)
    _reader: DefinitionReader = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Bind the definition reader to the catalog root."""

        self._reader = DefinitionReader(self.catalog_root)

    def load(self, *, validate: bool) -> Catalog:
        """Read the definition root and build a catalog snapshot.

        Args:
            validate: Whether the build enforces structural rules.

        Returns:
            Catalog: Freshly built catalog.

        Raises:
            SourceError: If the definition root or one of its files cannot be read.
            BuildError: Strict build rejecting the definitions.
        """

        items = self._reader.scan()
        checksum = self.compute_checksum()
        LOGGER.debug("loading catalog from %s (validate=%s)", self.catalog_root, validate)
        return self.builder.build(items, validate=validate, checksum=checksum)

    def compute_checksum(self) -> str:
        """Calculate a checksum representing the current definition files.

        Returns:
            str: Hex-encoded SHA-256 digest.

        Raises:
            SourceError: If the definition files cannot be enumerated or read.
        """

        try:
            paths = self._reader.scanner.catalog_files()
        except OSError as exc:
            raise SourceError(self.catalog_root, f"unreadable ({exc.strerror or exc})") from exc
        return compute_catalog_checksum(self.catalog_root, paths)


__all__ = ["CatalogLoader"]
