# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Thread-safe holder for the most recent catalog snapshot.

Two locks cooperate here. The state lock only guards reads and writes of the
snapshot slots, so a caller holding a cached catalog never waits on a build.
The build lock serialises builds, so at most one reader pass runs at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import Lock
from typing import Protocol

from ..catalog.model_catalog import Catalog

LOGGER = logging.getLogger(__name__)


class CatalogSource(Protocol):
    """Anything able to build a fresh catalog on demand."""

    def load(self, *, validate: bool) -> Catalog:
        """Return a freshly built catalog."""


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Describe cache activity.

    Attributes:
        builds: Number of builds that completed and were committed.
        hits: Number of lookups served from a cached snapshot.
        cached_modes: Validation modes that currently hold a snapshot.
    """

    builds: int
    hits: int
    cached_modes: tuple[bool, ...]


@dataclass(slots=True)
class CatalogCache:
    """Serve one shared catalog snapshot per validation mode."""

    source: CatalogSource
    _slots: dict[bool, Catalog] = field(default_factory=dict, init=False, repr=False)
    _state_lock: Lock = field(default_factory=Lock, init=False, repr=False)
    _build_lock: Lock = field(default_factory=Lock, init=False, repr=False)
    _builds: int = field(default=0, init=False, repr=False)
    _hits: int = field(default=0, init=False, repr=False)

    def get_or_build(self, *, validate: bool) -> Catalog:
        """Return the cached catalog for ``validate``, building it on first access.

        Args:
            validate: Validation mode of the requested snapshot.

        Returns:
            Catalog: Shared immutable snapshot.

        Raises:
            CatalogError: Propagated from the build when no snapshot exists yet.
        """

        cached = self._lookup(validate)
        if cached is not None:
            return cached
        with self._build_lock:
            # Another thread may have committed while this one waited.
            cached = self._lookup(validate)
            if cached is not None:
                return cached
            return self._build_and_commit(validate)

    def refresh(self, *, validate: bool) -> Catalog:
        """Rebuild the catalog for ``validate`` from a fresh reader pass.

        The previous snapshot stays in place, and is still served to readers,
        until the new build commits. A failed build leaves it untouched.

        Args:
            validate: Validation mode of the snapshot to rebuild.

        Returns:
            Catalog: Newly committed snapshot.

        Raises:
            CatalogError: Propagated from the build.
        """

        with self._build_lock:
            return self._build_and_commit(validate)

    def peek(self, *, validate: bool) -> Catalog | None:
        """Return the cached snapshot for ``validate`` without building."""

        with self._state_lock:
            return self._slots.get(validate)

    def clear(self) -> None:
        """Drop every cached snapshot; the next lookup rebuilds."""

        with self._state_lock:
            self._slots.clear()
        LOGGER.debug("catalog cache cleared")

    def stats(self) -> CacheStats:
        with self._state_lock:
            return CacheStats(builds=self._builds, hits=self._hits, cached_modes=tuple(sorted(self._slots)))

    def _lookup(self, validate: bool) -> Catalog | None:
        with self._state_lock:
            cached = self._slots.get(validate)
            if cached is not None:
                self._hits += 1
            return cached

    def _build_and_commit(self, validate: bool) -> Catalog:
        """Build outside the state lock, then swap the slot atomically."""

        catalog = self.source.load(validate=validate)
        with self._state_lock:
            self._slots[validate] = catalog
            self._builds += 1
        LOGGER.debug("committed catalog snapshot %s (validate=%s)", catalog.checksum[:12], validate)
        return catalog


__all__ = ["CacheStats", "CatalogCache", "CatalogSource"]
