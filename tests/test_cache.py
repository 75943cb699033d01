# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the catalog snapshot cache."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from cmdcatalog.cache import CatalogCache
from cmdcatalog.catalog.model_catalog import Catalog
from cmdcatalog.errors import SourceError


class CountingSource:
    """Catalog source returning a distinct catalog for every build."""

    def __init__(self) -> None:
        self.calls: list[bool] = []
        self.fail_next = False
        self.entered = threading.Event()
        self.release: threading.Event | None = None

    def load(self, *, validate: bool) -> Catalog:
        self.calls.append(validate)
        self.entered.set()
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.fail_next:
            self.fail_next = False
            raise SourceError(Path("/defs"), "gone")
        return Catalog(tabs=(), validated=validate, checksum=f"build-{len(self.calls)}")


def test_first_access_builds_and_later_access_hits_cache() -> None:
    source = CountingSource()
    cache = CatalogCache(source)

    first = cache.get_or_build(validate=True)
    second = cache.get_or_build(validate=True)

    assert first is second
    assert source.calls == [True]
    stats = cache.stats()
    assert (stats.builds, stats.hits, stats.cached_modes) == (1, 1, (True,))


def test_validation_modes_are_cached_separately() -> None:
    source = CountingSource()
    cache = CatalogCache(source)

    strict = cache.get_or_build(validate=True)
    tolerant = cache.get_or_build(validate=False)

    assert strict.validated and not tolerant.validated
    assert cache.peek(validate=True) is strict
    assert cache.peek(validate=False) is tolerant


def test_refresh_replaces_snapshot_and_failure_keeps_previous() -> None:
    source = CountingSource()
    cache = CatalogCache(source)
    original = cache.get_or_build(validate=True)

    refreshed = cache.refresh(validate=True)
    assert refreshed is not original
    assert cache.get_or_build(validate=True) is refreshed

    source.fail_next = True
    with pytest.raises(SourceError):
        cache.refresh(validate=True)
    assert cache.peek(validate=True) is refreshed


def test_failed_first_build_caches_nothing() -> None:
    source = CountingSource()
    source.fail_next = True
    cache = CatalogCache(source)

    with pytest.raises(SourceError):
        cache.get_or_build(validate=True)

    assert cache.peek(validate=True) is None
    assert cache.get_or_build(validate=True).checksum == "build-2"


def test_clear_forces_a_rebuild() -> None:
    source = CountingSource()
    cache = CatalogCache(source)
    cache.get_or_build(validate=False)

    cache.clear()

    assert cache.peek(validate=False) is None
    cache.get_or_build(validate=False)
    assert source.calls == [False, False]


def test_readers_are_served_the_old_snapshot_during_a_refresh() -> None:
    source = CountingSource()
    cache = CatalogCache(source)
    stale = cache.get_or_build(validate=True)
    source.entered.clear()
    source.release = threading.Event()

    with ThreadPoolExecutor(max_workers=1) as pool:
        pending = pool.submit(cache.refresh, validate=True)
        assert source.entered.wait(timeout=5)
        readers = [cache.get_or_build(validate=True) for _ in range(5)]
        source.release.set()
        fresh = pending.result(timeout=5)

    assert all(reader is stale for reader in readers)
    assert fresh is not stale
    assert cache.get_or_build(validate=True) is fresh


def test_concurrent_first_access_builds_once() -> None:
    source = CountingSource()
    cache = CatalogCache(source)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: cache.get_or_build(validate=True), range(16)))

    assert len({id(result) for result in results}) == 1
    assert source.calls == [True]
