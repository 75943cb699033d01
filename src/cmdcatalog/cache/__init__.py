# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Catalog snapshot caching."""

from __future__ import annotations

from .snapshot import CacheStats, CatalogCache, CatalogSource

__all__ = ["CacheStats", "CatalogCache", "CatalogSource"]
