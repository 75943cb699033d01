# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command catalog engine: load tabs of entries from disk and run them."""

from __future__ import annotations

from importlib import metadata

from .catalog import Catalog, CommandNode, Tab
from .config import AppConfig, ConfigError, load_config
from .errors import CatalogError
from .execution import ExecutionOptions, ExecutionResult
from .service import CommandCenter

__all__ = [
    "AppConfig",
    "Catalog",
    "CatalogError",
    "CommandCenter",
    "CommandNode",
    "ConfigError",
    "ExecutionOptions",
    "ExecutionResult",
    "Tab",
    "__version__",
    "load_config",
]

try:
    __version__ = metadata.version("cmdcatalog")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
