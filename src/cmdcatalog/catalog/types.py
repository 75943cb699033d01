# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for the command catalog."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

RECORD_SUFFIX: Final[str] = ".json"
METADATA_PREFIX: Final[str] = "_"
TAB_METADATA_FILENAME: Final[str] = "_tab.json"
TAB_ORDER_FILENAME: Final[str] = "tabs.json"
ENTRIES_KEY: Final[str] = "entries"

__all__ = [
    "ENTRIES_KEY",
    "METADATA_PREFIX",
    "RECORD_SUFFIX",
    "TAB_METADATA_FILENAME",
    "TAB_ORDER_FILENAME",
    "JSONPrimitive",
    "JSONValue",
]
