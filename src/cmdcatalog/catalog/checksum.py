# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Checksum utilities for definition sources."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from pathlib import Path

from ..errors import SourceError


def compute_catalog_checksum(catalog_root: Path, paths: Sequence[Path]) -> str:
    """Calculate the checksum of the definition files under ``catalog_root``.

    Args:
        catalog_root: Root directory anchoring the definitions.
        paths: Sequence of paths contributing to the checksum.

    Returns:
        str: Hex-encoded SHA-256 checksum covering the provided files.

    Raises:
        SourceError: If one of the files cannot be read.
    """
    hasher = hashlib.sha256()
    for path in paths:
        relative_path = path.relative_to(catalog_root).as_posix().encode("utf-8")
        hasher.update(relative_path)
        hasher.update(b"\0")
        try:
            hasher.update(path.read_bytes())
        except OSError as exc:
            raise SourceError(path, f"unreadable ({exc.strerror or exc})") from exc
    return hasher.hexdigest()


__all__ = ["compute_catalog_checksum"]
