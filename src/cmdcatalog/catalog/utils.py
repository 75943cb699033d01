# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Utility helpers for validating and normalising record JSON structures."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..errors import DocumentError
from .types import JSONValue


def expect_string(value: JSONValue | None, *, key: str, context: str) -> str:
    """Return ``value`` coerced to ``str`` or raise a document error.

    Args:
        value: Raw JSON value extracted from the record payload.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        str: Value coerced to a string.

    Raises:
        DocumentError: If ``value`` is not a string.
    """
    if not isinstance(value, str):
        raise DocumentError(f"{context}: expected '{key}' to be a string")
    return value


def optional_string(value: JSONValue | None, *, key: str, context: str, default: str = "") -> str:
    """Return ``value`` as a string, falling back to ``default`` when absent.

    Args:
        value: Raw JSON value extracted from the record payload.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.
        default: Value returned when ``value`` is ``None``.

    Returns:
        str: ``value`` when present, otherwise ``default``.

    Raises:
        DocumentError: If ``value`` is present but not a string.
    """
    if value is None:
        return default
    if not isinstance(value, str):
        raise DocumentError(f"{context}: expected '{key}' to be a string if present")
    return value


def optional_bool(
    value: JSONValue | None,
    *,
    key: str,
    context: str,
    default: bool | None = None,
) -> bool:
    """Return ``value`` coerced to ``bool`` with an optional default.

    Args:
        value: Raw JSON value extracted from the record payload.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.
        default: Value returned when ``value`` is ``None``.

    Returns:
        bool: Boolean value derived from ``value`` or ``default``.

    Raises:
        DocumentError: If ``value`` is not ``None`` and not a bool,
            or ``value`` is ``None`` and no ``default`` was provided.
    """
    if value is None:
        if default is None:
            raise DocumentError(f"{context}: expected '{key}' to be a boolean")
        return default
    if isinstance(value, bool):
        return value
    raise DocumentError(f"{context}: expected '{key}' to be a boolean")


def string_array(value: JSONValue | None, *, key: str, context: str) -> tuple[str, ...]:
    """Return ``value`` as a tuple of strings with validation.

    Raises:
        DocumentError: If ``value`` is not a sequence of strings.
    """
    if value is None:
        return ()
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        raise DocumentError(f"{context}: expected '{key}' to be an array of strings")
    result: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise DocumentError(f"{context}: expected '{key}[{index}]' to be a string")
        result.append(item)
    return tuple(result)


def expect_mapping(value: JSONValue | None, *, key: str, context: str) -> Mapping[str, JSONValue]:
    """Return ``value`` as a mapping of JSON values or raise an error.

    Raises:
        DocumentError: If ``value`` is not a mapping.
    """
    if not isinstance(value, Mapping):
        raise DocumentError(f"{context}: expected '{key}' to be an object")
    return value


__all__ = [
    "expect_mapping",
    "expect_string",
    "optional_bool",
    "optional_string",
    "string_array",
]
