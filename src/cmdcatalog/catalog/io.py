# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading definition documents and the record schema."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from importlib import resources
from typing import Final, cast

from ..errors import DocumentError
from .types import JSONValue

SCHEMA_PACKAGE: Final[str] = "cmdcatalog.schema"
RECORD_SCHEMA_FILENAME: Final[str] = "record.schema.json"


def load_record_schema() -> Mapping[str, JSONValue]:
    """Load the packaged record schema and ensure it is a JSON object.

    Returns:
        Mapping[str, JSONValue]: Parsed JSON schema mapping.

    Raises:
        DocumentError: If the packaged schema is not a JSON object.
    """

    resource = resources.files(SCHEMA_PACKAGE).joinpath(RECORD_SCHEMA_FILENAME)
    text = resource.read_text(encoding="utf-8")
    context = f"{SCHEMA_PACKAGE}/{RECORD_SCHEMA_FILENAME}"
    return _ensure_json_object(parse_document(text, context=context), context=context)


def parse_document(text: str, *, context: str) -> JSONValue:
    """Parse ``text`` as JSON and validate the payload.

    Args:
        text: Raw document contents.
        context: Human-readable context used in error messages (usually the path).

    Returns:
        JSONValue: Parsed JSON value extracted from the document.

    Raises:
        DocumentError: If the document is not valid JSON.
    """

    try:
        payload = cast(JSONValue, json.loads(text))
    except json.JSONDecodeError as exc:
        raise DocumentError(f"{context}: failed to parse JSON ({exc.msg} at line {exc.lineno})") from exc
    return _ensure_json_value(payload, context=context)


def _ensure_json_object(value: JSONValue, *, context: str) -> Mapping[str, JSONValue]:
    """Ensure ``value`` is a JSON object, raising on type mismatch.

    Args:
        value: Parsed JSON payload to validate.
        context: Human-readable context string used in error messages.

    Returns:
        Mapping[str, JSONValue]: Validated JSON object.

    Raises:
        DocumentError: If ``value`` is not a mapping.
    """

    if not isinstance(value, Mapping):
        raise DocumentError(f"{context}: expected a JSON object")
    return value


def _ensure_json_value(value: JSONValue, *, context: str) -> JSONValue:
    """Ensure ``value`` is composed of JSON-compatible structures.

    Args:
        value: Parsed JSON payload to validate recursively.
        context: Human-readable context string used in error messages.

    Returns:
        JSONValue: Validated JSON value.

    Raises:
        DocumentError: If ``value`` contains unsupported JSON constructs.
    """

    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _ensure_json_value(item, context=f"{context}.{key}") for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_ensure_json_value(item, context=f"{context}[]") for item in value]
    raise DocumentError(f"{context}: value is not valid JSON")


__all__ = ["load_record_schema", "parse_document"]
