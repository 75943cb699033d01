# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Decode the short task-list labels attached to catalog entries."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Final

from .catalog.model_catalog import CommandNode, Tab

TASK_CODES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "D": "disk modifications",
        "FI": "flatpak installation",
        "FM": "file modification",
        "I": "installation",
        "K": "kernel modifications",
        "MP": "package manager actions",
        "P": "privileged",
        "RP": "package removal",
        "SS": "systemd actions",
    },
)
_LONGEST_CODE: Final[int] = max(len(code) for code in TASK_CODES)
_SEPARATORS: Final[re.Pattern[str]] = re.compile(r"[\s,;/+]+")


def _split_token(token: str) -> list[str]:
    """Split a compact token such as ``PFM`` into known codes.

    Returns the token unchanged as a single element when it cannot be
    decomposed entirely into known codes.
    """

    codes: list[str] = []
    index = 0
    while index < len(token):
        for width in range(min(_LONGEST_CODE, len(token) - index), 0, -1):
            candidate = token[index : index + width]
            if candidate in TASK_CODES:
                codes.append(candidate)
                index += width
                break
        else:
            return [token]
    return codes


def parse_task_list(label: str) -> tuple[str, ...]:
    """Return the task codes contained in ``label`` in declaration order.

    Args:
        label: Raw ``task_list`` label, e.g. ``"I SS"`` or ``"PFM"``.

    Returns:
        tuple[str, ...]: Codes with duplicates removed; unknown tokens are kept verbatim.
    """

    codes: list[str] = []
    for token in _SEPARATORS.split(label.strip().upper()):
        if not token:
            continue
        for code in _split_token(token):
            if code not in codes:
                codes.append(code)
    return tuple(codes)


def describe_task_list(label: str) -> tuple[str, ...]:
    """Return human-readable descriptions of the tasks in ``label``.

    Unknown codes are reported verbatim.
    """

    return tuple(TASK_CODES.get(code, code) for code in parse_task_list(label))


def group_by_task_list(nodes: Iterable[CommandNode]) -> dict[str, tuple[CommandNode, ...]]:
    """Group executable nodes by their raw task-list label.

    Nodes without a label are grouped under the empty string. Group order
    follows the first appearance of each label.
    """

    groups: dict[str, list[CommandNode]] = {}
    for node in nodes:
        if node.is_group:
            continue
        groups.setdefault(node.task_list.strip(), []).append(node)
    return {label: tuple(members) for label, members in groups.items()}


def tab_task_groups(tab: Tab) -> dict[str, tuple[CommandNode, ...]]:
    return group_by_task_list(tab.walk())


__all__ = ["TASK_CODES", "describe_task_list", "group_by_task_list", "parse_task_list", "tab_task_groups"]
