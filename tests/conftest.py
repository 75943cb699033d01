# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import pytest

from cmdcatalog.catalog.model_catalog import CommandNode
from cmdcatalog.catalog.model_command import NO_COMMAND, Command

PURGE_SCRIPT = '#!/bin/sh\necho "purged $*"\n'

JsonWriter = Callable[[Path, Any], Path]


def _write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


def make_node(
    name: str,
    command: Command = NO_COMMAND,
    *,
    path: tuple[str, ...] | None = None,
    source: Path | None = None,
    multi_select: bool = True,
    children: tuple[CommandNode, ...] = (),
) -> CommandNode:
    """Return a standalone node for executor and view tests."""

    return CommandNode(
        name=name,
        description=f"{name} description",
        command=command,
        task_list="",
        multi_select=multi_select,
        path=path or (name,),
        source=source,
        children=children,
    )


@pytest.fixture
def write_json() -> JsonWriter:
    """Return a helper writing JSON payloads to disk."""

    return _write_json


def build_sample_catalog(root: Path, extra: Mapping[str, Any] | None = None) -> Path:
    """Write the sample definition tree used across tests.

    Layout::

        apps/bundle.json             Browser, Editor (single-select)
        system/_tab.json             tab named "System"
        system/cleanup.json          group "Cleanup"
        system/cleanup/journal.json  raw command
        system/cleanup/tmp.json      script purge.sh with arguments
        system/cleanup/purge.sh
        system/update.json           raw command
    """

    _write_json(
        root / "apps" / "bundle.json",
        {
            "entries": [
                {"name": "Browser", "description": "Install a browser", "command": "echo browser", "taskList": "I"},
                {"name": "Editor", "description": "Install an editor", "command": "echo editor", "multiSelect": False},
            ],
        },
    )
    system = root / "system"
    _write_json(system / "_tab.json", {"name": "System"})
    _write_json(system / "cleanup.json", {"name": "Cleanup", "description": "Housekeeping tasks"})
    _write_json(
        system / "cleanup" / "journal.json",
        {"name": "Vacuum journal", "description": "Trim the journal", "command": "echo journal", "taskList": "P"},
    )
    _write_json(
        system / "cleanup" / "tmp.json",
        {"name": "Clear tmp", "description": "Remove temporary files", "command": "purge.sh --all", "taskList": "FM"},
    )
    script = system / "cleanup" / "purge.sh"
    script.write_text(PURGE_SCRIPT, encoding="utf-8")
    script.chmod(0o755)
    _write_json(
        system / "update.json",
        {"name": "Update", "description": "Refresh packages", "command": "echo updated", "taskList": "I MP"},
    )
    for relative, payload in (extra or {}).items():
        _write_json(root / relative, payload)
    return root


@pytest.fixture
def catalog_root(tmp_path: Path) -> Path:
    """Return a populated definition root."""

    return build_sample_catalog(tmp_path / "catalog")


@pytest.fixture
def node_factory() -> Callable[..., CommandNode]:
    """Return :func:`make_node` for tests that build nodes by hand."""

    return make_node


@pytest.fixture
def sample_catalog() -> Callable[..., Path]:
    """Return :func:`build_sample_catalog` for tests that extend the sample tree."""

    return build_sample_catalog
