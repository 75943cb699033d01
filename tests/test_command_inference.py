# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for command variant inference."""

from __future__ import annotations

from pathlib import Path

import pytest

from cmdcatalog.catalog.model_command import (
    NO_COMMAND,
    CommandKind,
    LocalFileCommand,
    RawCommand,
    adjacent_file_probe,
    infer_command,
)


def _never(_token: str) -> Path | None:
    return None


@pytest.mark.parametrize("text", [None, "", "   \n"])
def test_blank_text_is_a_group(text: str | None) -> None:
    command = infer_command(text, _never)

    assert command is NO_COMMAND
    assert command.kind is CommandKind.NONE
    assert not command.executable


def test_token_resolved_by_probe_becomes_local_file() -> None:
    script = Path("/defs/install.sh")

    command = infer_command("install.sh --fast 'two words'", {"install.sh": script}.get)

    assert command == LocalFileCommand(path=script, args=("--fast", "two words"))
    assert command.executable


@pytest.mark.parametrize(
    "text",
    [
        "sudo apt-get update && sudo apt-get upgrade -y",
        "/usr/bin/env true",
        "echo 'unterminated",
        "missing.sh --flag",
    ],
)
def test_everything_else_stays_raw(text: str) -> None:
    assert infer_command(text, _never) == RawCommand(text)


def test_absolute_paths_are_never_probed() -> None:
    probed: list[str] = []

    def probe(token: str) -> Path | None:
        probed.append(token)
        return Path(token)

    assert infer_command("/opt/tool run", probe) == RawCommand("/opt/tool run")
    assert probed == []


def test_adjacent_probe_finds_regular_files_only(tmp_path: Path) -> None:
    (tmp_path / "setup.sh").write_text("#!/bin/sh\n", encoding="utf-8")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "step.sh").write_text("echo\n", encoding="utf-8")
    probe = adjacent_file_probe(tmp_path)

    assert probe("setup.sh") == (tmp_path / "setup.sh").resolve()
    assert probe("nested/step.sh") == (tmp_path / "nested" / "step.sh").resolve()
    assert probe("nested") is None
    assert probe("absent.sh") is None


def test_adjacent_probe_rejects_escaping_paths(tmp_path: Path) -> None:
    definitions = tmp_path / "defs"
    definitions.mkdir()
    (tmp_path / "outside.sh").write_text("echo\n", encoding="utf-8")

    probe = adjacent_file_probe(definitions)

    assert probe("../outside.sh") is None
    assert infer_command("../outside.sh", probe) == RawCommand("../outside.sh")


@pytest.mark.parametrize(
    "text",
    [
        "purge.sh && echo done",
        "purge.sh || true",
        "purge.sh; echo next",
        "purge.sh | tee log",
        "purge.sh > out.log",
        "purge.sh < input",
        "purge.sh &",
        "purge.sh&&echo done",
        "purge.sh $HOME",
        "purge.sh `id -u`",
        "purge.sh *.tmp",
        "purge.sh\necho second",
    ],
)
def test_shell_syntax_keeps_adjacent_script_raw(text: str) -> None:
    script = Path("/defs/purge.sh")

    assert infer_command(text, {"purge.sh": script}.get) == RawCommand(text)


def test_quoted_operators_are_plain_arguments() -> None:
    script = Path("/defs/purge.sh")

    command = infer_command("purge.sh 'a;b' \"c d\"", {"purge.sh": script}.get)

    assert command == LocalFileCommand(path=script, args=("a;b", "c d"))
