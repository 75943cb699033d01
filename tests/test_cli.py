# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the Typer command-line adapter."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from cmdcatalog.cli.app import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _invoke(runner: CliRunner, root: Path, *args: str, input: str | None = None):
    return runner.invoke(app, ["--root", str(root), "--no-emoji", *args], input=input)


def test_tabs_lists_every_tab(runner: CliRunner, catalog_root: Path) -> None:
    result = _invoke(runner, catalog_root, "tabs")

    assert result.exit_code == 0, result.output
    assert "apps" in result.output
    assert "System" in result.output


def test_list_filters_entries(runner: CliRunner, catalog_root: Path) -> None:
    result = _invoke(runner, catalog_root, "list", "System", "--search", "journal")

    assert result.exit_code == 0, result.output
    assert "Vacuum journal" in result.output
    assert "Update" not in result.output


def test_list_unknown_tab_fails(runner: CliRunner, catalog_root: Path) -> None:
    result = _invoke(runner, catalog_root, "list", "Nowhere")

    assert result.exit_code == 1
    assert "no tab named 'Nowhere'" in result.output


def test_show_prints_the_preview(runner: CliRunner, catalog_root: Path) -> None:
    result = _invoke(runner, catalog_root, "show", "System", "Update")

    assert result.exit_code == 0, result.output
    assert "Raw Command:\necho updated" in result.output
    assert "Refresh packages" in result.output


def test_run_executes_entries_by_name_and_path(runner: CliRunner, catalog_root: Path) -> None:
    result = _invoke(runner, catalog_root, "run", "System", "Update", "Cleanup/Clear tmp", "--yes")

    assert result.exit_code == 0, result.output
    assert "updated" in result.output
    assert "purged --all" in result.output
    assert "Cleanup/Clear tmp finished" in result.output


def test_run_stops_after_a_failure_and_exits_non_zero(runner: CliRunner, catalog_root: Path, write_json) -> None:
    write_json(catalog_root / "system" / "broken.json", {"name": "Broken", "command": "exit 4"})

    result = _invoke(runner, catalog_root, "run", "System", "Broken", "Update", "--yes")

    assert result.exit_code == 1
    assert "Broken exited with status 4" in result.output
    assert "skipped 1" in result.output
    assert "updated" not in result.output


def test_run_can_continue_after_a_failure(runner: CliRunner, catalog_root: Path, write_json) -> None:
    write_json(catalog_root / "system" / "broken.json", {"name": "Broken", "command": "exit 4"})

    result = _invoke(runner, catalog_root, "run", "System", "Broken", "Update", "--yes", "--continue-on-error")

    assert result.exit_code == 1
    assert "updated" in result.output


def test_run_refuses_single_select_entries_in_a_batch(runner: CliRunner, catalog_root: Path) -> None:
    result = _invoke(runner, catalog_root, "run", "apps", "Browser", "Editor", "--yes")

    assert result.exit_code == 1
    assert "cannot run in a multi-selection: Editor" in result.output


def test_run_shows_results_collected_before_a_spawn_failure(runner: CliRunner, catalog_root: Path, write_json) -> None:
    write_json(catalog_root / "system" / "noexec.json", {"name": "NoExec", "command": "noexec.sh"})
    (catalog_root / "system" / "noexec.sh").write_text("echo unreachable\n", encoding="utf-8")

    result = _invoke(runner, catalog_root, "run", "System", "Update", "NoExec", "--yes")

    assert result.exit_code == 1
    assert "updated" in result.output
    assert "Update finished" in result.output
    assert "batch aborted at 'NoExec'" in result.output


def test_run_asks_for_confirmation(runner: CliRunner, catalog_root: Path) -> None:
    declined = _invoke(runner, catalog_root, "run", "System", "Update", input="n\n")
    accepted = _invoke(runner, catalog_root, "run", "System", "Update", input="y\n")

    assert declined.exit_code == 1
    assert "updated" not in declined.output
    assert accepted.exit_code == 0, accepted.output
    assert "updated" in accepted.output


def test_check_reports_a_valid_catalog(runner: CliRunner, catalog_root: Path) -> None:
    result = _invoke(runner, catalog_root, "check")

    assert result.exit_code == 0, result.output
    assert "catalog valid: 2 tab(s), 6 entr(ies)" in result.output


def test_check_reports_structural_errors(runner: CliRunner, catalog_root: Path, write_json) -> None:
    write_json(catalog_root / "system" / "zz.json", {"name": "Update", "command": "true"})

    strict = _invoke(runner, catalog_root, "check")
    tolerant = _invoke(runner, catalog_root, "--skip-validation", "tabs")

    assert strict.exit_code == 1
    assert "duplicate name 'Update'" in strict.output
    assert tolerant.exit_code == 0, tolerant.output
    assert "shadows" in tolerant.output


def test_config_file_supplies_the_root_and_confirmation(runner: CliRunner, catalog_root: Path, tmp_path: Path) -> None:
    config_path = tmp_path / "cmdcatalog.toml"
    config_path.write_text(f'catalog_root = "{catalog_root}"\nskip_confirmation = true\n', encoding="utf-8")

    result = runner.invoke(app, ["--config", str(config_path), "--no-emoji", "run", "System", "Update"])

    assert result.exit_code == 0, result.output
    assert "updated" in result.output


def test_invalid_config_is_reported(runner: CliRunner, tmp_path: Path) -> None:
    config_path = tmp_path / "cmdcatalog.toml"
    config_path.write_text("timeout_seconds = -5\n", encoding="utf-8")

    result = runner.invoke(app, ["--config", str(config_path), "--no-emoji", "tabs"])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_missing_root_is_reported(runner: CliRunner, tmp_path: Path) -> None:
    result = _invoke(runner, tmp_path / "missing", "tabs")

    assert result.exit_code == 1
    assert "definition root does not exist" in result.output
