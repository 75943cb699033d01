# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from cmdcatalog.config import AppConfig, ConfigError, discover_config, load_config


def test_standalone_file_resolves_relative_paths(tmp_path: Path) -> None:
    config_path = tmp_path / "cmdcatalog.toml"
    config_path.write_text(
        'catalog_root = "defs"\nworking_directory = "/srv"\ntimeout_seconds = 30\n[env]\nLANG = "C"\n',
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.catalog_root == tmp_path.resolve() / "defs"
    assert config.working_directory == Path("/srv")
    assert config.timeout_seconds == 30
    assert config.env == {"LANG": "C"}
    assert config.shell == "sh"
    assert not config.skip_validation


def test_pyproject_table_is_read(tmp_path: Path) -> None:
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(
        '[project]\nname = "demo"\n\n[tool.cmdcatalog]\ncatalog_root = "catalog"\nskip_confirmation = true\n',
        encoding="utf-8",
    )

    config = load_config(pyproject)

    assert config.catalog_root == tmp_path.resolve() / "catalog"
    assert config.skip_confirmation


def test_overrides_win_and_none_overrides_are_ignored(tmp_path: Path) -> None:
    config_path = tmp_path / "cmdcatalog.toml"
    config_path.write_text('catalog_root = "defs"\nskip_validation = true\n', encoding="utf-8")

    config = load_config(config_path, overrides={"catalog_root": tmp_path / "other", "skip_validation": None})

    assert config.catalog_root == tmp_path / "other"
    assert config.skip_validation


@pytest.mark.parametrize(
    "body",
    [
        'catalog_root = "defs"\nunknown = 1\n',
        'catalog_root = "defs"\ntimeout_seconds = -1\n',
        'catalog_root = "defs"\nshell = " "\n',
        "skip_validation = true\n",
        "catalog_root = [broken\n",
    ],
)
def test_invalid_configuration_raises_config_error(tmp_path: Path, body: str) -> None:
    config_path = tmp_path / "cmdcatalog.toml"
    config_path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_path)


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot read"):
        load_config(tmp_path / "absent.toml")


def test_overrides_alone_build_a_config(tmp_path: Path) -> None:
    assert load_config(overrides={"catalog_root": tmp_path}) == AppConfig(catalog_root=tmp_path)


def test_discover_config_walks_up_and_prefers_standalone_files(tmp_path: Path) -> None:
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    (tmp_path / "pyproject.toml").write_text('[tool.cmdcatalog]\ncatalog_root = "defs"\n', encoding="utf-8")
    (tmp_path / "a" / "pyproject.toml").write_text('[project]\nname = "other"\n', encoding="utf-8")

    assert discover_config(nested) == (tmp_path / "pyproject.toml").resolve()

    (tmp_path / "cmdcatalog.toml").write_text('catalog_root = "defs"\n', encoding="utf-8")
    assert discover_config(nested) == (tmp_path / "cmdcatalog.toml").resolve()

