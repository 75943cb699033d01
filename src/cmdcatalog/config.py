# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and TOML loading for the command catalog."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_FILENAME: Final[str] = "cmdcatalog.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "cmdcatalog"
_PATH_KEYS: Final[tuple[str, ...]] = ("catalog_root", "working_directory")


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class AppConfig(BaseModel):
    """Settings shared by the service facade and the CLI."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    catalog_root: Path
    working_directory: Path | None = None
    skip_validation: bool = False
    skip_confirmation: bool = False
    continue_on_error: bool = False
    timeout_seconds: float | None = Field(default=None, ge=0)
    shell: str = "sh"
    env: dict[str, str] = Field(default_factory=dict)

    @field_validator("shell")
    @classmethod
    def _non_empty_shell(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("shell must not be empty")
        return value


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, Any]:
        """Return the table of settings stored in the document.

        Raises:
            ConfigError: If the file cannot be read or is not valid TOML.
        """

        try:
            with self.path.open("rb") as handle:
                data = tomllib.load(handle)
        except OSError as exc:
            raise ConfigError(f"Cannot read configuration at {self.path}: {exc.strerror or exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {self.path}: {exc}") from exc
        return dict(data)

    def describe(self) -> str:
        return f"TOML configuration at {self.path}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.cmdcatalog]`` within ``pyproject.toml``."""

    def load(self) -> dict[str, Any]:
        data = super().load()
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return dict(section)

    def describe(self) -> str:
        return f"pyproject.toml ({self.path})"


def source_for(path: Path) -> TomlConfigSource:
    """Return the configuration source matching the file name of ``path``."""

    if path.name == PYPROJECT_FILENAME:
        return PyProjectConfigSource(path)
    return TomlConfigSource(path)


def has_section(path: Path) -> bool:
    """Return whether ``path`` is a pyproject declaring a ``[tool.cmdcatalog]`` table."""

    try:
        return bool(PyProjectConfigSource(path).load())
    except ConfigError:
        return False


def discover_config(start: Path) -> Path | None:
    """Find the nearest configuration file at or above ``start``.

    ``cmdcatalog.toml`` wins over a ``pyproject.toml`` in the same directory;
    a pyproject only counts when it declares a ``[tool.cmdcatalog]`` table.

    Args:
        start: Directory (or file) where the search begins.

    Returns:
        Path | None: Configuration file, or ``None`` when none was found.
    """

    origin = start.resolve()
    directory = origin if origin.is_dir() else origin.parent
    for candidate_dir in (directory, *directory.parents):
        standalone = candidate_dir / CONFIG_FILENAME
        if standalone.is_file():
            return standalone
        pyproject = candidate_dir / PYPROJECT_FILENAME
        if pyproject.is_file() and has_section(pyproject):
            return pyproject
    return None


def load_config(path: Path | None = None, *, overrides: Mapping[str, Any] | None = None) -> AppConfig:
    """Build an :class:`AppConfig` from ``path`` and ``overrides``.

    Relative paths in the file resolve against the file's directory. Override
    values replace file values; ``None`` overrides are ignored.

    Args:
        path: Configuration file; ``None`` relies on ``overrides`` alone.
        overrides: Settings supplied by the caller (for example CLI flags).

    Returns:
        AppConfig: Validated configuration.

    Raises:
        ConfigError: If the file is unreadable or the settings are invalid.
    """

    data: dict[str, Any] = {}
    if path is not None:
        data = source_for(path).load()
        base_dir = path.resolve().parent
        for key in _PATH_KEYS:
            value = data.get(key)
            if isinstance(value, str):
                candidate = Path(value).expanduser()
                data[key] = candidate if candidate.is_absolute() else base_dir / candidate
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        location = f" in {path}" if path is not None else ""
        raise ConfigError(f"Invalid configuration{location}: {exc}") from exc


__all__ = [
    "CONFIG_FILENAME",
    "AppConfig",
    "ConfigError",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "discover_config",
    "load_config",
]
