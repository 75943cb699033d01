# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared CLI state, logging adapter, and error reporting."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from ..catalog.model_catalog import NodeRef
from ..config import AppConfig, ConfigError, discover_config, load_config
from ..console import detect_tty, get_console_manager
from ..errors import CatalogError
from ..logging import fail as core_fail
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import warn as core_warn
from ..service import CommandCenter

ENTRY_SEPARATOR = "/"


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    use_emoji: bool

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout verbatim."""

        typer.echo(message)

    @property
    def console(self) -> Console:
        return get_console_manager().get(color=detect_tty(), emoji=self.use_emoji)


@dataclass(slots=True)
class CLIState:
    """Global options captured by the app callback; the facade is built lazily."""

    root: Path | None
    config_path: Path | None
    skip_validation: bool
    logger: CLILogger
    _center: CommandCenter | None = field(default=None, init=False, repr=False)

    @property
    def center(self) -> CommandCenter:
        """Return the facade, loading configuration on first use.

        Raises:
            CLIError: If no catalog root can be determined.
            ConfigError: If the configuration is invalid.
        """

        if self._center is None:
            self._center = CommandCenter(self.load_config())
        return self._center

    @property
    def config(self) -> AppConfig:
        return self.center.config

    def load_config(self) -> AppConfig:
        """Resolve configuration from ``--config``, ``--root``, or discovery."""

        overrides: dict[str, Any] = {
            "catalog_root": self.root,
            "skip_validation": True if self.skip_validation else None,
        }
        config_path = self.config_path
        if config_path is None and self.root is None:
            config_path = discover_config(Path.cwd())
        if config_path is None and self.root is None:
            raise CLIError("no catalog root configured; pass --root or create cmdcatalog.toml")
        return load_config(config_path, overrides=overrides)


def get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):  # pragma: no cover - callback always sets it
        raise CLIError("CLI state was not initialised")
    return state


def parse_entry_ref(text: str) -> NodeRef:
    """Return a path tuple for ``a/b/c`` or the bare leaf name otherwise."""

    if ENTRY_SEPARATOR in text:
        return tuple(part for part in text.split(ENTRY_SEPARATOR) if part)
    return text


@contextmanager
def report_errors(logger: CLILogger) -> Iterator[None]:
    """Translate library errors into a failure line and a non-zero exit.

    Raises:
        typer.Exit: When the wrapped block raised a catalog, config, or CLI error.
    """

    try:
        yield
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except (CatalogError, ConfigError) as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc


__all__ = ["CLIError", "CLILogger", "CLIState", "get_state", "parse_entry_ref", "report_errors"]
