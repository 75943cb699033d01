# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; entries are spawned from argument
# vectors built by the executor and ``shell=True`` is never used.
import subprocess  # nosec B404
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

_PATH_KEY: Final[str] = "PATH"


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    capture_output: bool = True
    timeout: float | None = None
    discard_stdin: bool = True

    def __post_init__(self) -> None:
        """Reject negative timeouts.

        Raises:
            ValueError: When ``timeout`` is negative.
        """

        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")


@dataclass(frozen=True, slots=True)
class CompletedCommand:
    """Outcome of a process that ran to completion."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    duration: float


class CommandTimeoutError(RuntimeError):
    """Raised when a subprocess is killed after exceeding its timeout."""

    def __init__(self, command: Sequence[str], timeout: float, stdout: str, stderr: str) -> None:
        """Initialise the error with the output captured before the kill.

        Args:
            command: Normalised command sequence that was executed.
            timeout: Timeout in seconds that expired.
            stdout: Standard output captured before the kill.
            stderr: Standard error captured before the kill.
        """

        super().__init__(f"Command '{command[0]}' timed out after {timeout:.1f}s")
        self.command = tuple(command)
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr


def _ensure_text(value: str | bytes | None) -> str:
    """Return ``value`` decoded to text, or an empty string when absent.

    Args:
        value: Stream output captured from subprocess execution.

    Returns:
        str: Text output.
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.decode(errors="replace")


def _normalize_args(args: Sequence[str], env: Mapping[str, str] | None) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.
        env: Environment the process will receive; its ``PATH`` drives lookup.

    Returns:
        list[str]: Argument list whose head is an absolute or explicit path.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If a bare executable name is not found on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    if Path(head).is_absolute() or "/" in head:
        return [head, *rest]

    search_path = env.get(_PATH_KEY) if env is not None else None
    resolved = shutil.which(head, path=search_path)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedCommand:
    """Execute ``args`` after normalising the executable path.

    A nonzero exit status is returned, not raised.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.

    Returns:
        CompletedCommand: Exit status, captured output, and wall-clock duration.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
        OSError: If the operating system refuses to spawn the process.
        CommandTimeoutError: If the process outlived ``options.timeout``.
    """

    resolved_options = options or CommandOptions()
    normalized = _normalize_args(args, resolved_options.env)
    started = time.monotonic()
    try:
        # Bandit: argument vectors are passed directly without shell expansion.
        completed = subprocess.run(  # nosec B603
            normalized,
            cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
            env=dict(resolved_options.env) if resolved_options.env is not None else None,
            check=False,
            capture_output=resolved_options.capture_output,
            text=True,
            errors="replace",
            timeout=resolved_options.timeout,
            stdin=subprocess.DEVNULL if resolved_options.discard_stdin else None,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandTimeoutError(
            normalized,
            resolved_options.timeout if resolved_options.timeout is not None else exc.timeout,
            _ensure_text(exc.stdout),
            _ensure_text(exc.stderr),
        ) from exc
    return CompletedCommand(
        args=tuple(normalized),
        returncode=completed.returncode,
        stdout=_ensure_text(completed.stdout),
        stderr=_ensure_text(completed.stderr),
        duration=time.monotonic() - started,
    )


__all__ = [
    "CommandOptions",
    "CommandTimeoutError",
    "CompletedCommand",
    "run_command",
]
