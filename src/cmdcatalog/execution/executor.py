# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Turn catalog nodes into running processes and structured results."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..catalog.model_catalog import CommandNode
from ..catalog.model_command import LocalFileCommand, RawCommand
from ..core.runtime.process import CommandOptions, CommandTimeoutError, CompletedCommand, run_command
from ..errors import (
    BatchExecutionError,
    ExecutionTimeoutError,
    NotExecutableError,
    NotMultiSelectableError,
    SpawnFailedError,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_SHELL: Final[str] = "sh"
NON_INTERACTIVE_ENV: Final[Mapping[str, str]] = {
    "DEBIAN_FRONTEND": "noninteractive",
    "NEEDRESTART_MODE": "a",
}
_SHEBANG: Final[bytes] = b"#!"
_SHEBANG_LIMIT: Final[int] = 256


@runtime_checkable
class CommandRunner(Protocol):
    """Callable protocol for spawning one argument vector."""

    def __call__(self, args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedCommand:
        """Run ``args`` to completion and return its outcome."""


@dataclass(frozen=True, slots=True)
class ExecutionOptions:
    """Per-call execution settings.

    Attributes:
        cwd: Working directory overriding the one derived from the node.
        env: Variables layered over the host environment and executor overrides.
        non_interactive: Export variables that keep package managers from prompting.
        continue_on_error: Keep running a batch after a failing result.
        timeout: Hard timeout in seconds after which the process is killed.
    """

    cwd: Path | None = None
    env: Mapping[str, str] = field(default_factory=dict)
    non_interactive: bool = True
    continue_on_error: bool = False
    timeout: float | None = None


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of one process that ran to completion."""

    node_name: str
    path: tuple[str, ...]
    argv: tuple[str, ...]
    cwd: Path | None
    exit_code: int
    stdout: str
    stderr: str
    duration: float

    @property
    def success(self) -> bool:
        """Return ``True`` when the process exited with status zero."""

        return self.exit_code == 0


def read_shebang(script: Path) -> tuple[str, ...]:
    """Return the interpreter vector declared on the first line of ``script``.

    Args:
        script: Script file to inspect.

    Returns:
        tuple[str, ...]: Interpreter and its optional single argument, or an
        empty tuple when the file has no shebang.

    Raises:
        OSError: If the script cannot be read.
    """

    with script.open("rb") as handle:
        head = handle.readline(_SHEBANG_LIMIT)
    if not head.startswith(_SHEBANG):
        return ()
    line = head[len(_SHEBANG) :].decode("utf-8", errors="replace").strip()
    # The kernel passes everything after the interpreter as one argument.
    return tuple(line.split(maxsplit=1))


@dataclass(slots=True)
class CommandExecutor:
    """Spawn the process for executable nodes and collect their results."""

    runner: CommandRunner = run_command
    default_cwd: Path | None = None
    shell: str = DEFAULT_SHELL
    env_overrides: Mapping[str, str] = field(default_factory=dict)
    base_env: Mapping[str, str] | None = None

    def execute(self, node: CommandNode, options: ExecutionOptions | None = None) -> ExecutionResult:
        """Run ``node`` and wait for it to exit.

        A nonzero exit status is a normal, unsuccessful result.

        Args:
            node: Leaf node carrying a raw or script command.
            options: Per-call settings; defaults apply when omitted.

        Returns:
            ExecutionResult: Exit status, captured output, and duration.

        Raises:
            NotExecutableError: If ``node`` is a group; nothing is spawned.
            SpawnFailedError: If the process could not be created.
            ExecutionTimeoutError: If the hard timeout killed the process.
        """

        if not node.command.executable:
            raise NotExecutableError(node.path)
        return self._run(node, options or ExecutionOptions())

    def execute_batch(
        self,
        nodes: Sequence[CommandNode],
        options: ExecutionOptions | None = None,
    ) -> list[ExecutionResult]:
        """Run ``nodes`` one after another in selection order.

        The batch stops after the first unsuccessful result unless
        ``options.continue_on_error`` is set.

        Args:
            nodes: Selected leaf nodes.
            options: Settings applied to every member.

        Returns:
            list[ExecutionResult]: Results of the members that ran.

        Raises:
            NotExecutableError: If any member is a group; nothing is spawned.
            NotMultiSelectableError: If several members are selected and one
                of them is single-select; nothing is spawned.
            BatchExecutionError: If a member could not be spawned; carries the
                results collected before it.
        """

        resolved = options or ExecutionOptions()
        check_batch(nodes)
        results: list[ExecutionResult] = []
        for node in nodes:
            try:
                result = self._run(node, resolved)
            except SpawnFailedError as exc:
                raise BatchExecutionError(node.path, results) from exc
            results.append(result)
            if not result.success and not resolved.continue_on_error:
                LOGGER.info("stopping batch after '%s' exited with %d", node.display_path, result.exit_code)
                break
        return results

    def plan(self, node: CommandNode, options: ExecutionOptions | None = None) -> tuple[tuple[str, ...], Path | None]:
        """Return the argument vector and working directory ``node`` would run with.

        Raises:
            NotExecutableError: If ``node`` is a group.
            SpawnFailedError: If the script's shebang cannot be read.
        """

        resolved = options or ExecutionOptions()
        command = node.command
        if isinstance(command, RawCommand):
            definition_dir = node.source.parent if node.source is not None else None
            return (self.shell, "-c", command.text), resolved.cwd or definition_dir or self.default_cwd
        if isinstance(command, LocalFileCommand):
            try:
                interpreter = read_shebang(command.path)
            except OSError as exc:
                raise SpawnFailedError((str(command.path),), f"cannot read script ({exc.strerror or exc})") from exc
            argv = (*interpreter, str(command.path), *command.args)
            return argv, resolved.cwd or command.path.parent
        raise NotExecutableError(node.path)

    def environment(self, options: ExecutionOptions | None = None) -> dict[str, str]:
        """Return the environment a spawned process receives."""

        resolved = options or ExecutionOptions()
        env = dict(self.base_env if self.base_env is not None else os.environ)
        env.update(self.env_overrides)
        if resolved.non_interactive:
            env.update(NON_INTERACTIVE_ENV)
        env.update(resolved.env)
        return env

    def _run(self, node: CommandNode, options: ExecutionOptions) -> ExecutionResult:
        argv, cwd = self.plan(node, options)
        command_options = CommandOptions(cwd=cwd, env=self.environment(options), timeout=options.timeout)
        LOGGER.debug("spawning %s for '%s' in %s", argv[0], node.display_path, cwd)
        try:
            completed = self.runner(argv, options=command_options)
        except CommandTimeoutError as exc:
            raise ExecutionTimeoutError(argv, exc.timeout, stdout=exc.stdout, stderr=exc.stderr) from exc
        except (OSError, ValueError) as exc:
            reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
            raise SpawnFailedError(argv, reason) from exc
        LOGGER.debug(
            "'%s' exited with %d after %.2fs", node.display_path, completed.returncode, completed.duration
        )
        return ExecutionResult(
            node_name=node.name,
            path=node.path,
            argv=completed.args,
            cwd=cwd,
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            duration=completed.duration,
        )


def check_batch(nodes: Sequence[CommandNode]) -> None:
    """Reject a selection that cannot run as one batch.

    Raises:
        NotExecutableError: If any member is a group.
        NotMultiSelectableError: If several members are selected and any of
            them is single-select.
    """

    for node in nodes:
        if not node.command.executable:
            raise NotExecutableError(node.path)
    if len(nodes) > 1:
        single = [node.path for node in nodes if not node.multi_select]
        if single:
            raise NotMultiSelectableError(single)


__all__ = [
    "DEFAULT_SHELL",
    "NON_INTERACTIVE_ENV",
    "CommandExecutor",
    "CommandRunner",
    "ExecutionOptions",
    "ExecutionResult",
    "check_batch",
    "read_shebang",
]
