# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for turning nodes into processes."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from cmdcatalog.catalog.model_command import LocalFileCommand, RawCommand
from cmdcatalog.core.runtime.process import CommandOptions, CompletedCommand
from cmdcatalog.errors import (
    BatchExecutionError,
    ExecutionTimeoutError,
    NotExecutableError,
    NotMultiSelectableError,
    SpawnFailedError,
)
from cmdcatalog.execution.executor import (
    NON_INTERACTIVE_ENV,
    CommandExecutor,
    ExecutionOptions,
    read_shebang,
)


class RecordingRunner:
    """Runner double that records calls instead of spawning."""

    def __init__(self, returncodes: Sequence[int] = (0,)) -> None:
        self.calls: list[tuple[tuple[str, ...], CommandOptions | None]] = []
        self._returncodes = list(returncodes)

    def __call__(self, args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedCommand:
        self.calls.append((tuple(args), options))
        code = self._returncodes.pop(0) if self._returncodes else 0
        return CompletedCommand(args=tuple(args), returncode=code, stdout="", stderr="", duration=0.0)


def _script(directory: Path, name: str, body: str) -> Path:
    path = directory / name
    path.write_text(body, encoding="utf-8")
    path.chmod(0o755)
    return path


def test_raw_true_succeeds_and_raw_false_fails_without_error(node_factory) -> None:
    executor = CommandExecutor()

    passed = executor.execute(node_factory("ok", RawCommand("true")))
    failed = executor.execute(node_factory("nope", RawCommand("false")))

    assert passed.success and passed.exit_code == 0
    assert not failed.success and failed.exit_code != 0
    assert failed.node_name == "nope"


def test_raw_command_runs_verbatim_through_the_shell(node_factory) -> None:
    result = CommandExecutor().execute(node_factory("pipe", RawCommand("printf 'a\\nb\\n' | wc -l; echo oops >&2")))

    assert result.stdout.strip() == "2"
    assert result.stderr == "oops\n"
    assert result.argv[1:] == ("-c", "printf 'a\\nb\\n' | wc -l; echo oops >&2")
    assert result.duration >= 0


def test_group_is_not_executable_and_nothing_spawns(node_factory) -> None:
    runner = RecordingRunner()
    group = node_factory("Group", path=("Tools", "Group"))

    with pytest.raises(NotExecutableError, match="Tools/Group"):
        CommandExecutor(runner=runner).execute(group)
    assert runner.calls == []


def test_batch_rejects_groups_before_running_anything(node_factory) -> None:
    runner = RecordingRunner()
    nodes = [node_factory("a", RawCommand("true")), node_factory("Group")]

    with pytest.raises(NotExecutableError):
        CommandExecutor(runner=runner).execute_batch(nodes)
    assert runner.calls == []


def test_batch_rejects_single_select_members_before_running_anything(node_factory) -> None:
    runner = RecordingRunner()
    nodes = [node_factory("a", RawCommand("true"), multi_select=False), node_factory("b", RawCommand("true"))]

    with pytest.raises(NotMultiSelectableError, match="a") as excinfo:
        CommandExecutor(runner=runner).execute_batch(nodes)
    assert excinfo.value.paths == (("a",),)
    assert runner.calls == []


def test_single_select_member_may_run_alone_as_a_batch(node_factory) -> None:
    runner = RecordingRunner()

    results = CommandExecutor(runner=runner).execute_batch([node_factory("a", RawCommand("true"), multi_select=False)])

    assert [result.node_name for result in results] == ["a"]


def test_batch_stops_on_first_failure_unless_told_to_continue(node_factory) -> None:
    nodes = [node_factory("A", RawCommand("false")), node_factory("B", RawCommand("true"))]
    executor = CommandExecutor()

    stopped = executor.execute_batch(nodes)
    continued = executor.execute_batch(nodes, ExecutionOptions(continue_on_error=True))

    assert [result.node_name for result in stopped] == ["A"]
    assert [result.node_name for result in continued] == ["A", "B"]
    assert [result.success for result in continued] == [False, True]


def test_batch_runs_in_selection_order(node_factory) -> None:
    runner = RecordingRunner()
    nodes = [node_factory(name, RawCommand(f"echo {name}")) for name in ("c", "a", "b")]

    results = CommandExecutor(runner=runner).execute_batch(nodes)

    assert [result.node_name for result in results] == ["c", "a", "b"]
    assert [call[0][-1] for call in runner.calls] == ["echo c", "echo a", "echo b"]


def test_spawn_failure_in_batch_carries_earlier_results(node_factory, tmp_path: Path) -> None:
    nodes = [
        node_factory("first", RawCommand("true")),
        node_factory("broken", RawCommand("true"), source=tmp_path / "gone" / "def.json"),
        node_factory("never", RawCommand("true")),
    ]

    with pytest.raises(BatchExecutionError) as excinfo:
        CommandExecutor().execute_batch(nodes, ExecutionOptions(continue_on_error=True))

    assert excinfo.value.failed == ("broken",)
    assert [result.node_name for result in excinfo.value.results] == ["first"]
    assert isinstance(excinfo.value.__cause__, SpawnFailedError)


def test_missing_shell_is_a_spawn_failure(node_factory) -> None:
    executor = CommandExecutor(shell="no-such-shell-xyz")

    with pytest.raises(SpawnFailedError, match="no-such-shell-xyz"):
        executor.execute(node_factory("x", RawCommand("true")))


def test_timeout_raises_execution_timeout(node_factory) -> None:
    node = node_factory("slow", RawCommand("sleep 5"))

    with pytest.raises(ExecutionTimeoutError) as excinfo:
        CommandExecutor().execute(node, ExecutionOptions(timeout=0.3))

    assert isinstance(excinfo.value, SpawnFailedError)
    assert excinfo.value.timeout == pytest.approx(0.3)


def test_raw_command_runs_in_the_definition_directory(node_factory, tmp_path: Path) -> None:
    definitions = tmp_path / "defs"
    definitions.mkdir()
    node = node_factory("where", RawCommand("pwd"), source=definitions / "where.json")

    result = CommandExecutor(default_cwd=tmp_path).execute(node)

    assert Path(result.stdout.strip()).resolve() == definitions.resolve()
    assert result.cwd == definitions


def test_cwd_precedence(node_factory, tmp_path: Path) -> None:
    override = tmp_path / "override"
    override.mkdir()
    runner = RecordingRunner()
    executor = CommandExecutor(runner=runner, default_cwd=tmp_path)
    sourced = node_factory("a", RawCommand("pwd"), source=tmp_path / "defs" / "a.json")
    unsourced = node_factory("b", RawCommand("pwd"))

    assert executor.execute(sourced, ExecutionOptions(cwd=override)).cwd == override
    assert executor.execute(sourced).cwd == tmp_path / "defs"
    assert executor.execute(unsourced).cwd == tmp_path


def test_environment_layers_host_overrides_and_options(node_factory) -> None:
    runner = RecordingRunner()
    executor = CommandExecutor(
        runner=runner,
        base_env={"PATH": "/usr/bin:/bin", "LAYER": "host", "DEBIAN_FRONTEND": "dialog"},
        env_overrides={"LAYER": "executor", "EXTRA": "1"},
    )
    node = node_factory("env", RawCommand("env"))

    executor.execute(node, ExecutionOptions(env={"LAYER": "call"}))
    executor.execute(node, ExecutionOptions(non_interactive=False))

    interactive_env = runner.calls[1][1].env
    call_env = runner.calls[0][1].env
    assert call_env is not None and interactive_env is not None
    assert call_env["LAYER"] == "call"
    assert call_env["EXTRA"] == "1"
    for key, value in NON_INTERACTIVE_ENV.items():
        assert call_env[key] == value
    assert interactive_env["DEBIAN_FRONTEND"] == "dialog"
    assert "NEEDRESTART_MODE" not in interactive_env


def test_non_interactive_variables_reach_the_process(node_factory) -> None:
    result = CommandExecutor().execute(node_factory("env", RawCommand('echo "$DEBIAN_FRONTEND:$NEEDRESTART_MODE"')))

    assert result.stdout == "noninteractive:a\n"


def test_script_runs_through_its_shebang_with_arguments(node_factory, tmp_path: Path) -> None:
    script = _script(tmp_path, "greet.sh", '#!/bin/sh\necho "hello $1 from $(pwd)"\n')
    node = node_factory("greet", LocalFileCommand(path=script, args=("world",)))

    result = CommandExecutor().execute(node)

    assert result.argv == ("/bin/sh", str(script), "world")
    assert result.stdout.startswith("hello world from ")
    assert Path(result.stdout.split(" from ")[1].strip()).resolve() == tmp_path.resolve()


def test_script_without_shebang_is_executed_directly(node_factory, tmp_path: Path) -> None:
    script = _script(tmp_path, "plain.sh", "echo plain\n")
    runner = RecordingRunner()

    CommandExecutor(runner=runner).execute(node_factory("plain", LocalFileCommand(path=script, args=("-x",))))

    assert runner.calls[0][0] == (str(script), "-x")


def test_unreadable_script_is_a_spawn_failure(node_factory, tmp_path: Path) -> None:
    node = node_factory("gone", LocalFileCommand(path=tmp_path / "gone.sh"))

    with pytest.raises(SpawnFailedError, match="cannot read script"):
        CommandExecutor().execute(node)


def test_read_shebang_splits_interpreter_and_single_argument(tmp_path: Path) -> None:
    env_script = _script(tmp_path, "a.sh", "#!/usr/bin/env bash -e\n")
    plain = _script(tmp_path, "b.sh", "echo\n")

    assert read_shebang(env_script) == ("/usr/bin/env", "bash -e")
    assert read_shebang(plain) == ()
