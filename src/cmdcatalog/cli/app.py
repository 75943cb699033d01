# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the catalog commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..errors import BatchExecutionError
from ..execution.executor import ExecutionOptions, ExecutionResult, check_batch
from ..logging import enable_verbose_logging
from ..views import filter_entries, flatten_tab
from .rendering import build_entries_table, build_results_table, build_tabs_table
from .shared import CLILogger, CLIState, get_state, parse_entry_ref, report_errors

app = typer.Typer(
    name="cmdcatalog",
    help="Browse and run catalog entries defined on disk.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    root: Annotated[Path | None, typer.Option("--root", "-r", help="Catalog definition root.")] = None,
    config: Annotated[Path | None, typer.Option("--config", "-c", help="Configuration file.")] = None,
    skip_validation: Annotated[
        bool,
        typer.Option("--skip-validation", help="Build tolerantly and ignore host preconditions."),
    ] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Stream debug logs to stderr.")] = False,
) -> None:
    """Capture global options shared by every command."""

    if verbose:
        enable_verbose_logging()
    ctx.obj = CLIState(
        root=root,
        config_path=config,
        skip_validation=skip_validation,
        logger=CLILogger(use_emoji=not no_emoji),
    )


@app.command("tabs")
def tabs_command(ctx: typer.Context) -> None:
    """List the tabs of the catalog."""

    state = get_state(ctx)
    with report_errors(state.logger):
        catalog = state.center.load()
        state.logger.console.print(build_tabs_table(catalog))
        for diagnostic in catalog.diagnostics:
            state.logger.warn(str(diagnostic))


@app.command("list")
def list_command(
    ctx: typer.Context,
    tab: Annotated[str | None, typer.Argument(help="Tab to list; all tabs when omitted.")] = None,
    search: Annotated[str, typer.Option("--search", "-s", help="Filter by name or description.")] = "",
) -> None:
    """List catalog entries, optionally filtered."""

    state = get_state(ctx)
    with report_errors(state.logger):
        catalog = state.center.load()
        tabs = [catalog.tab(tab)] if tab is not None else list(catalog.tabs)
        for selected in tabs:
            entries = filter_entries(flatten_tab(selected), search)
            if search and not entries:
                continue
            state.logger.console.print(build_entries_table(selected.name, entries))


@app.command("show")
def show_command(
    ctx: typer.Context,
    tab: Annotated[str, typer.Argument(help="Tab containing the entry.")],
    entry: Annotated[str, typer.Argument(help="Entry path (a/b/c) or leaf name.")],
) -> None:
    """Preview what an entry would run."""

    state = get_state(ctx)
    with report_errors(state.logger):
        state.logger.echo(state.center.preview(tab, parse_entry_ref(entry)))


@app.command("run")
def run_command(
    ctx: typer.Context,
    tab: Annotated[str, typer.Argument(help="Tab containing the entries.")],
    entries: Annotated[list[str], typer.Argument(help="Entry paths (a/b/c) or leaf names, run in order.")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
    continue_on_error: Annotated[
        bool | None,
        typer.Option("--continue-on-error/--stop-on-error", help="Keep running after a failing entry."),
    ] = None,
    cwd: Annotated[Path | None, typer.Option("--cwd", help="Working directory for every entry.")] = None,
) -> None:
    """Run one or more entries sequentially."""

    state = get_state(ctx)
    with report_errors(state.logger):
        center = state.center
        refs = [parse_entry_ref(entry) for entry in entries]
        nodes = [center.resolve(tab, ref) for ref in refs]
        check_batch(nodes)
        if not (yes or center.config.skip_confirmation):
            names = ", ".join(node.display_path for node in nodes)
            typer.confirm(f"Run {names}?", abort=True)
        keep_going = center.config.continue_on_error if continue_on_error is None else continue_on_error
        options = ExecutionOptions(cwd=cwd, continue_on_error=keep_going, timeout=center.config.timeout_seconds)
        if len(refs) == 1:
            results = [center.execute_node(tab, refs[0], options=options)]
        else:
            try:
                results = center.execute_batch(tab, refs, options=options)
            except BatchExecutionError as exc:
                _render_results(state.logger, list(exc.results))
                raise
        _report_results(state.logger, results, requested=len(nodes))
        if not all(result.success for result in results):
            raise typer.Exit(code=1)


@app.command("check")
def check_command(ctx: typer.Context) -> None:
    """Validate the catalog with a strict build."""

    state = get_state(ctx)
    with report_errors(state.logger):
        catalog = state.center.refresh(skip_validation=False)
        for diagnostic in catalog.diagnostics:
            state.logger.info(str(diagnostic))
        state.logger.ok(
            f"catalog valid: {len(catalog.tabs)} tab(s), {catalog.node_count} entr(ies), "
            f"checksum {catalog.checksum[:12]}",
        )


def _report_results(logger: CLILogger, results: list[ExecutionResult], *, requested: int) -> None:
    _render_results(logger, results)
    skipped = requested - len(results)
    if skipped:
        logger.warn(f"skipped {skipped} entr(ies) after the first failure")


def _render_results(logger: CLILogger, results: list[ExecutionResult]) -> None:
    for result in results:
        label = "/".join(result.path)
        if result.stdout:
            logger.echo(result.stdout.rstrip("\n"))
        if result.stderr:
            logger.echo(result.stderr.rstrip("\n"))
        if result.success:
            logger.ok(f"{label} finished in {result.duration:.2f}s")
        else:
            logger.fail(f"{label} exited with status {result.exit_code}")
    if len(results) > 1:
        logger.console.print(build_results_table(results))


def run() -> None:
    """Console-script entry point."""

    app(prog_name="cmdcatalog")


__all__ = ["app", "run"]
