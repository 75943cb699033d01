# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rich renderables used by the CLI commands."""

from __future__ import annotations

from collections.abc import Sequence

from rich.table import Table

from ..catalog.model_catalog import Catalog
from ..execution.executor import ExecutionResult
from ..tasks import describe_task_list
from ..views import EntryView

_INDENT = "  "


def build_tabs_table(catalog: Catalog) -> Table:
    table = Table(title="Tabs", show_lines=False)
    table.add_column("Tab", style="bold cyan")
    table.add_column("Entries", justify="right")
    table.add_column("Directory", overflow="fold")
    for tab in catalog.tabs:
        table.add_row(tab.name, str(tab.node_count), str(tab.directory))
    return table


def build_entries_table(title: str, entries: Sequence[EntryView]) -> Table:
    """Return a table listing ``entries`` indented by depth.

    Args:
        title: Table title, usually the tab name.
        entries: Flattened entries to list.

    Returns:
        Table: Renderable table.
    """

    table = Table(title=title)
    table.add_column("Entry", style="bold")
    table.add_column("Type")
    table.add_column("Tasks")
    table.add_column("Description", overflow="fold")
    for entry in entries:
        tasks = ", ".join(describe_task_list(entry.task_list))
        table.add_row(f"{_INDENT * entry.depth}{entry.name}", entry.command_type.value, tasks, entry.description)
    return table


def build_results_table(results: Sequence[ExecutionResult]) -> Table:
    table = Table(title="Results")
    table.add_column("Entry", style="bold")
    table.add_column("Exit", justify="right")
    table.add_column("Duration", justify="right")
    for result in results:
        style = "green" if result.success else "red"
        table.add_row("/".join(result.path), f"[{style}]{result.exit_code}[/{style}]", f"{result.duration:.2f}s")
    return table


__all__ = ["build_entries_table", "build_results_table", "build_tabs_table"]
