# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Facade wiring reader, builder, cache, and executor together."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .cache.snapshot import CatalogCache
from .catalog.builder import CatalogBuilder
from .catalog.loader import CatalogLoader
from .catalog.model_catalog import Catalog, CommandNode, NodeRef, Tab
from .config import AppConfig
from .execution.executor import CommandExecutor, ExecutionOptions, ExecutionResult
from .tasks import tab_task_groups
from .views import EntryView, filter_entries, flatten_tab, render_preview

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CommandCenter:
    """Serve catalog queries and executions for one definition root.

    The facade owns its cache; two instances never share snapshots.
    """

    config: AppConfig
    builder: CatalogBuilder | None = None
    executor: CommandExecutor | None = None
    _cache: CatalogCache = field(init=False, repr=False)
    _executor: CommandExecutor = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Create the loader, cache, and executor bound to ``config``."""

        loader = CatalogLoader(self.config.catalog_root, self.builder or CatalogBuilder())
        self._cache = CatalogCache(loader)
        self._executor = self.executor or CommandExecutor(
            default_cwd=self.config.working_directory,
            shell=self.config.shell,
            env_overrides=dict(self.config.env),
        )

    @classmethod
    def from_root(cls, catalog_root: Path, **settings: object) -> CommandCenter:
        """Return a facade for ``catalog_root`` with ``settings`` applied to :class:`AppConfig`."""

        return cls(AppConfig.model_validate({"catalog_root": catalog_root, **settings}))

    @property
    def cache(self) -> CatalogCache:
        return self._cache

    def load(self, skip_validation: bool | None = None) -> Catalog:
        """Return the cached catalog, building it on first access.

        Args:
            skip_validation: Build tolerantly; defaults to ``config.skip_validation``.

        Returns:
            Catalog: Shared snapshot for the requested validation mode.

        Raises:
            SourceError: If the definition root cannot be read.
            BuildError: If a strict build rejects the definitions.
        """

        return self._cache.get_or_build(validate=self._validate(skip_validation))

    def refresh(self, skip_validation: bool | None = None) -> Catalog:
        """Rebuild the catalog from disk; the previous snapshot survives a failure."""

        return self._cache.refresh(validate=self._validate(skip_validation))

    def clear_cache(self) -> None:
        self._cache.clear()

    def tab(self, tab_name: str) -> Tab:
        return self.load().tab(tab_name)

    def resolve(self, tab_name: str, path: NodeRef) -> CommandNode:
        """Return the node addressed by ``path`` inside ``tab_name``.

        Raises:
            NodeNotFoundError: If the tab or the path does not resolve.
        """

        return self.load().resolve(tab_name, path)

    def entries(self, tab_name: str, query: str = "") -> tuple[EntryView, ...]:
        """Return the flattened entries of ``tab_name`` matching ``query``."""

        return filter_entries(flatten_tab(self.tab(tab_name)), query)

    def preview(self, tab_name: str, path: NodeRef) -> str:
        return render_preview(self.resolve(tab_name, path))

    def task_groups(self, tab_name: str) -> dict[str, tuple[CommandNode, ...]]:
        """Return executable nodes of ``tab_name`` grouped by task-list label."""

        return tab_task_groups(self.tab(tab_name))

    def execute_node(
        self,
        tab_name: str,
        path: NodeRef,
        *,
        options: ExecutionOptions | None = None,
    ) -> ExecutionResult:
        """Resolve and run one entry.

        Args:
            tab_name: Tab containing the entry.
            path: Names from the tab root, or a single leaf name.
            options: Per-call execution settings; derived from the config when omitted.

        Returns:
            ExecutionResult: Outcome of the process.

        Raises:
            NodeNotFoundError: If the entry does not resolve.
            NotExecutableError: If the entry is a group.
            SpawnFailedError: If the process could not be created.
        """

        node = self.resolve(tab_name, path)
        LOGGER.debug("executing %s/%s", tab_name, node.display_path)
        return self._executor.execute(node, options or self._options())

    def execute_batch(
        self,
        tab_name: str,
        paths: Sequence[NodeRef],
        continue_on_error: bool | None = None,
        *,
        options: ExecutionOptions | None = None,
    ) -> list[ExecutionResult]:
        """Resolve every entry first, then run them sequentially in order.

        Raises:
            NodeNotFoundError: If any entry does not resolve; nothing runs.
            NotExecutableError: If any entry is a group; nothing runs.
            NotMultiSelectableError: If several entries are selected and one is
                single-select; nothing runs.
            BatchExecutionError: If a member could not be spawned.
        """

        catalog = self.load()
        nodes = [catalog.resolve(tab_name, path) for path in paths]
        resolved = options or self._options(continue_on_error)
        return self._executor.execute_batch(nodes, resolved)

    def _options(self, continue_on_error: bool | None = None) -> ExecutionOptions:
        keep_going = self.config.continue_on_error if continue_on_error is None else continue_on_error
        return ExecutionOptions(continue_on_error=keep_going, timeout=self.config.timeout_seconds)

    def _validate(self, skip_validation: bool | None) -> bool:
        skip = self.config.skip_validation if skip_validation is None else skip_validation
        return not skip


__all__ = ["CommandCenter"]
