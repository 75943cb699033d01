# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Assemble raw definition records into immutable tab trees."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import BuildError, DocumentError, DuplicateNameError, EmptyTabError, InvalidRecordError
from .model_catalog import BuildDiagnostic, Catalog, CommandNode, DiagnosticKind, Tab
from .model_command import FileProbe, adjacent_file_probe, infer_command
from .model_record import RawRecord, RecordParseFailure, SourceItem, TabHeader
from .preconditions import HostProbe, Precondition, SystemHostProbe, first_failing, parse_preconditions
from .schema import RecordSchema, default_record_schema
from .utils import expect_string, optional_bool, optional_string

LOGGER = logging.getLogger(__name__)

_TAB_LEVEL = "<catalog>"


@dataclass(slots=True)
class _Draft:
    """Mutable stand-in for a node while parent/child links are resolved."""

    record: RawRecord
    name: str
    description: str
    command_text: str | None
    task_list: str
    multi_select: bool
    preconditions: tuple[Precondition, ...]
    parent: _Draft | None = None
    children: list[_Draft] = field(default_factory=list)

    def names(self) -> tuple[str, ...]:
        """Return the names from the tab root down to this draft."""

        chain: list[str] = []
        current: _Draft | None = self
        while current is not None:
            chain.append(current.name)
            current = current.parent
        return tuple(reversed(chain))


@dataclass(slots=True)
class _TabSource:
    """Items collected for one tab directory."""

    header: TabHeader
    records: list[RawRecord] = field(default_factory=list)
    failures: list[RecordParseFailure] = field(default_factory=list)


@dataclass(slots=True)
class _BuildReport:
    """Route structural problems to exceptions (strict) or diagnostics (tolerant)."""

    validate: bool
    diagnostics: list[BuildDiagnostic] = field(default_factory=list)

    def reject(self, error: BuildError, diagnostic: BuildDiagnostic) -> None:
        """Raise ``error`` in strict mode, otherwise record ``diagnostic``.

        Raises:
            BuildError: When the build is strict.
        """

        if self.validate:
            raise error
        LOGGER.warning("tolerating catalog problem: %s", diagnostic)
        self.diagnostics.append(diagnostic)

    def note(self, diagnostic: BuildDiagnostic) -> None:
        LOGGER.info("%s", diagnostic)
        self.diagnostics.append(diagnostic)


@dataclass(slots=True)
class _FreezeContext:
    """Per-tab state shared while drafts are frozen into nodes."""

    tab_name: str
    report: _BuildReport
    hidden: frozenset[tuple[str, ...]]
    probes: dict[Path, FileProbe] = field(default_factory=dict)

    def hides_descendants_of(self, key: tuple[str, ...]) -> bool:
        """Return whether preconditions hid any record nested under ``key``."""

        depth = len(key)
        return any(len(hidden) > depth and hidden[:depth] == key for hidden in self.hidden)


@dataclass(slots=True)
class CatalogBuilder:
    """Build :class:`Catalog` snapshots from reader output."""

    schema: RecordSchema = field(default_factory=default_record_schema)
    host: HostProbe = field(default_factory=SystemHostProbe)
    probe_factory: Callable[[Path], FileProbe] = adjacent_file_probe

    def build(self, items: Iterable[SourceItem], *, validate: bool, checksum: str = "") -> Catalog:
        """Assemble ``items`` into a catalog.

        Strict builds (``validate=True``) raise on the first structural problem
        and hide records whose preconditions fail on the host. Tolerant builds
        skip or shadow problem records, keep empty tabs, ignore preconditions,
        and report what they tolerated in :attr:`Catalog.diagnostics`.

        Args:
            items: Tab headers, records, and parse failures from the reader.
            validate: Whether structural rules are enforced.
            checksum: Checksum of the definition files the items came from.

        Returns:
            Catalog: Immutable catalog snapshot.

        Raises:
            DuplicateNameError: Strict build with two same-named siblings or tabs.
            EmptyTabError: Strict build with a tab that has no nodes.
            InvalidRecordError: Strict build with a malformed or unusable record.
        """

        report = _BuildReport(validate=validate)
        tabs: list[Tab] = []
        for source in _group_by_tab(items):
            tab = self._build_tab(source, report)
            if tab is None:
                continue
            existing = next((index for index, known in enumerate(tabs) if known.name == tab.name), None)
            if existing is None:
                tabs.append(tab)
                continue
            report.reject(
                DuplicateNameError(_TAB_LEVEL, tab.name),
                BuildDiagnostic(
                    DiagnosticKind.DUPLICATE_NAME,
                    tab.name,
                    f"tab directory {tab.directory} shadows {tabs[existing].directory}",
                ),
            )
            tabs[existing] = tab
        catalog = Catalog(
            tabs=tuple(tabs),
            validated=validate,
            checksum=checksum,
            diagnostics=tuple(report.diagnostics),
        )
        LOGGER.debug(
            "built catalog: %d tab(s), %d node(s), %d diagnostic(s), validate=%s",
            len(catalog.tabs),
            catalog.node_count,
            len(catalog.diagnostics),
            validate,
        )
        return catalog

    def _build_tab(self, source: _TabSource, report: _BuildReport) -> Tab | None:
        tab_name = source.header.name
        for failure in source.failures:
            report.reject(
                InvalidRecordError(failure.source, failure.message),
                BuildDiagnostic(DiagnosticKind.INVALID_RECORD, tab_name, failure.message, failure.source),
            )

        candidates = [draft for draft in (self._draft(record, tab_name, report) for record in source.records) if draft]
        hidden = self._hidden_keys(candidates, tab_name, report) if report.validate else set()
        drafts = {draft.record.key: draft for draft in candidates if draft.record.key not in hidden}

        for key, draft in drafts.items():
            draft.parent = _nearest_ancestor(key, drafts)
        roots: list[_Draft] = []
        for draft in drafts.values():
            siblings = roots if draft.parent is None else draft.parent.children
            _attach(siblings, draft, tab_name, report)

        context = _FreezeContext(tab_name=tab_name, report=report, hidden=frozenset(hidden))
        nodes = tuple(node for node in (self._freeze(draft, context) for draft in roots) if node is not None)
        if not nodes and hidden:
            LOGGER.info("omitting tab %s: every entry is hidden by preconditions", tab_name)
            return None
        if not nodes:
            report.reject(
                EmptyTabError(tab_name),
                BuildDiagnostic(DiagnosticKind.EMPTY_TAB, tab_name, "tab contains no entries", source.header.directory),
            )
        return Tab(name=tab_name, directory=source.header.directory, nodes=nodes)

    def _draft(self, record: RawRecord, tab_name: str, report: _BuildReport) -> _Draft | None:
        """Validate ``record`` and convert it into a draft node."""

        problems = self.schema.problems(record.data)
        if problems:
            reason = "; ".join(problems)
            report.reject(
                InvalidRecordError(record.source, reason),
                BuildDiagnostic(DiagnosticKind.INVALID_RECORD, tab_name, f"{record.label}: {reason}", record.source),
            )
            return None
        context = f"{record.source}:{record.label}"
        data = record.data
        try:
            command_text = data.get("command")
            return _Draft(
                record=record,
                name=expect_string(data.get("name"), key="name", context=context),
                description=optional_string(data.get("description"), key="description", context=context),
                command_text=command_text if isinstance(command_text, str) else None,
                task_list=optional_string(data.get("taskList"), key="taskList", context=context),
                multi_select=optional_bool(data.get("multiSelect"), key="multiSelect", context=context, default=True),
                preconditions=parse_preconditions(data.get("preconditions"), context=context),
            )
        except (DocumentError, ValueError) as exc:
            report.reject(
                InvalidRecordError(record.source, str(exc)),
                BuildDiagnostic(DiagnosticKind.INVALID_RECORD, tab_name, str(exc), record.source),
            )
            return None

    def _hidden_keys(self, drafts: list[_Draft], tab_name: str, report: _BuildReport) -> set[tuple[str, ...]]:
        """Return keys of drafts hidden by their own or an ancestor's preconditions."""

        hidden: set[tuple[str, ...]] = set()
        for draft in sorted(drafts, key=lambda candidate: len(candidate.record.key)):
            key = draft.record.key
            if any(key[:depth] in hidden for depth in range(1, len(key))):
                hidden.add(key)
                continue
            failing = first_failing(draft.preconditions, self.host)
            if failing is None:
                continue
            hidden.add(key)
            report.note(
                BuildDiagnostic(
                    DiagnosticKind.PRECONDITION,
                    tab_name,
                    f"hid '{draft.name}': {failing.describe()}",
                    draft.record.source,
                ),
            )
        return hidden

    def _freeze(self, draft: _Draft, context: _FreezeContext) -> CommandNode | None:
        """Return the immutable node for ``draft`` and its attached subtree.

        Returns ``None`` for a group whose every child was hidden by preconditions.
        """

        frozen = (self._freeze(child, context) for child in draft.children)
        children = tuple(child for child in frozen if child is not None)
        base_dir = draft.record.base_dir
        probe = context.probes.get(base_dir)
        if probe is None:
            probe = context.probes[base_dir] = self.probe_factory(base_dir)
        command = infer_command(draft.command_text, probe)
        if not command.executable and not children:
            if context.hides_descendants_of(draft.record.key):
                return None
            message = f"'{draft.name}' has neither a command nor child entries"
            context.report.reject(
                InvalidRecordError(draft.record.source, message),
                BuildDiagnostic(DiagnosticKind.EMPTY_GROUP, context.tab_name, message, draft.record.source),
            )
        return CommandNode(
            name=draft.name,
            description=draft.description,
            command=command,
            task_list=draft.task_list,
            multi_select=draft.multi_select,
            path=draft.names(),
            source=draft.record.source,
            children=children,
        )


def _group_by_tab(items: Iterable[SourceItem]) -> list[_TabSource]:
    """Collect reader items per tab directory, preserving tab order."""

    sources: dict[Path, _TabSource] = {}
    for item in items:
        if isinstance(item, TabHeader):
            sources.setdefault(item.directory, _TabSource(header=item))
            continue
        source = sources.get(item.tab_directory)
        if source is None:
            header = TabHeader(name=item.tab_directory.name, directory=item.tab_directory)
            source = sources[item.tab_directory] = _TabSource(header=header)
        if isinstance(item, RawRecord):
            source.records.append(item)
        else:
            source.failures.append(item)
    return list(sources.values())


def _nearest_ancestor(key: tuple[str, ...], drafts: dict[tuple[str, ...], _Draft]) -> _Draft | None:
    """Return the draft whose key is the longest proper prefix of ``key``."""

    for depth in range(len(key) - 1, 0, -1):
        candidate = drafts.get(key[:depth])
        if candidate is not None:
            return candidate
    return None


def _attach(siblings: list[_Draft], draft: _Draft, tab_name: str, report: _BuildReport) -> None:
    """Append ``draft`` to ``siblings``; a later same-named sibling shadows the earlier one."""

    existing = next((index for index, sibling in enumerate(siblings) if sibling.name == draft.name), None)
    if existing is None:
        siblings.append(draft)
        return
    shadowed = siblings[existing]
    parent_names = draft.parent.names() if draft.parent is not None else ()
    report.reject(
        DuplicateNameError(tab_name, draft.name, parent=parent_names),
        BuildDiagnostic(
            DiagnosticKind.DUPLICATE_NAME,
            tab_name,
            f"'{draft.name}' from {draft.record.source} shadows {shadowed.record.source}",
            draft.record.source,
        ),
    )
    siblings[existing] = draft


__all__ = ["CatalogBuilder"]
