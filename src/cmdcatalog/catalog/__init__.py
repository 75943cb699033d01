# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public export surface for the definition reader and catalog builder."""

from __future__ import annotations

from .builder import CatalogBuilder
from .loader import CatalogLoader
from .model_catalog import BuildDiagnostic, Catalog, CommandNode, DiagnosticKind, NodeRef, Tab
from .model_command import (
    NO_COMMAND,
    Command,
    CommandKind,
    LocalFileCommand,
    NoCommand,
    RawCommand,
    adjacent_file_probe,
    infer_command,
)
from .model_record import RawRecord, RecordParseFailure, SourceItem, TabHeader
from .preconditions import HostProbe, Precondition, PreconditionKind, SystemHostProbe
from .reader import DefinitionReader

__all__ = [
    "NO_COMMAND",
    "BuildDiagnostic",
    "Catalog",
    "CatalogBuilder",
    "CatalogLoader",
    "Command",
    "CommandKind",
    "CommandNode",
    "DefinitionReader",
    "DiagnosticKind",
    "HostProbe",
    "LocalFileCommand",
    "NoCommand",
    "NodeRef",
    "Precondition",
    "PreconditionKind",
    "RawCommand",
    "RawRecord",
    "RecordParseFailure",
    "SourceItem",
    "SystemHostProbe",
    "Tab",
    "TabHeader",
    "adjacent_file_probe",
    "infer_command",
]
