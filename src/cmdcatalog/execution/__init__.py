# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Execution bridge between catalog nodes and child processes."""

from __future__ import annotations

from .executor import CommandExecutor, CommandRunner, ExecutionOptions, ExecutionResult, check_batch, read_shebang

__all__ = ["CommandExecutor", "CommandRunner", "ExecutionOptions", "ExecutionResult", "check_batch", "read_shebang"]
