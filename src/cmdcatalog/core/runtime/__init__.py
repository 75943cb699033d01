# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process runtime helpers."""

from __future__ import annotations

from .process import CommandOptions, CommandTimeoutError, CompletedCommand, run_command

__all__ = ["CommandOptions", "CommandTimeoutError", "CompletedCommand", "run_command"]
