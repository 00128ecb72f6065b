# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across checklint modules."""

from __future__ import annotations


class CheckLintError(Exception):
    """Base class for errors raised by checklint."""


class ConfigError(CheckLintError):
    """Raised when configuration input is invalid."""


class StateError(CheckLintError):
    """Raised when a persisted document cannot be read or written."""


__all__ = ["CheckLintError", "ConfigError", "StateError"]
