# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels normalising different lint tool vocabularies."""

    ERROR = "error"
    WARNING = "warning"


class TaskPriority(str, Enum):
    """Priority assigned to tasks filed for a diagnostic."""

    MEDIUM = "medium"
    LOW = "low"


_ERROR_PREFIX: Final[str] = "ERR"

_PRIORITY_BY_SEVERITY: Final[dict[Severity, TaskPriority]] = {
    Severity.ERROR: TaskPriority.MEDIUM,
    Severity.WARNING: TaskPriority.LOW,
}


def severity_from_label(label: str) -> Severity:
    """Return the severity for an ``error``/``warning`` style token.

    Args:
        label: Severity token emitted by the lint tool (``ERROR``, ``warn`` ...).

    Returns:
        Severity: ``ERROR`` when the upper-cased token starts with ``ERR``,
        otherwise ``WARNING``.
    """

    return Severity.ERROR if label.upper().startswith(_ERROR_PREFIX) else Severity.WARNING


def severity_from_text(text: str) -> Severity:
    """Infer a severity from free-form diagnostic text."""

    return Severity.ERROR if "error" in text.lower() else Severity.WARNING


def priority_for(severity: Severity) -> TaskPriority:
    """Return the task priority derived from ``severity``."""

    return _PRIORITY_BY_SEVERITY[severity]


__all__ = [
    "Severity",
    "TaskPriority",
    "priority_for",
    "severity_from_label",
    "severity_from_text",
]
