# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem locations used by the hook and its CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

CLAUDE_DIRNAME: Final[str] = ".claude"
SETTINGS_FILENAME: Final[str] = "settings.json"
STATE_DIRNAME: Final[str] = "hook-state"
TASKS_DIRNAME: Final[str] = "tasks"


@dataclass(frozen=True, slots=True)
class HookPaths:
    """Resolve user-scoped locations relative to a home directory.

    Attributes:
        home: Directory treated as the user's home; tests point it at ``tmp_path``.
    """

    home: Path

    @classmethod
    def default(cls) -> HookPaths:
        """Return paths rooted at the current user's home directory."""

        return cls(home=Path.home())

    @property
    def claude_dir(self) -> Path:
        """Return the user-level ``.claude`` directory."""

        return self.home / CLAUDE_DIRNAME

    @property
    def user_settings(self) -> Path:
        """Return the user-scoped ``settings.json`` path."""

        return self.claude_dir / SETTINGS_FILENAME

    @property
    def state_dir(self) -> Path:
        """Return the directory holding per-session state documents."""

        return self.claude_dir / STATE_DIRNAME

    @property
    def tasks_dir(self) -> Path:
        """Return the root directory containing task-list directories."""

        return self.claude_dir / TASKS_DIRNAME


def project_settings_path(project_root: Path) -> Path:
    """Return the project-scoped ``settings.json`` path under ``project_root``."""

    return project_root / CLAUDE_DIRNAME / SETTINGS_FILENAME


def project_dir_name(cwd: str | Path) -> str:
    """Return the final non-empty component of ``cwd``."""

    parts = [part for part in str(cwd).replace("\\", "/").split("/") if part]
    return parts[-1] if parts else ""


__all__ = [
    "CLAUDE_DIRNAME",
    "HookPaths",
    "SETTINGS_FILENAME",
    "STATE_DIRNAME",
    "TASKS_DIRNAME",
    "project_dir_name",
    "project_settings_path",
]
