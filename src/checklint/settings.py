# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install, update and remove the hook inside Claude Code ``settings.json`` files."""

from __future__ import annotations

from collections.abc import Sequence
from copy import deepcopy
from pathlib import Path
from typing import Any, Final

from .config import CONFIG_KEY, CheckLintConfig, parse_config
from .paths import HookPaths, project_dir_name, project_settings_path
from .serialization import atomic_write_json, load_json_object
from .tasks import TaskStore

HOOK_EVENT: Final[str] = "PostToolUse"
HOOK_COMMAND: Final[str] = "checklint run"
HOOK_COMMAND_MARKER: Final[str] = "checklint"
HOOK_TIMEOUT_SECONDS: Final[int] = 120
HOOK_MATCHER: Final[str] = "Edit|Write|NotebookEdit"

Settings = dict[str, Any]


def settings_path(target: Path | None, paths: HookPaths) -> Path:
    """Return the settings file for a project ``target``, or the user file when ``None``."""

    return paths.user_settings if target is None else project_settings_path(target)


def read_settings(path: Path) -> Settings:
    """Return the settings document at ``path``, or an empty one when it is missing.

    Raises:
        StateError: If the document exists but is not a JSON object. Callers
            must not overwrite such a file.
    """

    return load_json_object(path) or {}


def write_settings(path: Path, settings: Settings) -> None:
    """Atomically replace the settings document at ``path``."""

    atomic_write_json(path, settings)


def _hook_groups(settings: Settings) -> list[dict[str, Any]]:
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        return []
    groups = hooks.get(HOOK_EVENT)
    if not isinstance(groups, list):
        return []
    return [group for group in groups if isinstance(group, dict)]


def _is_checklint_entry(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    command = entry.get("command")
    return isinstance(command, str) and HOOK_COMMAND_MARKER in command


def hook_exists(settings: Settings) -> bool:
    """Return whether a checklint command is registered for ``PostToolUse``."""

    return any(
        _is_checklint_entry(entry)
        for group in _hook_groups(settings)
        for entry in group.get("hooks") or ()
    )


def hook_entry() -> dict[str, Any]:
    """Return the command entry registered for the hook."""

    return {"type": "command", "command": HOOK_COMMAND, "timeout": HOOK_TIMEOUT_SECONDS}


def add_hook(settings: Settings) -> Settings:
    """Return a copy of ``settings`` with the hook registered.

    The entry joins an existing group using the same matcher, otherwise a new
    group is appended. Adding an already-registered hook is a no-op.
    """

    updated = deepcopy(settings)
    if hook_exists(updated):
        return updated
    hooks = updated.get("hooks")
    if not isinstance(hooks, dict):
        hooks = updated["hooks"] = {}
    groups = hooks.get(HOOK_EVENT)
    if not isinstance(groups, list):
        groups = hooks[HOOK_EVENT] = []
    for group in groups:
        if isinstance(group, dict) and group.get("matcher") == HOOK_MATCHER and isinstance(group.get("hooks"), list):
            group["hooks"].append(hook_entry())
            return updated
    groups.append({"matcher": HOOK_MATCHER, "hooks": [hook_entry()]})
    return updated


def remove_hook(settings: Settings) -> Settings:
    """Return a copy of ``settings`` without the hook and its configuration.

    Groups left empty are dropped, as is an empty ``PostToolUse`` list.
    """

    updated = deepcopy(settings)
    updated.pop(CONFIG_KEY, None)
    hooks = updated.get("hooks")
    if not isinstance(hooks, dict) or not isinstance(hooks.get(HOOK_EVENT), list):
        return updated
    remaining: list[Any] = []
    for group in hooks[HOOK_EVENT]:
        if isinstance(group, dict) and isinstance(group.get("hooks"), list):
            group["hooks"] = [entry for entry in group["hooks"] if not _is_checklint_entry(entry)]
            if not group["hooks"]:
                continue
        remaining.append(group)
    if remaining:
        hooks[HOOK_EVENT] = remaining
    else:
        del hooks[HOOK_EVENT]
    return updated


def get_config(settings: Settings, *, source: str = "settings") -> CheckLintConfig:
    """Return the configuration stored in ``settings``, or defaults when absent.

    Raises:
        ConfigError: If the stored fragment is invalid.
    """

    fragment = settings.get(CONFIG_KEY)
    if fragment is None:
        return CheckLintConfig()
    return parse_config(fragment, source=source)


def set_config(settings: Settings, config: CheckLintConfig) -> Settings:
    """Return a copy of ``settings`` with ``config`` stored under the config key."""

    updated = deepcopy(settings)
    updated[CONFIG_KEY] = config.to_document()
    return updated


def merge_config(
    existing: CheckLintConfig,
    *,
    task_list_id: str | None = None,
    keywords: Sequence[str] | None = None,
    edit_threshold: int | None = None,
    lint_command: str | None = None,
    create_tasks: bool | None = None,
) -> CheckLintConfig:
    """Overlay explicitly supplied options onto ``existing`` and re-enable the hook.

    Keywords are trimmed, lower-cased and emptied entries are dropped.

    Raises:
        ConfigError: If the merged values do not validate.
    """

    updates: dict[str, Any] = {"enabled": True}
    if task_list_id is not None:
        updates["task_list_id"] = task_list_id or None
    if keywords is not None:
        updates["keywords"] = normalize_keywords(keywords)
    if edit_threshold is not None:
        updates["edit_threshold"] = edit_threshold
    if lint_command is not None:
        updates["lint_command"] = lint_command or None
    if create_tasks is not None:
        updates["create_tasks"] = create_tasks
    merged = existing.model_dump() | updates
    return parse_config(merged, source="command line")


def normalize_keywords(keywords: Sequence[str]) -> list[str]:
    """Split comma-separated entries into trimmed lower-case keywords."""

    result: list[str] = []
    for chunk in keywords:
        for keyword in chunk.split(","):
            cleaned = keyword.strip().lower()
            if cleaned and cleaned not in result:
                result.append(cleaned)
    return result


def project_task_lists(store: TaskStore, project_root: Path | None) -> list[str]:
    """Return task lists related to ``project_root``, or every list when ``None``."""

    available = store.list_ids()
    if project_root is None:
        return available
    project = project_dir_name(project_root).lower()
    if not project:
        return available
    return [name for name in available if project in name.lower()]


def bugfix_task_lists(store: TaskStore, project_root: Path | None) -> list[str]:
    """Return the project task lists whose name mentions ``bugfix``."""

    return [name for name in project_task_lists(store, project_root) if "bugfix" in name.lower()]


__all__ = [
    "HOOK_COMMAND",
    "HOOK_EVENT",
    "HOOK_MATCHER",
    "HOOK_TIMEOUT_SECONDS",
    "add_hook",
    "bugfix_task_lists",
    "get_config",
    "hook_entry",
    "hook_exists",
    "merge_config",
    "normalize_keywords",
    "project_task_lists",
    "read_settings",
    "remove_hook",
    "set_config",
    "settings_path",
    "write_settings",
]
