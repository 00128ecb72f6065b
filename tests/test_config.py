# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for configuration parsing and layered loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from checklint.config import (
    CONFIG_KEY,
    CheckLintConfig,
    clamp_threshold,
    load_config,
    parse_config,
    resolve_config,
)
from checklint.errors import ConfigError
from checklint.paths import HookPaths, project_settings_path


def test_defaults() -> None:
    config = CheckLintConfig()

    assert config.task_list_id is None
    assert config.lint_command is None
    assert config.edit_threshold == 3
    assert config.keywords == ["dev"]
    assert config.enabled is True
    assert config.create_tasks is True


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, 3), (0, 3), (1, 3), (3, 3), (5, 5), (7, 7), (50, 7), (-2, 3)],
)
def test_clamp_threshold(raw: int | None, expected: int) -> None:
    assert clamp_threshold(raw) == expected
    if raw is not None:
        assert CheckLintConfig(edit_threshold=raw).effective_threshold == expected


def test_parse_config_accepts_camel_case_keys() -> None:
    config = parse_config(
        {
            "taskListId": "acme-bugfixes",
            "lintCommand": "bun lint",
            "editThreshold": 5,
            "keywords": ["fix"],
            "createTasks": False,
            "unknown": "ignored",
        },
        source="test",
    )

    assert config.task_list_id == "acme-bugfixes"
    assert config.lint_command == "bun lint"
    assert config.effective_threshold == 5
    assert config.keywords == ["fix"]
    assert config.create_tasks is False


def test_parse_config_null_values_fall_back_to_defaults() -> None:
    config = parse_config({"editThreshold": None, "keywords": None}, source="test")

    assert config.edit_threshold == 3
    assert config.keywords == ["dev"]


@pytest.mark.parametrize("fragment", [["not", "an", "object"], {"editThreshold": "many"}])
def test_parse_config_rejects_invalid_fragments(fragment: object) -> None:
    with pytest.raises(ConfigError):
        parse_config(fragment, source="test")


def test_to_document_round_trips_camel_case() -> None:
    config = CheckLintConfig(task_list_id="acme-dev", keywords=["dev", "fix"])

    assert config.to_document() == {
        "taskListId": "acme-dev",
        "editThreshold": 3,
        "keywords": ["dev", "fix"],
        "enabled": True,
        "createTasks": True,
    }


def test_project_settings_take_precedence(hook_paths: HookPaths, project_dir: Path, write_json) -> None:
    write_json(hook_paths.user_settings, {CONFIG_KEY: {"editThreshold": 7}})
    write_json(project_settings_path(project_dir), {CONFIG_KEY: {"editThreshold": 4}})

    result = load_config(project_dir, hook_paths)

    assert result.source == "project"
    assert result.config.edit_threshold == 4


def test_sources_are_not_merged(hook_paths: HookPaths, project_dir: Path, write_json) -> None:
    write_json(hook_paths.user_settings, {CONFIG_KEY: {"taskListId": "from-user"}})
    write_json(project_settings_path(project_dir), {CONFIG_KEY: {"editThreshold": 4}})

    config = resolve_config(project_dir, paths=hook_paths)

    assert config.task_list_id is None


def test_user_settings_apply_without_project_key(hook_paths: HookPaths, project_dir: Path, write_json) -> None:
    write_json(project_settings_path(project_dir), {"permissions": {}})
    write_json(hook_paths.user_settings, {CONFIG_KEY: {"keywords": []}})

    result = load_config(project_dir, hook_paths)

    assert result.source == "user"
    assert result.config.keywords == []


def test_missing_settings_use_defaults(hook_paths: HookPaths, project_dir: Path) -> None:
    result = load_config(project_dir, hook_paths)

    assert result.source == "defaults"
    assert result.config == CheckLintConfig()


def test_invalid_fragment_falls_back_to_defaults(
    hook_paths: HookPaths,
    project_dir: Path,
    write_json,
    caplog: pytest.LogCaptureFixture,
) -> None:
    write_json(project_settings_path(project_dir), {CONFIG_KEY: {"enabled": {"nested": True}}})
    write_json(hook_paths.user_settings, {CONFIG_KEY: {"editThreshold": 6}})

    with caplog.at_level("WARNING", logger="checklint.config"):
        result = load_config(project_dir, hook_paths)

    assert result.source == "defaults"
    assert result.config.edit_threshold == 3
    assert "falling back to default configuration" in caplog.text


def test_malformed_settings_file_is_skipped(hook_paths: HookPaths, project_dir: Path, write_json) -> None:
    settings = project_settings_path(project_dir)
    settings.parent.mkdir(parents=True)
    settings.write_text("{broken", encoding="utf-8")
    write_json(hook_paths.user_settings, {CONFIG_KEY: {"editThreshold": 6}})

    result = load_config(project_dir, hook_paths)

    assert result.source == "user"
    assert result.config.edit_threshold == 6
