# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for session state models and stores."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from checklint.models import SessionState
from checklint.state import JsonFileStateStore, sanitize_session_id


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("abc-123_DEF", "abc-123_DEF"),
        ("../../etc/passwd", "------etc-passwd"),
        ("", "default"),
        (None, "default"),
    ],
)
def test_sanitize_session_id(raw: str | None, expected: str) -> None:
    assert sanitize_session_id(raw) == expected


def test_sanitize_session_id_truncates_long_ids() -> None:
    assert sanitize_session_id("x" * 250) == "x" * 100


def test_record_edit_keeps_first_occurrence_order() -> None:
    state = SessionState()

    for path in ("b.ts", "a.ts", "b.ts"):
        state.record_edit(path)

    assert state.edit_count == 3
    assert state.edited_files == ["b.ts", "a.ts"]


def test_reset_clears_counters_and_stamps_run() -> None:
    state = SessionState(edit_count=4, edited_files=["a.ts"])

    state.reset(timestamp_ms=42)

    assert state.edit_count == 0
    assert state.edited_files == []
    assert state.last_lint_run == 42


def test_json_store_round_trip_uses_camel_case_keys(tmp_path: Path) -> None:
    store = JsonFileStateStore(tmp_path / "hook-state")
    state = SessionState()
    state.record_edit("/repo/src/a.ts")

    store.put("session/1", state)

    path = tmp_path / "hook-state" / "checklint-session-1.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "editCount": 1,
        "editedFiles": ["/repo/src/a.ts"],
        "lastLintRun": 0,
    }
    assert store.get("session/1") == state


def test_json_store_treats_missing_state_as_fresh(tmp_path: Path) -> None:
    store = JsonFileStateStore(tmp_path)

    assert store.get("unknown") == SessionState()


@pytest.mark.parametrize("content", ["{not json", "[]", '{"editCount": -3}'])
def test_json_store_treats_corrupt_state_as_fresh(tmp_path: Path, content: str) -> None:
    store = JsonFileStateStore(tmp_path)
    store.path_for("s").write_text(content, encoding="utf-8")

    assert store.get("s") == SessionState()
