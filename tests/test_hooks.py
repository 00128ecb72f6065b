# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the hook process boundary."""

from __future__ import annotations

import io
import json

import pytest

from checklint.config import CONFIG_KEY
from checklint.engine import ApprovalReason, Approved, build_engine
from checklint.hook import main, process_event, read_event
from checklint.paths import project_settings_path
from checklint.tasks import MAX_TASKS_PER_RUN


@pytest.mark.parametrize("raw", ["", "   ", "not json", "[1, 2]", '{"tool_input": "oops"}'])
def test_read_event_rejects_malformed_payloads(raw: str) -> None:
    assert read_event(io.StringIO(raw)) is None


def test_read_event_ignores_unknown_keys() -> None:
    payload = {"session_id": "s", "cwd": "/w/acme-app", "tool_name": "Edit", "hook_event_name": "PostToolUse"}

    event = read_event(io.StringIO(json.dumps(payload)))

    assert event is not None
    assert event.tool_name == "Edit"
    assert event.file_path is None


def test_notebook_path_is_used_when_file_path_missing() -> None:
    payload = {"tool_name": "NotebookEdit", "tool_input": {"notebook_path": "/w/acme-app/a.ipynb"}}

    event = read_event(io.StringIO(json.dumps(payload)))

    assert event is not None
    assert event.file_path == "/w/acme-app/a.ipynb"


def test_process_event_approves_malformed_input(make_engine) -> None:
    assert process_event(None, make_engine()) == Approved(ApprovalReason.MALFORMED_INPUT)


def test_main_always_approves(make_engine, edit_event, state_store) -> None:
    engine = make_engine()
    stdout = io.StringIO()

    code = main(stdin=io.StringIO(edit_event().model_dump_json()), stdout=stdout, engine=engine)

    assert code == 0
    assert json.loads(stdout.getvalue()) == {"decision": "approve"}
    assert state_store.get("session-1").edit_count == 1


def test_main_approves_when_engine_fails(make_engine, edit_event) -> None:
    engine = make_engine()

    def _explode(_cwd):
        raise RuntimeError("config exploded")

    engine.config_loader = _explode
    stdout = io.StringIO()

    code = main(stdin=io.StringIO(edit_event().model_dump_json()), stdout=stdout, engine=engine)

    assert code == 0
    assert json.loads(stdout.getvalue()) == {"decision": "approve"}


def test_main_approves_malformed_stdin(make_engine) -> None:
    stdout = io.StringIO()

    assert main(stdin=io.StringIO("{"), stdout=stdout, engine=make_engine()) == 0
    assert json.loads(stdout.getvalue()) == {"decision": "approve"}


def test_read_event_rejects_undecodable_bytes() -> None:
    stream = io.TextIOWrapper(io.BytesIO(b"\xff\xfe{\x80}"), encoding="utf-8")

    assert read_event(stream) is None


def test_main_approves_undecodable_stdin_silently(make_engine, capsys: pytest.CaptureFixture[str]) -> None:
    stdin = io.TextIOWrapper(io.BytesIO(b"\xc3\x28"), encoding="utf-8")
    stdout = io.StringIO()

    assert main(stdin=stdin, stdout=stdout, engine=make_engine()) == 0
    assert json.loads(stdout.getvalue()) == {"decision": "approve"}
    assert "Error" not in capsys.readouterr().err


def test_state_persists_across_hook_invocations(hook_paths, project_dir, runner, edit_event, write_json) -> None:
    write_json(
        project_settings_path(project_dir),
        {CONFIG_KEY: {"lintCommand": "bun lint", "taskListId": "acme-webapp-bugfixes"}},
    )
    runner.returncode = 1
    runner.output = "\n".join(f"src/a.ts:{line}:1: error broken [no-undef]" for line in range(1, 8))

    for _ in range(3):
        engine = build_engine(hook_paths)
        engine.runner = runner
        assert main(stdin=io.StringIO(edit_event().model_dump_json()), stdout=io.StringIO(), engine=engine) == 0

    state = json.loads((hook_paths.state_dir / "checklint-session-1.json").read_text(encoding="utf-8"))
    assert state["editCount"] == 0
    assert state["editedFiles"] == []
    assert len(runner.calls) == 1
    assert len(list((hook_paths.tasks_dir / "acme-webapp-bugfixes").glob("*.json"))) == MAX_TASKS_PER_RUN
