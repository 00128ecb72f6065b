# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from checklint.config import CheckLintConfig
from checklint.engine import TriggerEngine
from checklint.models import HookEvent, SessionState
from checklint.paths import HookPaths
from checklint.process import LintRun
from checklint.state import sanitize_session_id
from checklint.tasks import TaskEmitter, TaskStore

FIXED_MILLIS = 1_700_000_000_000


@dataclass
class RecordingRunner:
    """Lint runner double returning a canned result and recording invocations."""

    returncode: int = 0
    output: str = ""
    timed_out: bool = False
    calls: list[tuple[str, Path]] = field(default_factory=list)

    def __call__(self, command: str, cwd: Path) -> LintRun:
        self.calls.append((command, cwd))
        return LintRun(command=command, returncode=self.returncode, output=self.output, timed_out=self.timed_out)


class MemoryStateStore:
    """Session state store double keeping documents in a dictionary."""

    def __init__(self) -> None:
        self._states: dict[str, dict[str, Any]] = {}

    def get(self, session_id: str) -> SessionState:
        document = self._states.get(sanitize_session_id(session_id))
        return SessionState() if document is None else SessionState.model_validate(document)

    def put(self, session_id: str, state: SessionState) -> None:
        self._states[sanitize_session_id(session_id)] = state.to_document()

    def __contains__(self, session_id: object) -> bool:
        return isinstance(session_id, str) and sanitize_session_id(session_id) in self._states


@pytest.fixture
def hook_paths(tmp_path: Path) -> HookPaths:
    """Return hook paths rooted at a throwaway home directory."""

    home = tmp_path / "home"
    home.mkdir()
    return HookPaths(home=home)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Return a project directory whose name passes the repository pattern."""

    root = tmp_path / "acme-webapp"
    root.mkdir()
    return root


@pytest.fixture
def state_store() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def make_engine(
    hook_paths: HookPaths,
    runner: RecordingRunner,
    state_store: MemoryStateStore,
) -> Callable[..., TriggerEngine]:
    """Return a factory building engines around in-memory state and a recording runner."""

    def _factory(
        config: CheckLintConfig | None = None,
        *,
        session_name: str | None = None,
        detected: str | None = "bun lint",
    ) -> TriggerEngine:
        resolved = config or CheckLintConfig(task_list_id="acme-webapp-bugfixes")
        return TriggerEngine(
            store=state_store,
            emitter=TaskEmitter(TaskStore(hook_paths.tasks_dir), clock=lambda: FIXED_MILLIS),
            config_loader=lambda _cwd: resolved,
            runner=runner,
            detector=lambda _cwd: detected,
            namer=lambda _path: session_name,
            clock=lambda: FIXED_MILLIS,
        )

    return _factory


@pytest.fixture
def edit_event(project_dir: Path) -> Callable[..., HookEvent]:
    """Return a factory building edit events inside ``project_dir``."""

    def _factory(file_path: str = "src/a.ts", *, tool_name: str = "Edit", **extra: Any) -> HookEvent:
        payload: dict[str, Any] = {
            "session_id": "session-1",
            "transcript_path": None,
            "cwd": str(project_dir),
            "tool_name": tool_name,
            "tool_input": {"file_path": str(project_dir / file_path)},
        }
        payload.update(extra)
        return HookEvent.model_validate(payload)

    return _factory


def _write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    """Return a helper writing JSON documents, creating parent directories."""

    return _write_json
