# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Convert diagnostics into task files inside a task-list directory."""

from __future__ import annotations

import re
import secrets
import string
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Final

from .clock import Clock, iso_from_millis, now_millis
from .config import CheckLintConfig
from .models import Diagnostic, Task, TaskMetadata, TaskStatus
from .paths import project_dir_name
from .serialization import atomic_write_json
from .severity import priority_for

MAX_TASKS_PER_RUN: Final[int] = 5
TASK_ID_PREFIX: Final[str] = "lint-"
TASK_ID_SUFFIX_LENGTH: Final[int] = 6
PREFERRED_LIST_MARKERS: Final[tuple[str, ...]] = ("bugfix", "dev")
_ID_ALPHABET: Final[str] = string.digits + string.ascii_lowercase
_TASK_LIST_ID: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_-]+$")


class TaskStore:
    """Directory-backed task lists: ``<root>/<task-list-id>/<task-id>.json``."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def list_ids(self) -> list[str]:
        """Return the names of existing task-list directories, sorted."""

        if not self.root.is_dir():
            return []
        try:
            return sorted(entry.name for entry in self.root.iterdir() if entry.is_dir())
        except OSError:
            return []

    def path_for(self, task_list_id: str, task_id: str) -> Path:
        """Return the file a task is written to."""

        return self.root / task_list_id / f"{task_id}.json"

    def write(self, task_list_id: str, task: Task) -> Path:
        """Persist ``task`` into ``task_list_id`` and return its path."""

        path = self.path_for(task_list_id, task.id)
        atomic_write_json(path, task.to_document())
        return path


def _basename(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).name


def is_relevant(diagnostic: Diagnostic, edited_files: Sequence[str]) -> bool:
    """Return whether ``diagnostic`` points at one of ``edited_files``.

    Matching is by suffix containment in either direction: an edited path ending
    with the diagnostic's file, or the diagnostic's file ending with the edited
    file's name. Edited files sharing a name in different directories are not
    told apart.
    """

    for edited in edited_files:
        if edited.endswith(diagnostic.file):
            return True
        name = _basename(edited)
        if name and diagnostic.file.endswith(name):
            return True
    return False


def select_relevant(diagnostics: Sequence[Diagnostic], edited_files: Sequence[str]) -> list[Diagnostic]:
    """Filter ``diagnostics`` down to those touching ``edited_files``, keeping order."""

    return [diagnostic for diagnostic in diagnostics if is_relevant(diagnostic, edited_files)]


def find_project_task_list(cwd: str | Path, available: Sequence[str]) -> str | None:
    """Pick a task list belonging to the project in ``cwd``.

    Lists whose name starts with the project directory name are considered; one
    containing ``bugfix`` is preferred, then one containing ``dev``.
    """

    project = project_dir_name(cwd).lower()
    candidates = [name for name in available if name.lower().startswith(project)]
    for marker in PREFERRED_LIST_MARKERS:
        for name in candidates:
            if marker in name.lower():
                return name
    return None


def is_valid_task_list_id(task_list_id: str) -> bool:
    """Return whether ``task_list_id`` is a single safe directory name."""

    return bool(_TASK_LIST_ID.match(task_list_id))


def resolve_task_list(config: CheckLintConfig, cwd: str | Path, store: TaskStore) -> str | None:
    """Return the configured task list, or the project list found in ``store``."""

    if config.task_list_id:
        return config.task_list_id
    return find_project_task_list(cwd, store.list_ids())


def new_task_id(timestamp_ms: int) -> str:
    """Return a time-based task id with a random base36 suffix."""

    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(TASK_ID_SUFFIX_LENGTH))
    return f"{TASK_ID_PREFIX}{timestamp_ms}-{suffix}"


def build_task(diagnostic: Diagnostic, *, timestamp_ms: int) -> Task:
    """Build the task filed for ``diagnostic``.

    Args:
        diagnostic: Relevant lint finding.
        timestamp_ms: Creation time in epoch milliseconds.

    Returns:
        Task: Pending task describing how to resolve the finding.
    """

    priority = priority_for(diagnostic.severity)
    severity = diagnostic.severity.value
    rule_suffix = f" ({diagnostic.rule})" if diagnostic.rule else ""
    details = [
        f"Fix lint {severity} at {diagnostic.location}",
        "",
        f"**Error:** {diagnostic.message}{rule_suffix}",
        "",
        f"**File:** {diagnostic.file}",
        f"**Line:** {diagnostic.line}",
        f"**Column:** {diagnostic.column}",
    ]
    if diagnostic.rule:
        details.append(f"**Rule:** {diagnostic.rule}")
    details.extend(
        [
            "",
            "**Acceptance criteria:**",
            "- Lint error is fixed",
            "- No new lint errors introduced",
        ]
    )
    return Task(
        id=new_task_id(timestamp_ms),
        subject=f"BUG: {priority.value.upper()} - Fix lint {severity} in {diagnostic.file}:{diagnostic.line}",
        description="\n".join(details),
        status=TaskStatus.PENDING,
        created_at=iso_from_millis(timestamp_ms),
        metadata=TaskMetadata(
            file=diagnostic.file,
            line=diagnostic.line,
            column=diagnostic.column,
            rule=diagnostic.rule,
            severity=diagnostic.severity,
            priority=priority,
        ),
    )


@dataclass(frozen=True, slots=True)
class EmissionReport:
    """Summary of one emission attempt.

    Attributes:
        task_list_id: Task list written to, when one was resolved.
        created: Tasks written, in diagnostic order.
        overflow: Relevant diagnostics beyond the per-run cap.
        skipped_reason: Why emission stopped early or never started.
    """

    task_list_id: str | None = None
    created: tuple[Task, ...] = ()
    overflow: int = 0
    skipped_reason: str | None = None

    @property
    def emitted(self) -> int:
        """Return the number of tasks written."""

        return len(self.created)


class TaskEmitter:
    """File bounded task sets for the diagnostics of a lint run."""

    def __init__(
        self,
        store: TaskStore,
        *,
        clock: Clock = now_millis,
        max_tasks: int = MAX_TASKS_PER_RUN,
    ) -> None:
        self.store = store
        self.clock = clock
        self.max_tasks = max_tasks

    def emit(
        self,
        diagnostics: Sequence[Diagnostic],
        *,
        config: CheckLintConfig,
        cwd: str | Path,
    ) -> EmissionReport:
        """Write one task per relevant diagnostic, capped at :attr:`max_tasks`.

        Args:
            diagnostics: Relevant diagnostics in report order.
            config: Hook configuration (``createTasks``/``taskListId``).
            cwd: Project directory used to derive a fallback task list.

        Returns:
            EmissionReport: Created tasks plus the overflow that was not emitted.
            A write failure stops emission and is recorded as the skip reason.
        """

        if not config.create_tasks:
            return EmissionReport(skipped_reason="task creation disabled")
        if not diagnostics:
            return EmissionReport(skipped_reason="no relevant diagnostics")
        task_list_id = resolve_task_list(config, cwd, self.store)
        if task_list_id is None:
            return EmissionReport(skipped_reason="no task list resolved")
        if not is_valid_task_list_id(task_list_id):
            return EmissionReport(skipped_reason="invalid task list id")

        batch = list(diagnostics[: self.max_tasks])
        overflow = len(diagnostics) - len(batch)
        created: list[Task] = []
        for diagnostic in batch:
            task = build_task(diagnostic, timestamp_ms=self.clock())
            try:
                self.store.write(task_list_id, task)
            except OSError as exc:
                return EmissionReport(
                    task_list_id=task_list_id,
                    created=tuple(created),
                    overflow=overflow,
                    skipped_reason=f"task write failed: {exc}",
                )
            created.append(task)
        return EmissionReport(task_list_id=task_list_id, created=tuple(created), overflow=overflow)


__all__ = [
    "EmissionReport",
    "MAX_TASKS_PER_RUN",
    "TaskEmitter",
    "TaskStore",
    "build_task",
    "find_project_task_list",
    "is_valid_task_list_id",
    "is_relevant",
    "new_task_id",
    "resolve_task_list",
    "select_relevant",
]
