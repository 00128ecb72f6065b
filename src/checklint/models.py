# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the checklint package."""

from __future__ import annotations

from enum import Enum
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from checklint.severity import Severity, TaskPriority

TASK_SOURCE_TAG: Final[str] = "hook-checklint"
EDIT_TOOLS: Final[frozenset[str]] = frozenset({"Edit", "Write", "NotebookEdit"})


class Diagnostic(BaseModel):
    """Standardise a single lint finding parsed from tool output."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int = Field(ge=1)
    column: int = Field(ge=1)
    severity: Severity
    message: str
    rule: str | None = None

    @property
    def location(self) -> str:
        """Return the ``file:line:column`` triple used in task descriptions."""

        return f"{self.file}:{self.line}:{self.column}"


class SessionState(BaseModel):
    """Per-session edit counters persisted between hook invocations.

    ``edited_files`` behaves like an insertion-ordered set: :meth:`record_edit`
    only appends paths that are not already tracked.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        validate_assignment=True,
    )

    edit_count: int = Field(default=0, ge=0)
    edited_files: list[str] = Field(default_factory=list)
    last_lint_run: int = Field(default=0, ge=0)

    def record_edit(self, file_path: str) -> None:
        """Count one edit against ``file_path``.

        Args:
            file_path: Path reported by the edit tool.
        """

        self.edit_count += 1
        if file_path not in self.edited_files:
            self.edited_files.append(file_path)

    def reset(self, *, timestamp_ms: int) -> None:
        """Clear the counters after a lint invocation completes.

        Args:
            timestamp_ms: Epoch milliseconds stamped as the last lint run.
        """

        self.edit_count = 0
        self.edited_files = []
        self.last_lint_run = timestamp_ms

    def to_document(self) -> dict[str, Any]:
        """Return the camelCase JSON document written to disk."""

        return self.model_dump(by_alias=True, mode="json")


class TaskStatus(str, Enum):
    """Lifecycle states understood by the external task list."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskMetadata(BaseModel):
    """Describe the diagnostic a task was filed for."""

    model_config = ConfigDict(frozen=True)

    source: str = TASK_SOURCE_TAG
    file: str
    line: int
    column: int
    rule: str | None = None
    severity: Severity
    priority: TaskPriority


class Task(BaseModel):
    """Tracked work item written to a task-list directory."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str
    subject: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    created_at: str
    metadata: TaskMetadata

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document persisted for the task."""

        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class HookEvent(BaseModel):
    """Payload delivered on stdin for each ``PostToolUse`` invocation."""

    model_config = ConfigDict(extra="ignore")

    session_id: str = ""
    transcript_path: str | None = None
    cwd: str = ""
    tool_name: str = ""
    tool_input: dict[str, Any] = Field(default_factory=dict)
    tool_output: Any = None

    @property
    def is_edit(self) -> bool:
        """Return whether the event was produced by an edit-class tool."""

        return self.tool_name in EDIT_TOOLS

    @property
    def file_path(self) -> str | None:
        """Return the edited path carried by ``tool_input`` when present."""

        for key in ("file_path", "notebook_path"):
            value = self.tool_input.get(key)
            if isinstance(value, str) and value:
                return value
        return None


__all__ = [
    "Diagnostic",
    "EDIT_TOOLS",
    "HookEvent",
    "SessionState",
    "TASK_SOURCE_TAG",
    "Task",
    "TaskMetadata",
    "TaskStatus",
]
