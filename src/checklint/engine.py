# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Edit-count trigger engine deciding when to run the lint command.

Each hook invocation feeds one :class:`~checklint.models.HookEvent` into
:meth:`TriggerEngine.handle`. Qualifying edits accumulate in the session state
until the edit threshold is reached; the engine then runs the lint command,
files tasks for the relevant diagnostics and resets the counters. The engine
never vetoes the edit it observed: every path yields a typed result that the
hook boundary maps to an approval.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Final

from .clock import Clock, now_millis
from .config import CheckLintConfig, resolve_config
from .detection import detect_lint_command
from .logging import hook_message, info, warn
from .models import Diagnostic, HookEvent, SessionState
from .parsers import parse_lint_output
from .paths import HookPaths, project_dir_name
from .process import NOT_FOUND_RETURNCODE, LintRun, run_lint
from .security import is_allowed_command
from .state import JsonFileStateStore, SessionStateStore
from .tasks import EmissionReport, TaskEmitter, TaskStore, select_relevant
from .transcript import session_name

REPO_DIR_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-z]+-[a-z0-9-]+$", re.IGNORECASE)

LintRunner = Callable[[str, Path], LintRun]
ConfigLoader = Callable[[Path], CheckLintConfig]
CommandDetector = Callable[[Path], str | None]
SessionNamer = Callable[[str | None], str | None]


class ApprovalReason(str, Enum):
    """Why an event was approved without triggering a lint run."""

    MALFORMED_INPUT = "malformed_input"
    IGNORED_TOOL = "ignored_tool"
    REPO_PATTERN = "repo_pattern"
    DISABLED = "disabled"
    KEYWORD_MISMATCH = "keyword_mismatch"
    MISSING_FILE_PATH = "missing_file_path"
    BELOW_THRESHOLD = "below_threshold"


class LintStatus(str, Enum):
    """Result category of a triggered lint invocation."""

    CLEAN = "clean"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    UNAVAILABLE = "unavailable"
    REJECTED = "rejected"
    NO_COMMAND = "no_command"


@dataclass(frozen=True, slots=True)
class LintOutcome:
    """Everything a triggered lint invocation produced."""

    status: LintStatus
    command: str | None = None
    returncode: int | None = None
    edited_files: tuple[str, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    relevant: tuple[Diagnostic, ...] = ()
    emission: EmissionReport | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class Approved:
    """The event was acknowledged without running the lint command."""

    reason: ApprovalReason
    state: SessionState | None = None


@dataclass(frozen=True, slots=True)
class Triggered:
    """The edit threshold was reached and the lint command was handled."""

    outcome: LintOutcome
    state: SessionState


EngineResult = Approved | Triggered


def matches_repo_pattern(cwd: str) -> bool:
    """Return whether the directory name of ``cwd`` looks like ``prefix-name``."""

    return bool(REPO_DIR_PATTERN.match(project_dir_name(cwd)))


def matches_keywords(name: str | None, keywords: Sequence[str]) -> bool:
    """Return whether a session ``name`` passes the keyword guard.

    Sessions without a resolvable name, and configurations without keywords,
    always pass.
    """

    if not keywords or not name:
        return True
    lowered = name.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


@dataclass(slots=True)
class TriggerEngine:
    """Accumulate edits per session and run the lint command at the threshold.

    Attributes:
        store: Session state persistence.
        emitter: Task emitter for relevant diagnostics.
        config_loader: Resolves the configuration for a project directory.
        runner: Executes an allowlisted lint command.
        detector: Infers a lint command when none is configured.
        namer: Resolves the session name from a transcript path.
        clock: Epoch-millisecond clock stamped on lint runs.
    """

    store: SessionStateStore
    emitter: TaskEmitter
    config_loader: ConfigLoader
    runner: LintRunner = field(default=run_lint)
    detector: CommandDetector = field(default=detect_lint_command)
    namer: SessionNamer = field(default=session_name)
    clock: Clock = field(default=now_millis)

    def handle(self, event: HookEvent) -> EngineResult:
        """Process one hook event.

        Args:
            event: Parsed hook payload.

        Returns:
            EngineResult: :class:`Approved` when the event was ignored or only
            counted, :class:`Triggered` when a lint invocation was handled.
        """

        if not event.is_edit:
            return Approved(ApprovalReason.IGNORED_TOOL)
        if not matches_repo_pattern(event.cwd):
            return Approved(ApprovalReason.REPO_PATTERN)
        cwd = Path(event.cwd)
        config = self.config_loader(cwd)
        if not config.enabled:
            return Approved(ApprovalReason.DISABLED)
        if not matches_keywords(self.namer(event.transcript_path), config.keywords):
            return Approved(ApprovalReason.KEYWORD_MISMATCH)
        file_path = event.file_path
        if file_path is None:
            return Approved(ApprovalReason.MISSING_FILE_PATH)

        state = self.store.get(event.session_id)
        state.record_edit(file_path)
        if state.edit_count < config.effective_threshold:
            self.store.put(event.session_id, state)
            return Approved(ApprovalReason.BELOW_THRESHOLD, state=state)

        try:
            outcome = self.run_lint_cycle(cwd, config, tuple(state.edited_files))
        finally:
            state.reset(timestamp_ms=self.clock())
            self.store.put(event.session_id, state)
        return Triggered(outcome=outcome, state=state)

    def run_lint_cycle(
        self,
        cwd: Path,
        config: CheckLintConfig,
        edited_files: tuple[str, ...],
    ) -> LintOutcome:
        """Gate, execute and interpret the lint command for ``cwd``."""

        command = config.lint_command or self.detector(cwd)
        if not command:
            return LintOutcome(status=LintStatus.NO_COMMAND, edited_files=edited_files)
        if not is_allowed_command(command):
            warn(hook_message(f"Skipping lint command not on the allowlist: {command}"))
            return LintOutcome(status=LintStatus.REJECTED, command=command, edited_files=edited_files)

        try:
            run = self.runner(command, cwd)
        except (OSError, ValueError) as exc:
            warn(hook_message(f"Lint command failed to start: {exc}"))
            return LintOutcome(
                status=LintStatus.UNAVAILABLE,
                command=command,
                edited_files=edited_files,
                error=str(exc),
            )
        if run.succeeded:
            return LintOutcome(
                status=LintStatus.CLEAN,
                command=command,
                returncode=run.returncode,
                edited_files=edited_files,
            )

        diagnostics = parse_lint_output(run.output)
        relevant = select_relevant(diagnostics, edited_files)
        emission = self.emitter.emit(relevant, config=config, cwd=cwd)
        _report_emission(emission, relevant_count=len(relevant) if config.create_tasks else 0)
        return LintOutcome(
            status=_failure_status(run),
            command=command,
            returncode=run.returncode,
            edited_files=edited_files,
            diagnostics=tuple(diagnostics),
            relevant=tuple(relevant),
            emission=emission,
        )


def _failure_status(run: LintRun) -> LintStatus:
    if run.timed_out:
        return LintStatus.TIMED_OUT
    if run.returncode == NOT_FOUND_RETURNCODE:
        return LintStatus.UNAVAILABLE
    return LintStatus.FAILED


def _report_emission(report: EmissionReport, *, relevant_count: int) -> None:
    if report.emitted:
        info(hook_message(f'Created {report.emitted} task(s) for lint errors in "{report.task_list_id}"'))
        if report.overflow:
            info(hook_message(f"({report.overflow} more errors not reported)"))
    if relevant_count and report.skipped_reason:
        warn(hook_message(f"{relevant_count} lint error(s) not filed: {report.skipped_reason}"))


def build_engine(paths: HookPaths | None = None) -> TriggerEngine:
    """Return an engine wired to the on-disk stores under ``paths``."""

    resolved = paths or HookPaths.default()
    return TriggerEngine(
        store=JsonFileStateStore(resolved.state_dir),
        emitter=TaskEmitter(TaskStore(resolved.tasks_dir)),
        config_loader=partial(resolve_config, paths=resolved),
    )


__all__ = [
    "ApprovalReason",
    "Approved",
    "EngineResult",
    "LintOutcome",
    "LintStatus",
    "REPO_DIR_PATTERN",
    "TriggerEngine",
    "Triggered",
    "build_engine",
    "matches_keywords",
    "matches_repo_pattern",
]
