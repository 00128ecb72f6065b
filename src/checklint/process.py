# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free execution of lint commands."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; commands are allowlisted and run
# without ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from .security import command_argv

DEFAULT_LINT_TIMEOUT: Final[float] = 60.0
TIMEOUT_RETURNCODE: Final[int] = 124
NOT_FOUND_RETURNCODE: Final[int] = 127


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Execution options applied to :func:`run_command`."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    timeout: float | None = None
    discard_stdin: bool = True


@dataclass(frozen=True, slots=True)
class LintRun:
    """Outcome of a single lint command execution.

    Attributes:
        command: Command string that was executed.
        returncode: Exit status; ``124`` on timeout and ``127`` when the
            executable could not be found.
        output: Combined stdout and stderr text.
        timed_out: ``True`` when the run hit the timeout.
    """

    command: str
    returncode: int
    output: str
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        """Return whether the lint command exited cleanly."""

        return self.returncode == 0 and not self.timed_out


def _ensure_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable in ``args`` on ``PATH``.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedProcess[str]:
    """Execute ``args`` without a shell, capturing text output.

    A timeout is reported as a completed process with return code ``124`` and a
    note appended to stderr instead of raising.

    Args:
        args: Command and argument sequence to execute.
        options: Execution options; defaults to :class:`CommandOptions`.

    Returns:
        CompletedProcess[str]: Subprocess execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    normalized = _normalize_args(args)
    resolved = options or CommandOptions()
    try:
        return subprocess.run(  # nosec B603 - allowlisted arguments, no shell expansion
            normalized,
            cwd=str(resolved.cwd) if resolved.cwd is not None else None,
            env=dict(resolved.env) if resolved.env is not None else None,
            check=False,
            capture_output=True,
            text=True,
            timeout=resolved.timeout,
            stdin=subprocess.DEVNULL if resolved.discard_stdin else None,
        )
    except subprocess.TimeoutExpired as exc:
        timeout_msg = (
            f"Command timed out after {resolved.timeout:.1f}s" if resolved.timeout is not None else "Command timed out"
        )
        stderr = _ensure_text(exc.stderr)
        return subprocess.CompletedProcess(
            args=normalized,
            returncode=TIMEOUT_RETURNCODE,
            stdout=_ensure_text(exc.stdout),
            stderr=f"{stderr}\n{timeout_msg}" if stderr else timeout_msg,
        )


def run_lint(command: str, cwd: Path, *, timeout: float = DEFAULT_LINT_TIMEOUT) -> LintRun:
    """Run an allowlisted lint ``command`` inside ``cwd``.

    Args:
        command: Allowlisted command string.
        cwd: Project directory the command runs in.
        timeout: Seconds before the run is abandoned.

    Returns:
        LintRun: Execution outcome; a missing executable is reported as a failed
        run rather than raised.

    Raises:
        ValueError: If ``command`` is not allowlisted.
    """

    argv = command_argv(command)
    try:
        completed = run_command(argv, options=CommandOptions(cwd=cwd, timeout=timeout))
    except FileNotFoundError as exc:
        return LintRun(command=command, returncode=NOT_FOUND_RETURNCODE, output=str(exc))
    return LintRun(
        command=command,
        returncode=completed.returncode,
        output=_ensure_text(completed.stdout) + _ensure_text(completed.stderr),
        timed_out=completed.returncode == TIMEOUT_RETURNCODE,
    )


__all__ = [
    "CommandOptions",
    "DEFAULT_LINT_TIMEOUT",
    "LintRun",
    "NOT_FOUND_RETURNCODE",
    "TIMEOUT_RETURNCODE",
    "run_command",
    "run_lint",
]
