# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Allowlist gate for lint commands executed by the hook.

The lint command may come from a project-controlled ``settings.json``; running
it verbatim would let any repository execute arbitrary commands on edit. Only
invocations that extend a known lint entrypoint are accepted.
"""

from __future__ import annotations

import shlex
from typing import Final

ALLOWED_LINT_COMMANDS: Final[tuple[str, ...]] = (
    "bun lint",
    "bun lint:check",
    "bun eslint",
    "bun biome check",
    "bunx @biomejs/biome check .",
    "bunx eslint .",
    "npm run lint",
    "npm run lint:check",
    "npx eslint .",
    "npx @biomejs/biome check .",
)
ARGUMENT_SEPARATOR: Final[str] = " "


def is_allowed_command(command: str | None) -> bool:
    """Return whether ``command`` is an allowlisted lint invocation.

    Args:
        command: Command string from configuration or auto-detection.

    Returns:
        bool: ``True`` when ``command`` equals an allowlist entry or starts with
        an entry followed by a space.
    """

    if not command or not isinstance(command, str):
        return False
    return any(
        command == allowed or command.startswith(allowed + ARGUMENT_SEPARATOR) for allowed in ALLOWED_LINT_COMMANDS
    )


def command_argv(command: str) -> list[str]:
    """Split an allowlisted ``command`` into an argument vector.

    Raises:
        ValueError: If ``command`` is not allowlisted or cannot be tokenised.
    """

    if not is_allowed_command(command):
        raise ValueError(f"Lint command is not allowlisted: {command!r}")
    return shlex.split(command)


__all__ = ["ALLOWED_LINT_COMMANDS", "command_argv", "is_allowed_command"]
