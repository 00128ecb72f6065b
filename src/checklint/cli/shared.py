# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors)."""

from __future__ import annotations

from dataclasses import dataclass

import typer
from rich.console import Console
from rich.text import Text

from ..logging import emoji as emoji_prefix


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Render CLI status lines on the stdout :attr:`console`.

    Unlike the hook, which logs to stderr, CLI commands write every line,
    tables included, to standard output.
    """

    console: Console
    use_emoji: bool

    def _print(self, symbol: str, message: str, style: str) -> None:
        text = Text(f"{emoji_prefix(symbol, self.use_emoji)}{message}")
        text.stylize(style)
        self.console.print(text)

    def fail(self, message: str) -> None:
        """Log a failure message honouring emoji preferences.

        Args:
            message: Text describing the failure state.
        """

        self._print("❌ ", message, "red")

    def warn(self, message: str) -> None:
        """Log a warning message honouring emoji preferences."""

        self._print("⚠️ ", message, "yellow")

    def ok(self, message: str) -> None:
        """Log a success message honouring emoji preferences."""

        self._print("✅ ", message, "green")

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper.

        Args:
            message: Text written to standard output.
        """

        typer.echo(message)


def build_cli_logger(*, emoji: bool, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference.

    Args:
        emoji: Whether log output may include emoji glyphs.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger instance bound to a dedicated stdout Rich console.
    """

    console = Console(no_color=no_color, highlight=False, emoji=emoji, soft_wrap=True)
    return CLILogger(console=console, use_emoji=emoji)


__all__ = ["CLIError", "CLILogger", "build_cli_logger"]
