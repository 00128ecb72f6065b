# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the checklint commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .. import __version__
from ..config import MAX_EDIT_THRESHOLD, MIN_EDIT_THRESHOLD
from ..hook import main as hook_main
from ..paths import HookPaths
from .services import (
    ConfigOptions,
    collect_status,
    emit_config_summary,
    emit_status,
    install_hook,
    resolve_target,
    uninstall_hook,
    update_config,
)
from .shared import CLIError, build_cli_logger

app = typer.Typer(
    name="checklint",
    help="Run the project linter after repeated edits and file tasks for its errors.",
    add_completion=False,
    no_args_is_help=True,
)

PathArgument = Annotated[
    Path | None,
    typer.Argument(help="Project directory; defaults to the current directory.", show_default=False),
]
GlobalOption = Annotated[
    bool,
    typer.Option("--global", "-g", help="Use ~/.claude/settings.json instead of a project."),
]
TaskListOption = Annotated[
    str | None,
    typer.Option("--task-list-id", "-t", help="Task list receiving lint tasks."),
]
KeywordsOption = Annotated[
    str | None,
    typer.Option("--keywords", "-k", help="Comma-separated session keywords."),
]
ThresholdOption = Annotated[
    int | None,
    typer.Option(
        "--threshold",
        "-n",
        min=MIN_EDIT_THRESHOLD,
        max=MAX_EDIT_THRESHOLD,
        help="Edits between lint runs.",
    ),
]
LintCommandOption = Annotated[
    str | None,
    typer.Option("--lint-command", help="Lint command; must be on the allowlist."),
]
CreateTasksOption = Annotated[
    bool | None,
    typer.Option("--create-tasks/--no-create-tasks", help="Toggle task creation.", show_default=False),
]
EmojiOption = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji in CLI output."),
]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"checklint {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Run the project linter after repeated edits and file tasks for its errors."""


@app.command("run")
def run_command() -> None:
    """Handle one PostToolUse event from stdin (invoked by Claude Code)."""

    raise typer.Exit(code=hook_main())


@app.command("install")
def install_command(
    path: PathArgument = None,
    use_global: GlobalOption = False,
    task_list_id: TaskListOption = None,
    keywords: KeywordsOption = None,
    threshold: ThresholdOption = None,
    lint_command: LintCommandOption = None,
    create_tasks: CreateTasksOption = None,
    emoji: EmojiOption = True,
) -> None:
    """Register the hook and write its configuration."""

    logger = build_cli_logger(emoji=emoji)
    options = ConfigOptions(
        task_list_id=task_list_id,
        keywords=keywords,
        edit_threshold=threshold,
        lint_command=lint_command,
        create_tasks=create_tasks,
    )
    try:
        target = resolve_target(path, use_global=use_global, paths=HookPaths.default())
        config = install_hook(target, options, logger=logger)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    logger.ok(f"Installed to {target.label}")
    emit_config_summary(config, logger=logger)


@app.command("config")
def config_command(
    path: PathArgument = None,
    use_global: GlobalOption = False,
    task_list_id: TaskListOption = None,
    keywords: KeywordsOption = None,
    threshold: ThresholdOption = None,
    lint_command: LintCommandOption = None,
    create_tasks: CreateTasksOption = None,
    emoji: EmojiOption = True,
) -> None:
    """Show or update the configuration of an installed hook."""

    logger = build_cli_logger(emoji=emoji)
    options = ConfigOptions(
        task_list_id=task_list_id,
        keywords=keywords,
        edit_threshold=threshold,
        lint_command=lint_command,
        create_tasks=create_tasks,
    )
    try:
        target = resolve_target(path, use_global=use_global, paths=HookPaths.default())
        config = update_config(target, options)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    if options.any_set:
        logger.ok(f"Configuration updated in {target.label}")
    emit_config_summary(config, logger=logger)


@app.command("uninstall")
def uninstall_command(
    path: PathArgument = None,
    use_global: GlobalOption = False,
    emoji: EmojiOption = True,
) -> None:
    """Remove the hook and its configuration."""

    logger = build_cli_logger(emoji=emoji)
    try:
        target = resolve_target(path, use_global=use_global, paths=HookPaths.default())
        removed = uninstall_hook(target)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    if removed:
        logger.ok(f"Removed from {target.label}")
    else:
        logger.warn(f"Hook not found in {target.label}")


@app.command("status")
def status_command(
    path: PathArgument = None,
    emoji: EmojiOption = True,
) -> None:
    """Show where the hook is installed and what it would run."""

    logger = build_cli_logger(emoji=emoji)
    try:
        report = collect_status(path or Path.cwd(), HookPaths.default())
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    emit_status(report, logger=logger)


__all__ = ["app"]
