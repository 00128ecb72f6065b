# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helper services backing the checklint CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rich.table import Table

from ..config import CheckLintConfig
from ..detection import detect_lint_command
from ..errors import CheckLintError
from ..paths import HookPaths
from ..settings import (
    Settings,
    add_hook,
    bugfix_task_lists,
    get_config,
    hook_exists,
    merge_config,
    read_settings,
    remove_hook,
    set_config,
    settings_path,
    write_settings,
)
from ..tasks import TaskStore
from .shared import CLIError, CLILogger

AUTO_DETECT_LABEL = "(auto-detect)"


@dataclass(frozen=True, slots=True)
class InstallTarget:
    """Settings document a command operates on.

    Attributes:
        project_root: Project directory, or ``None`` for the user-wide settings.
        settings_file: Resolved ``settings.json`` path.
    """

    project_root: Path | None
    settings_file: Path

    @property
    def label(self) -> str:
        """Return a human-readable description of the target."""

        if self.project_root is None:
            return f"global ({self.settings_file})"
        return f"project ({self.project_root})"


@dataclass(frozen=True, slots=True)
class ConfigOptions:
    """Configuration overrides supplied on the command line.

    ``None`` leaves the stored value untouched.
    """

    task_list_id: str | None = None
    keywords: str | None = None
    edit_threshold: int | None = None
    lint_command: str | None = None
    create_tasks: bool | None = None

    @property
    def any_set(self) -> bool:
        """Return whether at least one override was supplied."""

        return any(
            value is not None
            for value in (
                self.task_list_id,
                self.keywords,
                self.edit_threshold,
                self.lint_command,
                self.create_tasks,
            )
        )

    def apply(self, existing: CheckLintConfig) -> CheckLintConfig:
        """Return ``existing`` updated with the supplied overrides."""

        try:
            return merge_config(
                existing,
                task_list_id=self.task_list_id,
                keywords=[self.keywords] if self.keywords is not None else None,
                edit_threshold=self.edit_threshold,
                lint_command=self.lint_command,
                create_tasks=self.create_tasks,
            )
        except CheckLintError as exc:
            raise CLIError(str(exc)) from exc


def resolve_target(path: Path | None, *, use_global: bool, paths: HookPaths) -> InstallTarget:
    """Return the settings target selected by CLI arguments.

    Args:
        path: Optional project directory argument.
        use_global: ``True`` when ``--global`` was passed.
        paths: User-scoped locations.

    Returns:
        InstallTarget: User settings for ``--global``, otherwise the settings
        of ``path`` or the current directory.

    Raises:
        CLIError: If ``path`` does not exist.
    """

    if use_global:
        return InstallTarget(project_root=None, settings_file=settings_path(None, paths))
    root = (path or Path.cwd()).resolve()
    if not root.is_dir():
        raise CLIError(f"Path does not exist: {root}")
    return InstallTarget(project_root=root, settings_file=settings_path(root, paths))


def load_settings(target: InstallTarget) -> Settings:
    """Read the settings document of ``target``, refusing malformed files."""

    try:
        return read_settings(target.settings_file)
    except CheckLintError as exc:
        raise CLIError(f"{exc}; fix or remove it before retrying") from exc


def load_target_config(settings: Settings, target: InstallTarget) -> CheckLintConfig:
    """Return the configuration stored for ``target``."""

    try:
        return get_config(settings, source=str(target.settings_file))
    except CheckLintError as exc:
        raise CLIError(str(exc)) from exc


def install_hook(target: InstallTarget, options: ConfigOptions, *, logger: CLILogger) -> CheckLintConfig:
    """Register the hook for ``target`` and store its configuration.

    Installing over an existing registration only updates the configuration.

    Returns:
        CheckLintConfig: Configuration written to the settings document.
    """

    settings = load_settings(target)
    if hook_exists(settings):
        logger.warn(f"Hook already installed in {target.label}; updating configuration")
    else:
        settings = add_hook(settings)
    config = options.apply(load_target_config(settings, target))
    write_settings(target.settings_file, set_config(settings, config))
    return config


def update_config(target: InstallTarget, options: ConfigOptions) -> CheckLintConfig:
    """Update the configuration of an installed hook.

    Raises:
        CLIError: If the hook is not installed in ``target``.
    """

    if not target.settings_file.exists():
        raise CLIError(f"No settings file at {target.settings_file}; run 'checklint install' first")
    settings = load_settings(target)
    if not hook_exists(settings):
        raise CLIError(f"Hook not installed in {target.label}; run 'checklint install' first")
    config = load_target_config(settings, target)
    if not options.any_set:
        return config
    config = options.apply(config)
    write_settings(target.settings_file, set_config(settings, config))
    return config


def uninstall_hook(target: InstallTarget) -> bool:
    """Remove the hook and its configuration from ``target``.

    Returns:
        bool: ``True`` when a registration was removed.
    """

    if not target.settings_file.exists():
        return False
    settings = load_settings(target)
    if not hook_exists(settings):
        return False
    write_settings(target.settings_file, remove_hook(settings))
    return True


@dataclass(frozen=True, slots=True)
class InstallState:
    """Install state of one settings document."""

    target: InstallTarget
    exists: bool
    installed: bool
    config: CheckLintConfig | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class StatusReport:
    """Everything shown by ``checklint status``."""

    global_state: InstallState
    project_state: InstallState
    detected_command: str | None
    bugfix_lists: tuple[str, ...]


def inspect_target(target: InstallTarget) -> InstallState:
    """Return the install state of ``target`` without modifying it."""

    if not target.settings_file.exists():
        return InstallState(target=target, exists=False, installed=False)
    try:
        settings = load_settings(target)
        installed = hook_exists(settings)
        config = load_target_config(settings, target) if installed else None
    except CLIError as exc:
        return InstallState(target=target, exists=True, installed=False, error=str(exc))
    return InstallState(target=target, exists=True, installed=installed, config=config)


def collect_status(project_root: Path, paths: HookPaths) -> StatusReport:
    """Gather the global and project install state for ``project_root``."""

    global_target = resolve_target(None, use_global=True, paths=paths)
    project_target = resolve_target(project_root, use_global=False, paths=paths)
    return StatusReport(
        global_state=inspect_target(global_target),
        project_state=inspect_target(project_target),
        detected_command=detect_lint_command(project_target.project_root or project_root),
        bugfix_lists=tuple(bugfix_task_lists(TaskStore(paths.tasks_dir), project_target.project_root)),
    )


def emit_config_summary(config: CheckLintConfig, *, logger: CLILogger) -> None:
    """Print the effective configuration in a compact table."""

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("setting", style="bold")
    table.add_column("value")
    table.add_row("Threshold", f"{config.effective_threshold} edits")
    table.add_row("Lint command", config.lint_command or AUTO_DETECT_LABEL)
    table.add_row("Task list", config.task_list_id or AUTO_DETECT_LABEL)
    table.add_row("Keywords", ", ".join(config.keywords) or "(any session)")
    table.add_row("Create tasks", "yes" if config.create_tasks else "no")
    table.add_row("Enabled", "yes" if config.enabled else "no")
    logger.console.print(table)


def _emit_install_state(name: str, state: InstallState, *, logger: CLILogger) -> None:
    if state.error:
        logger.fail(f"{name}: {state.error}")
        return
    if not state.exists:
        logger.echo(f"{name}: no settings file ({state.target.settings_file})")
        return
    if not state.installed:
        logger.warn(f"{name}: not installed ({state.target.settings_file})")
        return
    logger.ok(f"{name}: installed ({state.target.settings_file})")
    if state.config is not None:
        command = state.config.lint_command or "(auto)"
        logger.echo(f"    Threshold: {state.config.effective_threshold}, Command: {command}")


def emit_status(report: StatusReport, *, logger: CLILogger) -> None:
    """Render ``report`` for ``checklint status``."""

    _emit_install_state("Global", report.global_state, logger=logger)
    _emit_install_state("Project", report.project_state, logger=logger)
    if report.detected_command:
        logger.echo(f"Detected lint command: {report.detected_command}")
    if report.bugfix_lists:
        logger.echo("Bugfix task lists:")
        for name in report.bugfix_lists:
            logger.echo(f"  - {name}")


__all__ = [
    "ConfigOptions",
    "InstallState",
    "InstallTarget",
    "StatusReport",
    "collect_status",
    "emit_config_summary",
    "emit_status",
    "inspect_target",
    "install_hook",
    "load_settings",
    "resolve_target",
    "uninstall_hook",
    "update_config",
]
