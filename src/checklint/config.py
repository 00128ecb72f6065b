# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and layered loading for the checklint hook.

Configuration lives under the ``checkLintConfig`` key of a Claude Code
``settings.json``. Sources are probed in order (project, user, built-in
defaults) and the first document declaring the key wins outright; fragments are
never merged across sources.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import ConfigError, StateError
from .paths import HookPaths, project_settings_path
from .serialization import load_json_object

LOGGER = logging.getLogger(__name__)

CONFIG_KEY: Final[str] = "checkLintConfig"
DEFAULT_EDIT_THRESHOLD: Final[int] = 3
MIN_EDIT_THRESHOLD: Final[int] = 3
MAX_EDIT_THRESHOLD: Final[int] = 7
DEFAULT_KEYWORDS: Final[tuple[str, ...]] = ("dev",)


def clamp_threshold(value: int | None) -> int:
    """Clamp a configured edit threshold into the supported operating range.

    Args:
        value: Threshold read from configuration; falsy values use the default.

    Returns:
        int: ``min(7, max(3, value))``.
    """

    return min(MAX_EDIT_THRESHOLD, max(MIN_EDIT_THRESHOLD, value or DEFAULT_EDIT_THRESHOLD))


class CheckLintConfig(BaseModel):
    """Hook configuration read from ``settings.json``."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    task_list_id: str | None = None
    lint_command: str | None = None
    edit_threshold: int = DEFAULT_EDIT_THRESHOLD
    keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_KEYWORDS))
    enabled: bool = True
    create_tasks: bool = True

    @field_validator("edit_threshold", mode="before")
    @classmethod
    def _default_threshold(cls, value: Any) -> Any:
        return DEFAULT_EDIT_THRESHOLD if value is None else value

    @field_validator("keywords", mode="before")
    @classmethod
    def _default_keywords(cls, value: Any) -> Any:
        return list(DEFAULT_KEYWORDS) if value is None else value

    @property
    def effective_threshold(self) -> int:
        """Return the edit threshold clamped to ``[3, 7]``."""

        return clamp_threshold(self.edit_threshold)

    def to_document(self) -> dict[str, Any]:
        """Return the camelCase fragment stored under :data:`CONFIG_KEY`."""

        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


def parse_config(fragment: Any, *, source: str) -> CheckLintConfig:
    """Validate a raw ``checkLintConfig`` fragment.

    Args:
        fragment: Value stored under :data:`CONFIG_KEY`.
        source: Description of the origin, used in error messages.

    Returns:
        CheckLintConfig: Validated configuration.

    Raises:
        ConfigError: If the fragment is not an object or has invalid field types.
    """

    if not isinstance(fragment, Mapping):
        raise ConfigError(f"{CONFIG_KEY} in {source} must be an object")
    try:
        return CheckLintConfig.model_validate(dict(fragment))
    except ValidationError as exc:
        raise ConfigError(f"Invalid {CONFIG_KEY} in {source}: {exc.error_count()} error(s)") from exc


class SettingsConfigSource:
    """Read the hook configuration fragment from a ``settings.json`` document."""

    def __init__(self, path: Path, *, name: str) -> None:
        self.path = path
        self.name = name

    def load(self) -> Any:
        """Return the raw fragment, or ``None`` when this source does not declare one.

        An unreadable or malformed settings document is reported and treated as
        absent so the next source gets a chance.
        """

        try:
            settings = load_json_object(self.path)
        except StateError as exc:
            LOGGER.warning("ignoring unreadable settings: %s", exc)
            return None
        if not settings:
            return None
        return settings.get(CONFIG_KEY)

    def describe(self) -> str:
        return f"{self.name} settings ({self.path})"


@dataclass(frozen=True, slots=True)
class ConfigLoadResult:
    """Configuration together with the source that supplied it."""

    config: CheckLintConfig
    source: str


def config_sources(cwd: Path, paths: HookPaths) -> list[SettingsConfigSource]:
    """Return the settings sources consulted for ``cwd`` in precedence order."""

    return [
        SettingsConfigSource(project_settings_path(cwd), name="project"),
        SettingsConfigSource(paths.user_settings, name="user"),
    ]


def load_config(
    cwd: Path,
    paths: HookPaths,
    *,
    sources: Sequence[SettingsConfigSource] | None = None,
) -> ConfigLoadResult:
    """Resolve the effective configuration for a hook invocation.

    Args:
        cwd: Project directory reported by the hook event.
        paths: User-scoped locations.
        sources: Optional explicit source list overriding :func:`config_sources`.

    Returns:
        ConfigLoadResult: First declared configuration, or built-in defaults
        when no source declares one or the declared fragment is invalid.
    """

    for source in sources if sources is not None else config_sources(cwd, paths):
        fragment = source.load()
        if fragment is None:
            continue
        try:
            return ConfigLoadResult(config=parse_config(fragment, source=source.describe()), source=source.name)
        except ConfigError as exc:
            LOGGER.warning("falling back to default configuration: %s", exc)
            break
    return ConfigLoadResult(config=CheckLintConfig(), source="defaults")


def resolve_config(cwd: Path, *, paths: HookPaths) -> CheckLintConfig:
    """Return only the effective configuration for ``cwd``."""

    return load_config(cwd, paths).config


__all__ = [
    "CONFIG_KEY",
    "CheckLintConfig",
    "ConfigLoadResult",
    "DEFAULT_EDIT_THRESHOLD",
    "DEFAULT_KEYWORDS",
    "MAX_EDIT_THRESHOLD",
    "MIN_EDIT_THRESHOLD",
    "SettingsConfigSource",
    "clamp_threshold",
    "config_sources",
    "load_config",
    "parse_config",
    "resolve_config",
]
