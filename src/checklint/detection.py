# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Auto-detection of the lint command for a JavaScript/TypeScript project."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Final

PACKAGE_JSON: Final[str] = "package.json"

# package.json script name -> command; first match wins.
SCRIPT_COMMANDS: Final[tuple[tuple[str, str], ...]] = (
    ("lint", "bun lint"),
    ("lint:check", "bun lint:check"),
    ("eslint", "bun eslint"),
    ("biome", "bun biome check"),
)
BIOME_CONFIGS: Final[tuple[str, ...]] = ("biome.json", "biome.jsonc")
BIOME_COMMAND: Final[str] = "bunx @biomejs/biome check ."
ESLINT_CONFIGS: Final[tuple[str, ...]] = (".eslintrc.json", ".eslintrc.js", "eslint.config.js")
ESLINT_COMMAND: Final[str] = "bunx eslint ."


def _package_scripts(project_root: Path) -> dict[str, object]:
    path = project_root / PACKAGE_JSON
    if not path.is_file():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return {}
    scripts = payload.get("scripts") if isinstance(payload, dict) else None
    return scripts if isinstance(scripts, dict) else {}


def detect_lint_command(project_root: Path) -> str | None:
    """Return the lint command inferred from ``project_root``.

    ``package.json`` scripts take precedence over biome configuration, which in
    turn takes precedence over eslint configuration.

    Args:
        project_root: Directory the hook event reported as ``cwd``.

    Returns:
        str | None: Detected command, or ``None`` when nothing is recognised.
    """

    scripts = _package_scripts(project_root)
    for script, command in SCRIPT_COMMANDS:
        if scripts.get(script):
            return command
    if any((project_root / name).exists() for name in BIOME_CONFIGS):
        return BIOME_COMMAND
    if any((project_root / name).exists() for name in ESLINT_CONFIGS):
        return ESLINT_COMMAND
    return None


__all__ = ["detect_lint_command"]
