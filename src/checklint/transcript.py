# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Session name lookup from Claude Code transcript files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Final

CUSTOM_TITLE_TYPE: Final[str] = "custom-title"
_TITLE_MARKER: Final[str] = f'"{CUSTOM_TITLE_TYPE}"'


def session_name(transcript_path: str | Path | None) -> str | None:
    """Return the most recent custom title recorded in a JSONL transcript.

    Args:
        transcript_path: Transcript location reported by the hook event.

    Returns:
        str | None: ``customTitle`` of the last ``custom-title`` entry, or
        ``None`` when the transcript is missing, unreadable or untitled.
    """

    if not transcript_path:
        return None
    path = Path(transcript_path)
    if not path.is_file():
        return None
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    title: str | None = None
    for line in content.splitlines():
        if _TITLE_MARKER not in line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            continue
        if not isinstance(entry, dict) or entry.get("type") != CUSTOM_TITLE_TYPE:
            continue
        candidate = entry.get("customTitle")
        if isinstance(candidate, str) and candidate:
            title = candidate
    return title


__all__ = ["session_name"]
