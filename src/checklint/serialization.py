# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers for reading and writing the JSON documents checklint owns."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .errors import StateError


def load_json_object(path: Path) -> dict[str, Any] | None:
    """Load ``path`` as a JSON object.

    Args:
        path: Document to read.

    Returns:
        dict[str, Any] | None: Parsed object, or ``None`` when the file is missing.

    Raises:
        StateError: If the file cannot be read, is not valid JSON, or does not
            contain a JSON object.
    """

    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StateError(f"Invalid JSON document: {path}") from exc
    if not isinstance(data, dict):
        raise StateError(f"JSON document must be an object: {path}")
    return data


def atomic_write_json(path: Path, payload: Mapping[str, Any]) -> None:
    """Write ``payload`` to ``path`` atomically (temp file + rename).

    Readers racing with the write observe either the previous document or the
    new one, never a truncated file.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=".tmp_",
        suffix=path.suffix or ".json",
        text=True,
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
            handle.write("\n")
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


__all__ = ["atomic_write_json", "load_json_object"]
