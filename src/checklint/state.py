# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Session state stores keyed by sanitised session identifiers.

Hook invocations are short-lived processes, so the counters accumulated for a
session live on disk between events. Stores perform no cross-process locking:
concurrent invocations may lose an update, which only shifts the next lint run
by an event. Writes always replace the whole document.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from pydantic import ValidationError

from .errors import StateError
from .models import SessionState
from .serialization import atomic_write_json, load_json_object

LOGGER = logging.getLogger(__name__)

STATE_FILE_PREFIX: Final[str] = "checklint-"
DEFAULT_SESSION_KEY: Final[str] = "default"
MAX_SESSION_KEY_LENGTH: Final[int] = 100
_UNSAFE_KEY_CHARS: Final[re.Pattern[str]] = re.compile(r"[^a-zA-Z0-9_-]")


def sanitize_session_id(session_id: str | None) -> str:
    """Return a filesystem-safe key for ``session_id``.

    Args:
        session_id: Opaque identifier supplied by the hook event.

    Returns:
        str: Identifier with unsafe characters replaced by ``-`` and truncated to
        100 characters; ``"default"`` when nothing usable remains.
    """

    if not session_id or not isinstance(session_id, str):
        return DEFAULT_SESSION_KEY
    return _UNSAFE_KEY_CHARS.sub("-", session_id)[:MAX_SESSION_KEY_LENGTH] or DEFAULT_SESSION_KEY


@runtime_checkable
class SessionStateStore(Protocol):
    """Persist :class:`SessionState` documents between hook invocations."""

    def get(self, session_id: str) -> SessionState:
        """Return the state for ``session_id``, creating a fresh one when absent."""

        raise NotImplementedError

    def put(self, session_id: str, state: SessionState) -> None:
        """Persist ``state`` for ``session_id``."""

        raise NotImplementedError


class JsonFileStateStore:
    """Store each session's state as ``checklint-<key>.json`` under a directory."""

    def __init__(self, state_dir: Path) -> None:
        self.state_dir = state_dir

    def path_for(self, session_id: str) -> Path:
        """Return the state document path for ``session_id``."""

        return self.state_dir / f"{STATE_FILE_PREFIX}{sanitize_session_id(session_id)}.json"

    def get(self, session_id: str) -> SessionState:
        """Load the state for ``session_id``.

        Missing or corrupted documents yield a fresh :class:`SessionState`.
        """

        path = self.path_for(session_id)
        try:
            data = load_json_object(path)
        except StateError as exc:
            LOGGER.warning("resetting corrupted session state: %s", exc)
            return SessionState()
        if data is None:
            return SessionState()
        try:
            return SessionState.model_validate(data)
        except ValidationError:
            LOGGER.warning("resetting session state with invalid fields: %s", path)
            return SessionState()

    def put(self, session_id: str, state: SessionState) -> None:
        """Overwrite the state document for ``session_id``."""

        atomic_write_json(self.path_for(session_id), state.to_document())


__all__ = [
    "DEFAULT_SESSION_KEY",
    "JsonFileStateStore",
    "MAX_SESSION_KEY_LENGTH",
    "SessionStateStore",
    "sanitize_session_id",
]
