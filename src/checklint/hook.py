# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process boundary for the ``PostToolUse`` hook.

The hook reads one JSON event from stdin and always answers with an approval on
stdout. Anything that goes wrong while handling the event is logged to stderr
and never changes the decision.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Final, TextIO

from pydantic import ValidationError

from .engine import ApprovalReason, Approved, EngineResult, TriggerEngine, build_engine
from .logging import hook_message, warn
from .models import HookEvent

LOGGER = logging.getLogger(__name__)

APPROVE_DECISION: Final[dict[str, str]] = {"decision": "approve"}


def read_event(stream: TextIO) -> HookEvent | None:
    """Parse the hook payload from ``stream``.

    Args:
        stream: Text stream holding a single JSON object.

    Returns:
        HookEvent | None: Parsed event, or ``None`` when the payload is empty,
        undecodable, not JSON or not an object.
    """

    try:
        raw = stream.read()
    except UnicodeDecodeError:
        return None
    if not raw.strip():
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    try:
        return HookEvent.model_validate(payload)
    except ValidationError:
        return None


def write_decision(stream: TextIO) -> None:
    """Write the approval decision to ``stream``."""

    stream.write(json.dumps(APPROVE_DECISION))
    stream.write("\n")
    stream.flush()


def process_event(event: HookEvent | None, engine: TriggerEngine) -> EngineResult:
    """Route ``event`` through ``engine``, approving malformed input directly."""

    if event is None:
        return Approved(ApprovalReason.MALFORMED_INPUT)
    return engine.handle(event)


def main(
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    engine: TriggerEngine | None = None,
) -> int:
    """Handle one hook invocation end to end.

    Args:
        stdin: Event source; defaults to :data:`sys.stdin`.
        stdout: Decision sink; defaults to :data:`sys.stdout`.
        engine: Engine override; defaults to one wired to the user's home.

    Returns:
        int: Always ``0``.
    """

    source = stdin or sys.stdin
    sink = stdout or sys.stdout
    try:
        process_event(read_event(source), engine or build_engine())
    except Exception as exc:
        LOGGER.debug("hook invocation failed", exc_info=True)
        warn(hook_message(f"Error: {exc}"))
    write_decision(sink)
    return 0


__all__ = ["APPROVE_DECISION", "main", "process_event", "read_event", "write_decision"]
