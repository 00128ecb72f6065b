# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Wall-clock helpers injected into the engine and task emitter."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], int]


def now_millis() -> int:
    """Return the current time as integer epoch milliseconds."""

    return time.time_ns() // 1_000_000


def iso_from_millis(timestamp_ms: int) -> str:
    """Return ``timestamp_ms`` rendered as an ISO-8601 UTC timestamp."""

    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["Clock", "iso_from_millis", "now_millis"]
