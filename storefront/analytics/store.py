"""
Storefront event log.

Events are flat dicts: ``type`` and ``timestamp`` plus whatever fields the
caller recorded (``code``, ``product_id``, ``order_id`` ...). Only the most
recent ``MAX_EVENTS`` are retained.
"""

from __future__ import annotations

import time
from collections import deque
from typing import Any

MAX_EVENTS = 10_000

EVENT_TYPES = frozenset({
    "order_placed",
    "coupon_applied",
    "coupon_rejected",
    "related_viewed",
})

_log: deque[dict[str, Any]] = deque(maxlen=MAX_EVENTS)


def record_event(event_type: str, data: dict[str, Any]) -> None:
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown analytics event type: {event_type!r}")
    _log.append({**data, "type": event_type, "timestamp": time.time()})


def get_events(event_type: str | None = None) -> list[dict[str, Any]]:
    return [e for e in _log if event_type is None or e["type"] == event_type]


def clear_events() -> None:
    _log.clear()
