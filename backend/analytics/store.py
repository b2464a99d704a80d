from __future__ import annotations

import time
from typing import Any

_events: list[dict[str, Any]] = []


def record_event(kind: str, data: dict[str, Any]) -> None:
    """Append one recommendation request to the in-process log."""
    _events.append({
        "kind": kind,
        "timestamp": time.time(),
        **data,
    })


def get_events() -> list[dict[str, Any]]:
    return list(_events)


def clear_events() -> None:
    _events.clear()
