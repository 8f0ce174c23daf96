"""Utility helpers for the models package."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def optional_int(value: Any) -> Optional[int]:
    """Coerce a JSON value to ``int`` while keeping ``None`` and ``""`` absent."""

    if value is None or value == "":
        return None
    return int(value)


def ms_iso(ms: Optional[int]) -> Optional[str]:
    """Convert an epoch-millisecond timestamp to an ISO 8601 UTC string, or None."""

    if ms is None:
        return None
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat()


__all__ = ["ms_iso", "optional_int"]
