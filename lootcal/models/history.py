from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from .utils import ms_iso, optional_int


@dataclass(frozen=True)
class HistoryRecord:
    """A past claim reported by the service's history feed."""

    prize_id: int
    template_id: Optional[int] = None
    claimed_at: Optional[int] = None
    acknowledged_at: Optional[int] = None

    def __repr__(self) -> str:
        return (
            "<HistoryRecord("
            f"prize_id={self.prize_id}, template_id={self.template_id}, "
            f"claimed_at={ms_iso(self.claimed_at)}, "
            f"acknowledged_at={ms_iso(self.acknowledged_at)}"
            ")>"
        )

    @property
    def key(self) -> tuple[int, Optional[int], Optional[int]]:
        """Identity of the claim, independent of its acknowledgement."""
        return (self.prize_id, self.template_id, self.claimed_at)

    @property
    def is_claimed(self) -> bool:
        return bool(self.claimed_at)

    @property
    def is_acknowledged(self) -> bool:
        return bool(self.acknowledged_at)

    def acknowledge(self, timestamp: int) -> "HistoryRecord":
        """Return a copy of the record acknowledged at ``timestamp``."""

        if self.is_acknowledged:
            return self
        return replace(self, acknowledged_at=timestamp)

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "HistoryRecord":
        return cls(
            prize_id=int(payload["saw_prize_id"]),
            template_id=optional_int(payload.get("saw_template_id")),
            claimed_at=optional_int(payload.get("create_date_ts")),
            acknowledged_at=optional_int(payload.get("acknowledge_date_ts")),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "prize_id": self.prize_id,
            "template_id": self.template_id,
            "claimed_at": self.claimed_at,
            "acknowledged_at": self.acknowledged_at,
        }

    def to_json_str(self) -> str:
        return json.dumps(self.to_json())


__all__ = ["HistoryRecord"]
