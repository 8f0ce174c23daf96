"""Prize definitions supplied by the lootbox service."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Mapping, Optional

from .utils import optional_int

logger = logging.getLogger(__name__)


class AttemptPeriodType(IntEnum):
    """How the availability window of a prize is measured."""

    FROM_LAST_ATTEMPT = 1
    CALENDAR_DAYS_UTC = 2
    CALENDAR_DAYS_USER_TIMEZONE = 3
    LIFETIME = 4

    @classmethod
    def from_api(cls, value: Optional[int]) -> Optional["AttemptPeriodType"]:
        """Parse a policy id; unknown ids count as user-timezone calendar days."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            logger.debug(f"Unknown attempt period type {value}, using user timezone")
            return cls.CALENDAR_DAYS_USER_TIMEZONE


class AcknowledgeType(str, Enum):
    """Whether a won prize needs a confirmatory action to be settled."""

    IMPLICIT = "implicit"
    EXPLICIT = "explicit"

    @classmethod
    def from_api(cls, value: Optional[str]) -> "AcknowledgeType":
        # The service spells the explicit variant "explicity-acknowledge".
        if value in ("explicity-acknowledge", "explicit-acknowledge", "explicit"):
            return cls.EXPLICIT
        return cls.IMPLICIT


@dataclass(frozen=True)
class Prize:
    """Immutable prize definition.

    Attributes
    ----------
    id : int
        Unique identifier of the prize.
    active_from, active_till : Optional[int]
        One-shot availability window in epoch milliseconds.
    weekdays : tuple[int, ...]
        ISO weekdays (1=Monday .. 7=Sunday) of a recurring weekly slot, in
        configured order. Empty when the prize is not weekday based.
    timezone_policy : Optional[AttemptPeriodType]
        Governs which "now" is used. ``None`` for legacy payloads, in which
        case a present ``timezone_offset_minutes`` implies UTC calendar days.
    timezone_offset_minutes : Optional[int]
        Offset from UTC applied by UTC-based policies.
    pool : Optional[int]
        Remaining stock; ``0`` means exhausted unless ``is_surcharge``.
    acknowledge_type : AcknowledgeType
        ``EXPLICIT`` prizes wait for a confirmatory action after a win.
    """

    id: int
    name: Optional[str] = None
    icon: Optional[str] = None
    out_of_stock_message: Optional[str] = None
    requirements_message: Optional[str] = None
    acknowledge_message: Optional[str] = None
    acknowledge_action_title: Optional[str] = None
    acknowledge_cancel_title: Optional[str] = None
    active_from: Optional[int] = None
    active_till: Optional[int] = None
    weekdays: tuple[int, ...] = field(default_factory=tuple)
    timezone_policy: Optional[AttemptPeriodType] = None
    timezone_offset_minutes: Optional[int] = None
    pool: Optional[int] = None
    is_surcharge: bool = False
    acknowledge_type: AcknowledgeType = AcknowledgeType.IMPLICIT

    @property
    def has_date_window(self) -> bool:
        return bool(self.active_from) and bool(self.active_till)

    @property
    def has_weekdays(self) -> bool:
        return len(self.weekdays) > 0

    @property
    def is_eligible(self) -> bool:
        """True when the prize can be placed on the calendar at all."""
        return self.has_date_window or self.has_weekdays

    @property
    def first_weekday(self) -> Optional[int]:
        return self.weekdays[0] if self.weekdays else None

    @property
    def min_weekday(self) -> int:
        return min(self.weekdays) if self.weekdays else 0

    @property
    def requires_acknowledgement(self) -> bool:
        return self.acknowledge_type is AcknowledgeType.EXPLICIT

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Prize":
        """Build a prize from the service's JSON representation."""

        policy = optional_int(payload.get("max_give_period_type_id"))
        return cls(
            id=int(payload["id"]),
            name=payload.get("name"),
            icon=payload.get("icon"),
            out_of_stock_message=payload.get("out_of_stock_message"),
            requirements_message=payload.get("requirements_to_get_prize"),
            acknowledge_message=payload.get("aknowledge_message"),
            acknowledge_action_title=payload.get("acknowledge_action_title"),
            acknowledge_cancel_title=payload.get("acknowledge_action_title_additional"),
            active_from=optional_int(payload.get("active_from_ts")),
            active_till=optional_int(payload.get("active_till_ts")),
            weekdays=tuple(int(day) for day in payload.get("weekdays") or ()),
            timezone_policy=AttemptPeriodType.from_api(policy),
            timezone_offset_minutes=optional_int(payload.get("relative_period_timezone")),
            pool=optional_int(payload.get("pool")),
            is_surcharge=bool(payload.get("is_surcharge")),
            acknowledge_type=AcknowledgeType.from_api(payload.get("acknowledge_type")),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "active_from": self.active_from,
            "active_till": self.active_till,
            "weekdays": list(self.weekdays),
            "timezone_policy": (
                int(self.timezone_policy) if self.timezone_policy is not None else None
            ),
            "timezone_offset_minutes": self.timezone_offset_minutes,
            "pool": self.pool,
            "is_surcharge": self.is_surcharge,
            "acknowledge_type": self.acknowledge_type.value,
        }


__all__ = ["AcknowledgeType", "AttemptPeriodType", "Prize"]
