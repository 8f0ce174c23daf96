"""Per-prize status computation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..models.history import HistoryRecord
from ..models.prize import Prize
from .timecontext import TimeContext


@dataclass(frozen=True)
class StatusTuple:
    """Status of one prize in one slot at one instant.

    ``claimed`` is authoritative: a claimed slot is never reported as locked
    or missed, and a locked slot is never active.
    """

    locked: bool = False
    missed: bool = False
    claimed: bool = False
    active: bool = False
    out_of_stock: bool = False
    acknowledged: bool = False

    @property
    def claimable(self) -> bool:
        """Whether a claim attempt may start from this status."""
        return (
            self.active
            and not self.locked
            and not self.missed
            and not self.claimed
            and not self.out_of_stock
        )

    def to_json(self) -> dict[str, bool]:
        return {
            "locked": self.locked,
            "missed": self.missed,
            "claimed": self.claimed,
            "active": self.active,
            "out_of_stock": self.out_of_stock,
            "acknowledged": self.acknowledged,
        }


def compute_status(
    prize: Prize,
    slot_key: int,
    record: Optional[HistoryRecord],
    ctx: TimeContext,
) -> StatusTuple:
    """Compute the :class:`StatusTuple` of ``prize`` shown in slot ``slot_key``.

    Parameters
    ----------
    prize : Prize
        Representative prize of the slot (the won prize when one matched).
    slot_key : int
        Weekday or ``active_from`` key of the slot.
    record : Optional[HistoryRecord]
        Claim matched to the current occurrence of the slot, if any.
    ctx : TimeContext
        Source of "now" and of timezone adjustments.

    Notes
    -----
    1. ``claimed``/``acknowledged`` come from ``record``.
    2. ``active`` holds when "now" is inside the adjusted date window or the
       slot's weekday is today in the prize's timezone.
    3. Date windows lock before ``active_from`` and are missed after
       ``active_till`` unless claimed.
    4. Weekday rules override date rules: today's weekday is open; any other
       slot is missed when the prize's first weekday is earlier than today
       and locked when it is later.
    5. Out of stock means an unclaimed, non-surcharge prize with an empty
       pool.
    """

    claimed = record is not None and record.is_claimed
    acknowledged = record is not None and record.is_acknowledged

    now = ctx.resolve_now(prize)
    today = ctx.today_weekday(prize)
    start = ctx.adjust(prize.active_from, prize)
    end = ctx.adjust(prize.active_till, prize)

    weekday_today = prize.has_weekdays and slot_key in prize.weekdays and slot_key == today
    window_today = start is not None and end is not None and start <= now <= end
    active = window_today or weekday_today

    locked = False
    missed = False

    if start is not None or end is not None:
        locked = start is not None and now < start
        if not claimed and start is not None and end is not None and now > end:
            missed = True
            locked = False

    if prize.has_weekdays:
        if weekday_today:
            locked = False
            missed = False
        else:
            locked = not claimed
            # Every slot of a multi-weekday prize is judged by its first
            # configured weekday.
            weekday = prize.first_weekday
            if not claimed and weekday is not None:
                if weekday < today:
                    missed, locked = True, False
                elif weekday > today:
                    missed, locked = False, True

    out_of_stock = not claimed and prize.pool == 0 and not prize.is_surcharge

    if claimed:
        locked = False
        missed = False
    if locked:
        active = False

    return StatusTuple(
        locked=locked,
        missed=missed,
        claimed=claimed,
        active=active,
        out_of_stock=out_of_stock,
        acknowledged=acknowledged,
    )


__all__ = ["StatusTuple", "compute_status"]
