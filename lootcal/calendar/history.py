"""Reconciliation of the claim history feed against calendar slots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..models.history import HistoryRecord
from ..models.prize import Prize
from .grouping import Slot
from .timecontext import TimeContext, iso_week, iso_weekday

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryMatch:
    """The claim that belongs to the current occurrence of a slot."""

    prize: Prize
    record: HistoryRecord


def _matches_weekday_slot(
    record: HistoryRecord, prize: Prize, slot_key: int, ctx: TimeContext
) -> bool:
    claimed = ctx.wall_clock(ctx.adjust(record.claimed_at, prize), prize)
    if iso_week(claimed) != ctx.current_week(prize):
        return False
    return iso_weekday(claimed) == slot_key and slot_key in prize.weekdays


def _matches_date_slot(
    record: HistoryRecord, prize: Prize, slot_key: int, ctx: TimeContext
) -> bool:
    if prize.active_from != slot_key:
        return False
    start = ctx.adjust(prize.active_from, prize)
    end = ctx.adjust(prize.active_till, prize)
    if start is None or end is None:
        return False
    if not ctx.uses_utc(prize):
        # Whole calendar days absorb clock skew between client and service.
        start = ctx.day_bounds(start, prize)[0]
        end = ctx.day_bounds(end, prize)[1]
    claimed = ctx.adjust(record.claimed_at, prize)
    return start <= claimed <= end


def record_matches(
    record: HistoryRecord, prize: Prize, slot: Slot, ctx: TimeContext
) -> bool:
    """Whether ``record`` is a claim of ``prize`` in the current occurrence of ``slot``."""

    if record.prize_id != prize.id or not record.is_claimed:
        return False
    if slot.is_weekday:
        return _matches_weekday_slot(record, prize, slot.key, ctx)
    return _matches_date_slot(record, prize, slot.key, ctx)


def find_current(
    slot: Slot, history: Iterable[HistoryRecord], ctx: TimeContext
) -> Optional[HistoryMatch]:
    """Return the claim of ``slot``'s current occurrence, if any.

    Members are tried in slot order and, for each, records in feed order; the
    first hit wins. Weekday slots only accept claims from the current ISO week,
    so a claim from last week never satisfies this week's slot.
    """

    records = list(history)
    for prize in slot.members:
        for record in records:
            if record_matches(record, prize, slot, ctx):
                logger.debug(
                    f"Slot {slot.key}: prize {prize.id} claimed at {record.claimed_at}"
                )
                return HistoryMatch(prize=prize, record=record)
    return None


__all__ = ["HistoryMatch", "find_current", "record_matches"]
