"""Facade combining grouping, history matching and status for a renderer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..models.history import HistoryRecord
from ..models.prize import Prize
from .grouping import Slot, group_prizes
from .history import HistoryMatch, find_current
from .selector import find_active_slot_id
from .status import StatusTuple, compute_status
from .timecontext import TimeContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotView:
    """Everything a renderer needs to draw one calendar card.

    Attributes
    ----------
    slot : Slot
        The grouped slot.
    prize : Prize
        Prize the status refers to: the won prize when the current occurrence
        was claimed, otherwise the slot's display prize.
    match : Optional[HistoryMatch]
        Claim matched to the current occurrence of the slot.
    status : StatusTuple
        Status of ``prize`` in this slot.
    is_today : bool
        The slot key is today's group key for ``prize``.
    display_date : Optional[date]
        Date printed on the card, always taken from the display prize.
    """

    slot: Slot
    prize: Prize
    match: Optional[HistoryMatch]
    status: StatusTuple
    is_today: bool
    display_date: Optional[date]

    @property
    def key(self) -> int:
        return self.slot.key

    @property
    def won_prize(self) -> Optional[Prize]:
        return self.match.prize if self.match is not None else None

    @property
    def record(self) -> Optional[HistoryRecord]:
        return self.match.record if self.match is not None else None

    @property
    def is_highlighted(self) -> bool:
        return self.is_today and self.status.active and not self.status.out_of_stock

    @property
    def is_highlighted_out_of_stock(self) -> bool:
        return self.is_today and self.status.active and self.status.out_of_stock

    @property
    def awaiting_acknowledgement(self) -> bool:
        won = self.won_prize
        return (
            won is not None
            and won.requires_acknowledgement
            and self.status.claimed
            and not self.status.acknowledged
        )


def build_view(slot: Slot, history: Iterable[HistoryRecord], ctx: TimeContext) -> SlotView:
    """Reconcile ``slot`` against ``history`` and compute its status."""

    display = slot.display_prize
    match = find_current(slot, history, ctx)
    prize = match.prize if match is not None else display
    status = compute_status(
        prize, slot.key, match.record if match is not None else None, ctx
    )
    today_key = prize.active_from if prize.active_from else ctx.today_weekday(prize)
    return SlotView(
        slot=slot,
        prize=prize,
        match=match,
        status=status,
        is_today=slot.key == today_key,
        display_date=ctx.display_date(display),
    )


def compute_slots(
    prizes: Iterable[Prize],
    history: Iterable[HistoryRecord],
    ctx: TimeContext,
) -> list[SlotView]:
    """Group ``prizes`` and attach a status to every slot."""

    records = list(history)
    views = [build_view(slot, records, ctx) for slot in group_prizes(prizes)]
    logger.debug(
        f"Computed {len(views)} slot(s) from {len(records)} history record(s)"
    )
    return views


def active_slot_id(views: Iterable[SlotView], ctx: TimeContext) -> Optional[int]:
    """Prize id of today's slot among ``views``, if any."""

    return find_active_slot_id((view.slot for view in views), ctx)


__all__ = ["SlotView", "active_slot_id", "build_view", "compute_slots"]
