from __future__ import annotations

from typing import Iterable, Optional

from ..models.prize import Prize
from .grouping import Slot
from .timecontext import TimeContext


def slot_is_live(slot: Slot, prize: Prize, ctx: TimeContext) -> bool:
    """Whether ``prize`` makes ``slot`` today's slot in its own timezone."""

    if slot.is_weekday:
        return slot.key in prize.weekdays and slot.key == ctx.today_weekday(prize)
    start = ctx.adjust(prize.active_from, prize)
    end = ctx.adjust(prize.active_till, prize)
    if start is None or end is None:
        return False
    return start <= ctx.resolve_now(prize) <= end


def find_active_slot_id(slots: Iterable[Slot], ctx: TimeContext) -> Optional[int]:
    """Return the id of the first prize whose slot is live today.

    Gap days have no live slot, in which case ``None`` is returned.
    """

    for slot in slots:
        for prize in slot.members:
            if slot_is_live(slot, prize, ctx):
                return prize.id
    return None


__all__ = ["find_active_slot_id", "slot_is_live"]
