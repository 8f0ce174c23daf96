"""Sorting and grouping of prizes into calendar slots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from ..models.prize import Prize

logger = logging.getLogger(__name__)


class SlotMode(str, Enum):
    """Key space used by a grouping pass."""

    WEEKDAY = "weekday"
    DATE = "date"


@dataclass(frozen=True)
class Slot:
    """One calendar position holding one or more candidate prizes.

    Attributes
    ----------
    key : int
        ISO weekday in ``WEEKDAY`` mode, ``active_from`` timestamp in ``DATE``
        mode.
    mode : SlotMode
        Key space the slot was grouped in.
    members : tuple[Prize, ...]
        Prizes competing for this slot, in the deterministic sort order.
    """

    key: int
    mode: SlotMode
    members: tuple[Prize, ...]

    @property
    def is_weekday(self) -> bool:
        return self.mode is SlotMode.WEEKDAY

    @property
    def display_prize(self) -> Prize:
        """Member shown on the card before anything has been won."""

        for prize in self.members:
            if self.is_weekday and prize.first_weekday == self.key:
                return prize
            if not self.is_weekday and prize.active_from == self.key:
                return prize
        return self.members[0]

    def member_ids(self) -> tuple[int, ...]:
        return tuple(prize.id for prize in self.members)


def _sort_key(prize: Prize) -> tuple[int, int, int, int]:
    return (
        prize.id or 0,
        1 if prize.is_surcharge else 0,
        prize.active_from or 0,
        prize.min_weekday,
    )


def sort_prizes(prizes: Iterable[Prize]) -> list[Prize]:
    """Return ``prizes`` in the deterministic grouping order.

    Order: prize id, non-surcharge before surcharge, ``active_from`` (absent
    sorts as 0), smallest weekday (absent sorts as 0).
    """

    return sorted(prizes, key=_sort_key)


def detect_mode(prizes: Iterable[Prize]) -> Optional[SlotMode]:
    """Grouping mode for already filtered prizes; ``None`` when empty.

    The whole set is weekday based only when every prize has weekdays. A
    mixed set is grouped by date and its weekday-only prizes fall out of every
    slot.
    """

    prizes = list(prizes)
    if not prizes:
        return None
    if all(prize.has_weekdays for prize in prizes):
        return SlotMode.WEEKDAY
    return SlotMode.DATE


def group_prizes(prizes: Iterable[Prize]) -> list[Slot]:
    """Group ``prizes`` into slots ordered by key.

    Prizes with neither a complete date window nor weekdays cannot be placed
    on the calendar and are dropped.
    """

    eligible = [prize for prize in sort_prizes(prizes) if prize.is_eligible]
    mode = detect_mode(eligible)
    if mode is None:
        return []

    dropped = 0
    keys: set[int] = set()
    for prize in eligible:
        if mode is SlotMode.WEEKDAY:
            keys.update(prize.weekdays)
        elif prize.active_from:
            keys.add(prize.active_from)
        else:
            dropped += 1
    if dropped:
        logger.debug(f"{dropped} weekday-only prize(s) have no slot in date mode")

    slots: list[Slot] = []
    for key in sorted(keys):
        if mode is SlotMode.WEEKDAY:
            members = tuple(p for p in eligible if key in p.weekdays)
        else:
            members = tuple(p for p in eligible if p.active_from == key)
        slots.append(Slot(key=key, mode=mode, members=members))
    return slots


def flatten(slots: Iterable[Slot]) -> list[Prize]:
    """Distinct member prizes of ``slots`` in first-seen order."""

    seen: set[int] = set()
    prizes: list[Prize] = []
    for slot in slots:
        for prize in slot.members:
            if prize.id not in seen:
                seen.add(prize.id)
                prizes.append(prize)
    return prizes


__all__ = [
    "Slot",
    "SlotMode",
    "detect_mode",
    "flatten",
    "group_prizes",
    "sort_prizes",
]
