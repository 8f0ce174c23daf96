"""Prize availability and state engine for lootbox calendars."""

from .timecontext import TimeContext, iso_week, iso_weekday
from .grouping import Slot, SlotMode, group_prizes, sort_prizes
from .history import HistoryMatch, find_current
from .status import StatusTuple, compute_status
from .selector import find_active_slot_id
from .engine import SlotView, active_slot_id, build_view, compute_slots

__all__ = [
    "HistoryMatch",
    "Slot",
    "SlotMode",
    "SlotView",
    "StatusTuple",
    "TimeContext",
    "active_slot_id",
    "build_view",
    "compute_slots",
    "compute_status",
    "find_active_slot_id",
    "find_current",
    "group_prizes",
    "iso_week",
    "iso_weekday",
    "sort_prizes",
]
