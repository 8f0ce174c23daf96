"""Lootbox reward calendar engine."""

from .calendar import SlotView, StatusTuple, TimeContext, compute_slots
from .claims import ClaimSession, ClaimState, RevealProtocol
from .errors import (
    ConfigurationError,
    ErrorNotice,
    GameNotFoundError,
    LootcalError,
    RemoteAPIError,
    SpinErrorCategory,
    SpinErrorCode,
)
from .workflows import GameSession, load_game, refresh_history

__all__ = [
    "ClaimSession",
    "ClaimState",
    "ConfigurationError",
    "ErrorNotice",
    "GameNotFoundError",
    "GameSession",
    "LootcalError",
    "RemoteAPIError",
    "RevealProtocol",
    "SlotView",
    "SpinErrorCategory",
    "SpinErrorCode",
    "StatusTuple",
    "TimeContext",
    "compute_slots",
    "load_game",
    "refresh_history",
]
