from .prize import AcknowledgeType, AttemptPeriodType, Prize
from .history import HistoryRecord
from .game import GameLayout, MiniGame

__all__ = [
    "AcknowledgeType",
    "AttemptPeriodType",
    "Prize",
    "HistoryRecord",
    "GameLayout",
    "MiniGame",
]
