"""Remote collaborators of the calendar engine."""

from .protocol import GameAPI, PlayResult
from .client import LootboxClient

__all__ = ["GameAPI", "LootboxClient", "PlayResult"]
