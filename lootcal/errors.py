"""Exceptions and the spin error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Mapping, Optional

if TYPE_CHECKING:
    from .models import MiniGame, Prize


class LootcalError(Exception):
    """Base exception for the lootbox calendar package."""


class ConfigurationError(LootcalError):
    """Raised when settings or the remote API handle are missing."""


class GameNotFoundError(LootcalError):
    """Raised when a template id is not offered by the service."""


class RemoteAPIError(LootcalError):
    """Raised when the lootbox service cannot be reached or rejects a request."""


class SpinErrorCode(IntEnum):
    """Error codes returned by the service's play endpoint."""

    OK = 0
    NO_SPINS = 40001
    PRIZE_POOL_EMPTY = 40002
    NOT_ENOUGH_POINTS = 40003
    MAX_SPINS_REACHED = 40004
    TEMPLATE_NOT_ACTIVE = 40007
    NOT_IN_SEGMENT = 40009
    NO_BALANCE_GEMS = 40011
    NO_BALANCE_DIAMONDS = 40012
    VISITOR_STOP_SPIN_REQUEST = -40001

    @classmethod
    def parse(cls, value: Optional[int]) -> Optional["SpinErrorCode"]:
        """Return the member for ``value`` or ``None`` for unknown codes."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class SpinErrorCategory(str, Enum):
    """What went wrong with a claim attempt, independent of the exact code."""

    INSUFFICIENT_ATTEMPTS = "insufficient_attempts"
    OUT_OF_STOCK = "out_of_stock"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    MAX_ATTEMPTS_REACHED = "max_attempts_reached"
    TEMPLATE_INACTIVE = "template_inactive"
    SEGMENT_INELIGIBLE = "segment_ineligible"
    USER_CANCELLED = "user_cancelled"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


_CATEGORIES = {
    SpinErrorCode.NO_SPINS: SpinErrorCategory.INSUFFICIENT_ATTEMPTS,
    SpinErrorCode.PRIZE_POOL_EMPTY: SpinErrorCategory.OUT_OF_STOCK,
    SpinErrorCode.NOT_ENOUGH_POINTS: SpinErrorCategory.INSUFFICIENT_FUNDS,
    SpinErrorCode.NO_BALANCE_GEMS: SpinErrorCategory.INSUFFICIENT_FUNDS,
    SpinErrorCode.NO_BALANCE_DIAMONDS: SpinErrorCategory.INSUFFICIENT_FUNDS,
    SpinErrorCode.MAX_SPINS_REACHED: SpinErrorCategory.MAX_ATTEMPTS_REACHED,
    SpinErrorCode.TEMPLATE_NOT_ACTIVE: SpinErrorCategory.TEMPLATE_INACTIVE,
    SpinErrorCode.NOT_IN_SEGMENT: SpinErrorCategory.SEGMENT_INELIGIBLE,
    SpinErrorCode.VISITOR_STOP_SPIN_REQUEST: SpinErrorCategory.USER_CANCELLED,
}

_DEFAULT_MESSAGES = {
    SpinErrorCode.NO_SPINS: "No spin attempts available",
    SpinErrorCode.NOT_ENOUGH_POINTS: "Not enough points to play",
    SpinErrorCode.NO_BALANCE_GEMS: "Not enough gems to play",
    SpinErrorCode.NO_BALANCE_DIAMONDS: "Not enough diamonds to play",
    SpinErrorCode.MAX_SPINS_REACHED: "Maximum attempts reached",
    SpinErrorCode.TEMPLATE_NOT_ACTIVE: "This game is not currently active",
    SpinErrorCode.NOT_IN_SEGMENT: "You do not meet the requirements for this prize",
    SpinErrorCode.PRIZE_POOL_EMPTY: "This prize is out of stock",
}


def categorize(code: Optional[int]) -> SpinErrorCategory:
    parsed = SpinErrorCode.parse(code)
    if parsed is None:
        return SpinErrorCategory.UNKNOWN
    return _CATEGORIES.get(parsed, SpinErrorCategory.UNKNOWN)


@dataclass(frozen=True)
class ErrorNotice:
    """Failure surfaced to the renderer after a claim attempt.

    Attributes
    ----------
    category : SpinErrorCategory
        Taxonomy tag of the failure.
    code : Optional[int]
        Raw error code from the service; ``None`` for transport failures and
        timeouts.
    title : str
        Heading for the error dialog.
    message : str
        Human readable explanation after all fallbacks were applied.
    remote_message : Optional[str]
        Message returned by the service, verbatim.
    """

    category: SpinErrorCategory
    code: Optional[int]
    title: str
    message: str
    remote_message: Optional[str] = None


def describe_spin_error(
    code: Optional[int],
    remote_message: Optional[str] = None,
    *,
    prize: Optional["Prize"] = None,
    game: Optional["MiniGame"] = None,
    translations: Optional[Mapping[str, str]] = None,
    category: Optional[SpinErrorCategory] = None,
) -> ErrorNotice:
    """Resolve the title and message shown for a failed claim.

    The message is the first available of: text configured on the game or
    prize for this kind of failure, the translation ``sawErrorCode<code>``,
    the service's own message, and a built-in default.

    Parameters
    ----------
    code : Optional[int]
        Error code returned by the play endpoint, ``None`` when the call
        itself failed.
    remote_message : Optional[str], default: None
        Message returned by the service or the transport exception.
    prize : Optional[Prize], default: None
        Prize the player tried to claim.
    game : Optional[MiniGame], default: None
        Game template, consulted for its over-limit message.
    translations : Optional[Mapping[str, str]], default: None
        Translation strings of the current language.
    category : Optional[SpinErrorCategory], default: None
        Overrides the category derived from ``code`` (used for timeouts).
    """

    texts = translations or {}
    parsed = SpinErrorCode.parse(code)
    resolved_category = category or categorize(code)
    translated = texts.get(f"sawErrorCode{code}") if code is not None else None
    title = texts.get("somethingWentWrong") or "Something went wrong"

    if parsed is SpinErrorCode.MAX_SPINS_REACHED:
        message = (
            (game.over_limit_message if game is not None else None)
            or translated
            or remote_message
        )
    elif parsed is SpinErrorCode.NOT_IN_SEGMENT:
        title = texts.get("lootboxSegmentationErrorMessage") or "Requirements not met"
        message = (
            (prize.requirements_message if prize is not None else None)
            or translated
            or remote_message
        )
    elif parsed is SpinErrorCode.PRIZE_POOL_EMPTY:
        message = (
            (prize.out_of_stock_message if prize is not None else None)
            or translated
            or texts.get("lootboxOutOfStockPrize")
        )
    elif parsed in _DEFAULT_MESSAGES:
        message = translated or remote_message
    else:
        message = translated or remote_message or texts.get("tryAgainLater")

    if not message:
        message = _DEFAULT_MESSAGES.get(parsed, "Please try again later")

    return ErrorNotice(
        category=resolved_category,
        code=code,
        title=title,
        message=message,
        remote_message=remote_message,
    )


__all__ = [
    "ConfigurationError",
    "ErrorNotice",
    "GameNotFoundError",
    "LootcalError",
    "RemoteAPIError",
    "SpinErrorCategory",
    "SpinErrorCode",
    "categorize",
    "describe_spin_error",
]
