from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

from .calendar import SlotView, TimeContext, active_slot_id, compute_slots
from .config import DEFAULT_HISTORY_LIMIT
from .errors import ConfigurationError, GameNotFoundError
from .models import HistoryRecord, MiniGame, Prize

if TYPE_CHECKING:
    from .api import GameAPI

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSession:
    """Everything loaded for one player and one lootbox calendar.

    The session is immutable; refreshing history or acknowledging a prize
    produces a new session. Views are recomputed from the session on demand
    and never cached.

    Attributes
    ----------
    game : MiniGame
        The selected game template with its prizes.
    history : tuple[HistoryRecord, ...]
        Claim history as last returned by the service.
    translations : Mapping[str, str]
        Translation strings for ``language``.
    language : str
        Language code the translations were fetched for.
    time_context : TimeContext
        Clock and timezone used by every status computation.
    history_limit : int
        Page size used when (re)fetching history.
    """

    game: MiniGame
    history: tuple[HistoryRecord, ...] = ()
    translations: Mapping[str, str] = field(default_factory=dict)
    language: str = "en"
    time_context: TimeContext = field(default_factory=TimeContext)
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @property
    def template_id(self) -> int:
        return self.game.id

    @property
    def prizes(self) -> tuple[Prize, ...]:
        return self.game.prizes

    def prize_by_id(self, prize_id: Optional[int]) -> Optional[Prize]:
        return self.game.prize_by_id(prize_id)

    def views(self) -> list[SlotView]:
        """Compute every slot of the calendar with its current status."""
        return compute_slots(self.game.prizes, self.history, self.time_context)

    def view(self, slot_key: int) -> Optional[SlotView]:
        """Compute the slot keyed ``slot_key``, or ``None`` if it does not exist."""
        for view in self.views():
            if view.key == slot_key:
                return view
        return None

    def active_slot_id(self) -> Optional[int]:
        return active_slot_id(self.views(), self.time_context)

    def with_history(self, history: Sequence[HistoryRecord]) -> "GameSession":
        return replace(self, history=tuple(history))

    def with_record(self, record: HistoryRecord) -> "GameSession":
        """Return a session whose history starts with ``record``."""
        return replace(self, history=(record,) + self.history)

    def with_acknowledged(
        self, record: HistoryRecord, timestamp: int
    ) -> "GameSession":
        """Return a session in which ``record`` is acknowledged at ``timestamp``."""

        return self.with_acknowledgements({record.key: timestamp})

    def with_acknowledgements(
        self, acknowledgements: Mapping[tuple, int]
    ) -> "GameSession":
        """Return a session with every record whose ``key`` is in
        ``acknowledgements`` acknowledged at the mapped timestamp.

        Records that are already acknowledged keep their own timestamp.
        """

        if not acknowledgements:
            return self
        history = tuple(
            item.acknowledge(acknowledgements[item.key])
            if item.key in acknowledgements
            else item
            for item in self.history
        )
        return replace(self, history=history)


def load_game(
    api: Optional["GameAPI"],
    template_id: int,
    language: str = "en",
    *,
    time_context: Optional[TimeContext] = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> GameSession:
    """Fetch a game template, the player's history and translations.

    The workflow performs three remote calls in order:

    1. List the available mini games and select ``template_id``.
    2. Fetch up to ``history_limit`` history records for the template.
    3. Fetch the translations for ``language`` (upper-cased on the wire).

    Parameters
    ----------
    api : Optional[GameAPI]
        Remote API handle. A missing handle is a fatal configuration error.
    template_id : int
        Id of the game template to load.
    language : str, default: "en"
        Language code for translations.
    time_context : Optional[TimeContext], default: None
        Clock/timezone for status computation; the system clock when omitted.
    history_limit : int, default: 1000
        Number of history records to request.

    Returns
    -------
    GameSession
        Loaded session ready for :meth:`GameSession.views`.

    Raises
    ------
    ConfigurationError
        If ``api`` is ``None``.
    GameNotFoundError
        If the service does not offer ``template_id``.
    """

    if api is None:
        raise ConfigurationError("Lootbox API handle is not available")

    games = api.list_mini_games()
    game = next((g for g in games if g.id == int(template_id)), None)
    if game is None:
        raise GameNotFoundError(f"Game not found with ID: {template_id}")

    history = api.list_history(game.id, limit=history_limit, offset=0)
    translations = api.get_translations(language.upper())

    logger.info(
        f"Loaded game {game.id} ({game.layout.name}) with {len(game.prizes)} prize(s) "
        f"and {len(history)} history record(s)"
    )
    return GameSession(
        game=game,
        history=tuple(history),
        translations=translations or {},
        language=language,
        time_context=time_context or TimeContext(),
        history_limit=history_limit,
    )


def refresh_history(api: "GameAPI", session: GameSession) -> GameSession:
    """Replace the session's history with a fresh copy from the service."""

    history = api.list_history(
        session.template_id, limit=session.history_limit, offset=0
    )
    logger.debug(
        f"Refreshed history of game {session.template_id}: {len(history)} record(s)"
    )
    return session.with_history(history)


__all__ = ["GameSession", "load_game", "refresh_history"]
