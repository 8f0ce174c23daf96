"""Claim attempts: per-slot state machine around the remote play call.

A claim moves through ``IDLE -> REVEALING -> AWAITING_REMOTE -> RESOLVED |
FAILED -> IDLE``. The state machine owns no timers; animations and gesture
handling belong to the caller, which only reports user actions through
:meth:`ClaimSession.begin_claim`, :meth:`ClaimSession.advance_reveal`,
:meth:`ClaimSession.cancel_reveal` and :meth:`ClaimSession.acknowledge`.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from .config import DEFAULT_PLAY_TIMEOUT, Settings, load_settings
from .errors import ErrorNotice, SpinErrorCategory, describe_spin_error
from .models import HistoryRecord, Prize
from .workflows import GameSession, refresh_history

if TYPE_CHECKING:
    from .api import GameAPI
    from .calendar import SlotView

logger = logging.getLogger(__name__)

TAPS_TO_REVEAL = 3

ResolvedCallback = Callable[[int, Prize], None]
FailedCallback = Callable[[int, Optional[int], ErrorNotice], None]
AcknowledgedCallback = Callable[[int, Prize], None]


class ClaimState(str, Enum):
    IDLE = "idle"
    REVEALING = "revealing"
    AWAITING_REMOTE = "awaiting_remote"
    RESOLVED = "resolved"
    FAILED = "failed"


class RevealProtocol(str, Enum):
    """Presentation gate in front of the remote call."""

    SINGLE_FLIP = "single_flip"
    THREE_TAP = "three_tap"


@dataclass
class _SlotClaim:
    state: ClaimState
    prize: Prize
    taps: int = 0


class ClaimSession:
    """Sequences claim attempts for the slots of one :class:`GameSession`.

    Parameters
    ----------
    game : GameSession
        Loaded game; replaced by a fresh session after every successful claim.
    api : GameAPI
        Remote API used for ``play`` and the history refresh.
    protocol : RevealProtocol, default: RevealProtocol.SINGLE_FLIP
        ``SINGLE_FLIP`` calls the service as soon as a claim begins;
        ``THREE_TAP`` waits for three :meth:`advance_reveal` calls.
    on_claim_resolved : Optional[Callable[[int, Prize], None]], default: None
        Called with the slot key and the won prize.
    on_claim_failed : Optional[Callable[[int, Optional[int], ErrorNotice], None]]
        Called with the slot key, the raw error code (``None`` for transport
        failures and timeouts) and the resolved :class:`ErrorNotice`.
    on_acknowledged : Optional[Callable[[int, Prize], None]], default: None
        Called once an explicit-acknowledge prize has been confirmed.
    play_timeout : float, default: 30.0
        Seconds to wait for the play call before the claim fails.

    Notes
    -----
    Re-entrancy is rejected per slot: a slot that is revealing, awaiting the
    service or waiting for acknowledgement ignores further claims. Different
    slots may be claimed concurrently from different threads.

    Wins the history feed does not list yet and acknowledgements are kept as
    local overlays and re-applied whenever the history is refreshed, so a
    claim finishing on one slot never discards what happened on another.

    The play call runs on a worker thread started with the first claim.
    Release it with :meth:`close` or by using the session as a context
    manager.
    """

    def __init__(
        self,
        game: GameSession,
        api: "GameAPI",
        *,
        protocol: RevealProtocol = RevealProtocol.SINGLE_FLIP,
        on_claim_resolved: Optional[ResolvedCallback] = None,
        on_claim_failed: Optional[FailedCallback] = None,
        on_acknowledged: Optional[AcknowledgedCallback] = None,
        play_timeout: float = DEFAULT_PLAY_TIMEOUT,
    ) -> None:
        self._game = game
        self._api = api
        self.protocol = protocol
        self._on_claim_resolved = on_claim_resolved
        self._on_claim_failed = on_claim_failed
        self._on_acknowledged = on_acknowledged
        self.play_timeout = play_timeout
        self._lock = threading.Lock()
        self._claims: dict[int, _SlotClaim] = {}
        self._local_wins: dict[int, HistoryRecord] = {}
        self._local_acks: dict[tuple, int] = {}
        self._executor: Optional[ThreadPoolExecutor] = None

    @classmethod
    def from_settings(
        cls,
        game: GameSession,
        api: "GameAPI",
        settings: Optional[Settings] = None,
        **kwargs,
    ) -> "ClaimSession":
        """Build a session whose play timeout comes from ``settings``."""

        settings = settings or load_settings()
        kwargs.setdefault("play_timeout", settings.play_timeout)
        return cls(game, api, **kwargs)

    def __enter__(self) -> "ClaimSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            # A play call that timed out may still be running; do not wait for it.
            executor.shutdown(wait=False)

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(thread_name_prefix="lootcal-play")
            return self._executor

    @property
    def game(self) -> GameSession:
        with self._lock:
            return self._game

    def views(self) -> list["SlotView"]:
        return self.game.views()

    def state(self, slot_key: int) -> ClaimState:
        with self._lock:
            claim = self._claims.get(slot_key)
            return claim.state if claim is not None else ClaimState.IDLE

    def taps(self, slot_key: int) -> int:
        with self._lock:
            claim = self._claims.get(slot_key)
            return claim.taps if claim is not None else 0

    # -------- user actions --------
    def begin_claim(self, slot_key: int) -> bool:
        """Start a claim on ``slot_key``.

        Returns ``False`` without any state change or remote call when the slot
        does not exist, is not claimable right now or already has a claim in
        progress.
        """

        view = self.game.view(slot_key)
        if view is None:
            logger.warning(f"Claim refused: no slot {slot_key}")
            return False

        with self._lock:
            current = self._claims.get(slot_key)
            if current is not None:
                logger.info(f"Claim refused: slot {slot_key} is {current.state.value}")
                return False
            if not view.status.claimable:
                logger.info(f"Claim refused: slot {slot_key} status {view.status}")
                return False
            if self.protocol is RevealProtocol.THREE_TAP:
                self._claims[slot_key] = _SlotClaim(ClaimState.REVEALING, view.prize)
                logger.info(f"Slot {slot_key}: revealing")
                return True
            self._claims[slot_key] = _SlotClaim(ClaimState.AWAITING_REMOTE, view.prize)

        self._play(slot_key)
        return True

    def advance_reveal(self, slot_key: int) -> int:
        """Register one tap of the three-tap reveal and return the tap count.

        The third tap issues the remote call. Taps outside the revealing state
        are ignored.
        """

        with self._lock:
            claim = self._claims.get(slot_key)
            if claim is None or claim.state is not ClaimState.REVEALING:
                return claim.taps if claim is not None else 0
            claim.taps += 1
            taps = claim.taps
            if taps < TAPS_TO_REVEAL:
                return taps
            claim.state = ClaimState.AWAITING_REMOTE

        self._play(slot_key)
        return taps

    def cancel_reveal(self, slot_key: int) -> bool:
        """Abort a reveal before its remote call; returns whether it was aborted."""

        with self._lock:
            claim = self._claims.get(slot_key)
            if claim is None:
                return False
            if claim.state is not ClaimState.REVEALING:
                logger.warning(
                    f"Cannot cancel slot {slot_key} while {claim.state.value}"
                )
                return False
            del self._claims[slot_key]
        logger.info(f"Slot {slot_key}: reveal cancelled")
        return True

    def acknowledge(self, slot_key: int) -> bool:
        """Confirm an explicit-acknowledge win on ``slot_key``.

        Works for a win of this session as well as for a claimed, not yet
        acknowledged slot found in the loaded history.
        """

        view = self.game.view(slot_key)
        if view is None or view.record is None or not view.awaiting_acknowledgement:
            return False

        with self._lock:
            claim = self._claims.get(slot_key)
            if claim is not None and claim.state is not ClaimState.RESOLVED:
                return False
            timestamp = self._game.time_context.now_ms()
            self._local_acks[view.record.key] = timestamp
            self._game = self._game.with_acknowledgements(self._local_acks)
            self._claims.pop(slot_key, None)

        logger.info(f"Slot {slot_key}: prize {view.record.prize_id} acknowledged")
        if self._on_acknowledged is not None:
            self._on_acknowledged(slot_key, view.prize)
        return True

    def dismiss(self, slot_key: int) -> bool:
        """Close an unacknowledged win without confirming it."""

        with self._lock:
            claim = self._claims.get(slot_key)
            if claim is None or claim.state is not ClaimState.RESOLVED:
                return False
            del self._claims[slot_key]
        return True

    # -------- remote sequencing --------
    def _play(self, slot_key: int) -> None:
        with self._lock:
            attempted = self._claims[slot_key].prize
            game = self._game

        logger.info(f"Slot {slot_key}: playing game {game.template_id}")
        future = self._get_executor().submit(self._api.play, game.template_id)
        try:
            result = future.result(timeout=self.play_timeout)
        except FutureTimeoutError:
            logger.warning(
                f"Slot {slot_key}: play call exceeded {self.play_timeout}s"
            )
            self._fail(
                slot_key,
                game,
                attempted,
                code=None,
                message=None,
                category=SpinErrorCategory.TIMEOUT,
            )
            return
        except Exception as e:
            logger.exception(f"Slot {slot_key}: play call failed")
            self._fail(slot_key, game, attempted, code=None, message=str(e))
            return

        if not result.ok:
            logger.warning(
                f"Slot {slot_key}: play rejected with code {result.error_code}"
            )
            self._fail(
                slot_key,
                game,
                attempted,
                code=result.error_code,
                message=result.error_message,
            )
            return

        self._resolve(slot_key, game, attempted, result.prize_id)

    def _resolve(
        self,
        slot_key: int,
        game: GameSession,
        attempted: Prize,
        prize_id: Optional[int],
    ) -> None:
        won = game.prize_by_id(prize_id) or attempted
        try:
            remote_history: Optional[tuple[HistoryRecord, ...]] = refresh_history(
                self._api, game
            ).history
        except Exception:
            # The win is confirmed by the service; only the refresh is missing.
            logger.exception(f"Slot {slot_key}: history refresh failed after win")
            remote_history = None

        record = HistoryRecord(
            prize_id=won.id,
            template_id=game.template_id,
            claimed_at=game.time_context.now_ms(),
        )
        with self._lock:
            self._local_wins[slot_key] = record
            self._game = self._rebase(remote_history)
            if slot_key in self._local_wins:
                logger.info(
                    f"Slot {slot_key}: history does not list prize {won.id} yet, "
                    "recording the win locally"
                )
            claim = self._claims[slot_key]
            claim.state = ClaimState.RESOLVED
            claim.prize = won

        logger.info(f"Slot {slot_key}: won prize {won.id}")
        try:
            if self._on_claim_resolved is not None:
                self._on_claim_resolved(slot_key, won)
        finally:
            if not won.requires_acknowledgement:
                with self._lock:
                    self._claims.pop(slot_key, None)

    def _rebase(
        self, remote_history: Optional[tuple[HistoryRecord, ...]]
    ) -> GameSession:
        # Caller holds self._lock. Builds on the current session, not on the
        # snapshot the claim started from, so concurrent changes survive.
        base = self._game
        if remote_history is not None:
            base = base.with_history(remote_history)
        present = {item.key for item in base.history}
        for key, record in list(self._local_wins.items()):
            if record.key in present:
                continue
            view = base.view(key)
            if view is not None and view.status.claimed:
                logger.debug(f"Slot {key}: history now lists the local win")
                del self._local_wins[key]
                continue
            base = base.with_record(record)
        return base.with_acknowledgements(self._local_acks)

    def _fail(
        self,
        slot_key: int,
        game: GameSession,
        attempted: Prize,
        *,
        code: Optional[int],
        message: Optional[str],
        category: Optional[SpinErrorCategory] = None,
    ) -> None:
        notice = describe_spin_error(
            code,
            message,
            prize=attempted,
            game=game.game,
            translations=game.translations,
            category=category,
        )
        with self._lock:
            self._claims[slot_key].state = ClaimState.FAILED

        try:
            if self._on_claim_failed is not None:
                self._on_claim_failed(slot_key, code, notice)
        finally:
            with self._lock:
                self._claims.pop(slot_key, None)


__all__ = ["ClaimSession", "ClaimState", "RevealProtocol", "TAPS_TO_REVEAL"]
