"""Timezone handling for prize availability windows.

Every instant handled by the calendar engine is an epoch-millisecond integer.
Prizes with a UTC calendar-day policy live in a *shifted* frame: their "now"
and their window bounds are moved by ``timezone_offset_minutes`` so that
reading the shifted instant as UTC yields the wall clock of the prize's
timezone. All other prizes use real instants read in the user's timezone.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Callable, Optional

from ..models.prize import AttemptPeriodType, Prize


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MS_PER_MINUTE = 60_000
MS_PER_DAY = 86_400_000


def to_ms(moment: datetime) -> int:
    """Return ``moment`` as epoch milliseconds, exactly."""

    if moment.tzinfo is None:
        raise ValueError("moment must be timezone-aware")
    return (moment - EPOCH) // timedelta(milliseconds=1)


def from_ms(instant: int, tz: tzinfo = timezone.utc) -> datetime:
    """Return the aware datetime of epoch-millisecond ``instant`` in ``tz``."""

    return (EPOCH + timedelta(milliseconds=instant)).astimezone(tz)


def iso_weekday(moment: datetime) -> int:
    """ISO weekday of ``moment``: 1 for Monday through 7 for Sunday."""

    return moment.isoweekday()


def iso_week(moment: datetime) -> tuple[int, int]:
    """Return ``(iso_year, iso_week)`` of ``moment``.

    ISO weeks start on Monday and belong to the year of their Thursday, so
    the ISO year differs from the calendar year around New Year.
    """

    calendar = moment.isocalendar()
    return calendar[0], calendar[1]


def _default_clock() -> datetime:
    return datetime.now(timezone.utc)


class TimeContext:
    """Resolves "now" and window bounds in the timezone frame of a prize.

    Parameters
    ----------
    clock : Optional[Callable[[], datetime]], default: None
        Zero-argument callable returning the current aware datetime. Tests
        inject a fixed clock here; the default reads the system clock.
    user_timezone : Optional[tzinfo], default: None
        Timezone of the player, used for prizes that are not UTC based.
        Defaults to the machine's local timezone.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        user_timezone: Optional[tzinfo] = None,
    ) -> None:
        self._clock = clock or _default_clock
        self.user_timezone = user_timezone or datetime.now().astimezone().tzinfo

    def now_ms(self) -> int:
        """Current real instant in epoch milliseconds."""
        return to_ms(self._clock())

    @staticmethod
    def uses_utc(prize: Prize) -> bool:
        """Whether ``prize`` counts calendar days in UTC plus a fixed offset.

        Legacy prizes without an explicit policy are treated as UTC based when
        they carry a timezone offset.
        """
        if prize.timezone_policy is not None:
            return prize.timezone_policy is AttemptPeriodType.CALENDAR_DAYS_UTC
        return prize.timezone_offset_minutes is not None

    def offset_ms(self, prize: Prize) -> int:
        if not self.uses_utc(prize):
            return 0
        return (prize.timezone_offset_minutes or 0) * MS_PER_MINUTE

    def resolve_now(self, prize: Prize) -> int:
        """Current instant in the frame of ``prize``."""
        return self.now_ms() + self.offset_ms(prize)

    def adjust(self, timestamp: Optional[int], prize: Prize) -> Optional[int]:
        """Move ``timestamp`` into the frame of ``prize``.

        Absent timestamps stay absent; they are never defaulted to "now".
        """
        if not timestamp:
            return None
        return timestamp + self.offset_ms(prize)

    def wall_clock(self, instant: int, prize: Prize) -> datetime:
        """Calendar reading of a frame instant produced by this context."""
        if self.uses_utc(prize):
            return from_ms(instant)
        return from_ms(instant, self.user_timezone)

    def now_wall_clock(self, prize: Prize) -> datetime:
        return self.wall_clock(self.resolve_now(prize), prize)

    def today_weekday(self, prize: Prize) -> int:
        return iso_weekday(self.now_wall_clock(prize))

    def current_week(self, prize: Prize) -> tuple[int, int]:
        return iso_week(self.now_wall_clock(prize))

    def day_bounds(self, instant: int, prize: Prize) -> tuple[int, int]:
        """First and last millisecond of the calendar day holding ``instant``."""

        moment = self.wall_clock(instant, prize)
        start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
        end = moment.replace(hour=23, minute=59, second=59, microsecond=999_000)
        return to_ms(start), to_ms(end)

    def display_date(self, prize: Prize) -> Optional[date]:
        """Date shown on the calendar card of ``prize``.

        Date-based prizes show the day their window opens. Weekday-based prizes
        show the date of their first configured weekday within the current
        week.
        """

        if prize.active_from:
            adjusted = self.adjust(prize.active_from, prize)
            return self.wall_clock(adjusted, prize).date()
        if prize.has_weekdays:
            now = self.now_wall_clock(prize)
            delta = prize.weekdays[0] - iso_weekday(now)
            return (now + timedelta(days=delta)).date()
        return None


__all__ = [
    "EPOCH",
    "MS_PER_DAY",
    "MS_PER_MINUTE",
    "TimeContext",
    "from_ms",
    "iso_week",
    "iso_weekday",
    "to_ms",
]
