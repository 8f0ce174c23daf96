from __future__ import annotations

import unittest
from datetime import date, datetime, timedelta, timezone

from lootcal.calendar.timecontext import (
    TimeContext,
    from_ms,
    iso_week,
    iso_weekday,
    to_ms,
)
from lootcal.models import AttemptPeriodType, Prize


def ms(*args) -> int:
    return to_ms(datetime(*args, tzinfo=timezone.utc))


def fixed_clock(*args):
    moment = datetime(*args, tzinfo=timezone.utc)
    return lambda: moment


UTC_PRIZE = Prize(
    id=1,
    timezone_policy=AttemptPeriodType.CALENDAR_DAYS_UTC,
    timezone_offset_minutes=120,
)
USER_PRIZE = Prize(
    id=2,
    timezone_policy=AttemptPeriodType.CALENDAR_DAYS_USER_TIMEZONE,
    timezone_offset_minutes=120,
)


class TimestampAdjustmentTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ctx = TimeContext(
            clock=fixed_clock(2024, 5, 15, 12, 0), user_timezone=timezone.utc
        )

    def test_utc_policy_shifts_by_offset(self) -> None:
        ts = ms(2024, 5, 15, 8, 0)
        self.assertEqual(self.ctx.adjust(ts, UTC_PRIZE), ts + 7_200_000)

    def test_user_timezone_policy_is_identity(self) -> None:
        ts = ms(2024, 5, 15, 8, 0)
        self.assertEqual(self.ctx.adjust(ts, USER_PRIZE), ts)

    def test_absent_timestamp_stays_absent(self) -> None:
        self.assertIsNone(self.ctx.adjust(None, UTC_PRIZE))
        self.assertIsNone(self.ctx.adjust(None, USER_PRIZE))

    def test_legacy_prize_with_offset_is_utc_based(self) -> None:
        legacy = Prize(id=3, timezone_offset_minutes=-60)
        self.assertTrue(self.ctx.uses_utc(legacy))
        self.assertEqual(self.ctx.adjust(1_000_000, legacy), 1_000_000 - 3_600_000)

    def test_legacy_prize_without_offset_uses_user_timezone(self) -> None:
        self.assertFalse(self.ctx.uses_utc(Prize(id=4)))

    def test_resolve_now(self) -> None:
        now = ms(2024, 5, 15, 12, 0)
        self.assertEqual(self.ctx.resolve_now(USER_PRIZE), now)
        self.assertEqual(self.ctx.resolve_now(UTC_PRIZE), now + 7_200_000)

    def test_clock_must_be_timezone_aware(self) -> None:
        ctx = TimeContext(clock=lambda: datetime(2024, 5, 15))
        with self.assertRaises(ValueError):
            ctx.now_ms()


class WeekdayResolutionTests(unittest.TestCase):
    def test_offset_moves_today_across_midnight(self) -> None:
        # 23:30 UTC on Tuesday is already Wednesday at UTC+2.
        ctx = TimeContext(
            clock=fixed_clock(2024, 5, 14, 23, 30), user_timezone=timezone.utc
        )
        self.assertEqual(ctx.today_weekday(UTC_PRIZE), 3)
        self.assertEqual(ctx.today_weekday(USER_PRIZE), 2)

    def test_user_timezone_is_respected(self) -> None:
        ctx = TimeContext(
            clock=fixed_clock(2024, 5, 14, 23, 30),
            user_timezone=timezone(timedelta(hours=-5)),
        )
        self.assertEqual(ctx.today_weekday(USER_PRIZE), 2)
        self.assertEqual(ctx.current_week(USER_PRIZE), (2024, 20))

    def test_iso_weekday_maps_sunday_to_seven(self) -> None:
        self.assertEqual(iso_weekday(datetime(2024, 5, 19, tzinfo=timezone.utc)), 7)
        self.assertEqual(iso_weekday(datetime(2024, 5, 20, tzinfo=timezone.utc)), 1)

    def test_iso_week_at_year_boundaries(self) -> None:
        cases = {
            datetime(2020, 12, 31, tzinfo=timezone.utc): (2020, 53),
            datetime(2021, 1, 3, tzinfo=timezone.utc): (2020, 53),
            datetime(2021, 1, 4, tzinfo=timezone.utc): (2021, 1),
            datetime(2024, 12, 30, tzinfo=timezone.utc): (2025, 1),
            datetime(2024, 5, 15, tzinfo=timezone.utc): (2024, 20),
        }
        for moment, expected in cases.items():
            with self.subTest(moment=moment):
                self.assertEqual(iso_week(moment), expected)


class CalendarHelpersTests(unittest.TestCase):
    def test_ms_conversion_is_exact(self) -> None:
        instant = 1_715_774_400_123
        self.assertEqual(to_ms(from_ms(instant)), instant)

    def test_day_bounds_in_user_timezone(self) -> None:
        tz = timezone(timedelta(hours=2))
        ctx = TimeContext(clock=fixed_clock(2024, 5, 15), user_timezone=tz)
        start, end = ctx.day_bounds(ms(2024, 5, 15, 8, 0), USER_PRIZE)
        self.assertEqual(start, ms(2024, 5, 14, 22, 0))
        self.assertEqual(end, ms(2024, 5, 15, 21, 59, 59, 999_000))

    def test_display_date_for_date_prize(self) -> None:
        ctx = TimeContext(clock=fixed_clock(2024, 5, 1), user_timezone=timezone.utc)
        prize = Prize(
            id=5,
            active_from=ms(2024, 5, 14, 23, 0),
            active_till=ms(2024, 5, 15, 22, 59),
            timezone_policy=AttemptPeriodType.CALENDAR_DAYS_UTC,
            timezone_offset_minutes=120,
        )
        self.assertEqual(ctx.display_date(prize), date(2024, 5, 15))

    def test_display_date_for_weekday_prize_is_in_current_week(self) -> None:
        ctx = TimeContext(
            clock=fixed_clock(2024, 5, 15, 12, 0), user_timezone=timezone.utc
        )
        self.assertEqual(
            ctx.display_date(Prize(id=6, weekdays=(1,))), date(2024, 5, 13)
        )
        self.assertEqual(
            ctx.display_date(Prize(id=7, weekdays=(7, 1))), date(2024, 5, 19)
        )
        self.assertIsNone(ctx.display_date(Prize(id=8)))


if __name__ == "__main__":
    unittest.main()
