import json
import unittest

from lootcal.calendar import StatusTuple
from lootcal.models import (
    AcknowledgeType,
    AttemptPeriodType,
    GameLayout,
    HistoryRecord,
    MiniGame,
    Prize,
)


class SerializationTestCase(unittest.TestCase):
    def test_prize_to_json(self):
        prize = Prize(
            id=3,
            name="Tea",
            weekdays=(2, 4),
            timezone_policy=AttemptPeriodType.CALENDAR_DAYS_UTC,
            timezone_offset_minutes=-120,
            pool=5,
            acknowledge_type=AcknowledgeType.EXPLICIT,
        )
        d = prize.to_json()
        self.assertEqual(d["id"], 3)
        self.assertEqual(d["weekdays"], [2, 4])
        self.assertEqual(d["timezone_policy"], 2)
        self.assertEqual(d["timezone_offset_minutes"], -120)
        self.assertEqual(d["acknowledge_type"], "explicit")
        self.assertIsNone(d["active_from"])
        # Must be JSON serialisable
        json.dumps(d)

    def test_game_to_json(self):
        game = MiniGame(
            id=8,
            name="Calendar",
            layout=GameLayout.VERTICAL_MAP,
            prizes=(Prize(id=1, weekdays=(1,)),),
        )
        d = game.to_json()
        self.assertEqual(d["layout"], 2)
        self.assertEqual([p["id"] for p in d["prizes"]], [1])
        self.assertIn("prizes=1", repr(game))

    def test_history_record_to_json_and_str(self):
        record = HistoryRecord(prize_id=4, template_id=8, claimed_at=1715731200000)
        d = record.to_json()
        self.assertEqual(d["prize_id"], 4)
        self.assertIsNone(d["acknowledged_at"])

        s = record.to_json_str()
        self.assertIsInstance(s, str)
        self.assertEqual(json.loads(s), d)
        self.assertIn("2024-05-15T00:00:00+00:00", repr(record))

    def test_history_record_acknowledge_returns_copy(self):
        record = HistoryRecord(prize_id=4, claimed_at=10)
        acknowledged = record.acknowledge(20)
        self.assertIsNone(record.acknowledged_at)
        self.assertEqual(acknowledged.acknowledged_at, 20)
        self.assertIs(acknowledged.acknowledge(30), acknowledged)

    def test_status_to_json(self):
        d = StatusTuple(claimed=True, acknowledged=True).to_json()
        self.assertEqual(
            d,
            {
                "locked": False,
                "missed": False,
                "claimed": True,
                "active": False,
                "out_of_stock": False,
                "acknowledged": True,
            },
        )

    def test_unknown_layout_falls_back_to_horizontal(self):
        game = MiniGame.from_api(
            {"id": 1, "saw_template_ui_definition": {"game_layout": 9}}
        )
        self.assertIs(game.layout, GameLayout.HORIZONTAL)
        self.assertEqual(game.prizes, ())

    def test_unknown_attempt_period_falls_back_to_user_timezone(self):
        game = MiniGame.from_api(
            {
                "id": 1,
                "prizes": [
                    {
                        "id": 1,
                        "weekdays": [1],
                        "max_give_period_type_id": 0,
                        "relative_period_timezone": 120,
                    },
                    {"id": 2, "weekdays": [2], "max_give_period_type_id": 2},
                ],
            }
        )
        odd, utc = game.prizes
        self.assertIs(
            odd.timezone_policy, AttemptPeriodType.CALENDAR_DAYS_USER_TIMEZONE
        )
        self.assertIs(utc.timezone_policy, AttemptPeriodType.CALENDAR_DAYS_UTC)
        self.assertIsNone(Prize.from_api({"id": 3}).timezone_policy)


if __name__ == "__main__":
    unittest.main()
