# tests/test_goal_tracker.py
import datetime
import unittest

from moneytracker.core import goal_tracker
from moneytracker.core.errors import ValidationError


class TestProgress(unittest.TestCase):
    def test_progress_percentage(self):
        goal = {"target_amount": 1000, "current_amount": 250}
        self.assertEqual(goal_tracker.compute_progress(goal), 25.0)

    def test_progress_above_target_is_not_clamped(self):
        goal = {"target_amount": 100, "current_amount": 150}
        self.assertEqual(goal_tracker.compute_progress(goal), 150.0)
        self.assertEqual(goal_tracker.clamp_progress(150.0), 100.0)

    def test_progress_without_goal_or_target(self):
        self.assertIsNone(goal_tracker.compute_progress(None))
        self.assertIsNone(goal_tracker.compute_progress({"target_amount": 0, "current_amount": 10}))
        self.assertEqual(goal_tracker.clamp_progress(None), 0.0)

    def test_progress_with_explicit_current_amount(self):
        goal = {"target_amount": 200, "current_amount": 0}
        self.assertEqual(goal_tracker.compute_progress(goal, 50), 25.0)


class TestDeadline(unittest.TestCase):
    def test_days_remaining(self):
        status = goal_tracker.compute_deadline_status("2024-03-20", datetime.date(2024, 3, 10))
        self.assertEqual(status, {"days_remaining": 10, "is_overdue": False})

    def test_today_is_normalized_to_midnight(self):
        now = datetime.datetime(2024, 3, 10, 23, 59)
        status = goal_tracker.compute_deadline_status(datetime.date(2024, 3, 11), now)
        self.assertEqual(status["days_remaining"], 1)

    def test_deadline_today_is_not_overdue(self):
        status = goal_tracker.compute_deadline_status("2024-03-10", datetime.date(2024, 3, 10))
        self.assertEqual(status, {"days_remaining": 0, "is_overdue": False})

    def test_overdue(self):
        status = goal_tracker.compute_deadline_status("2024-03-01", datetime.date(2024, 3, 10))
        self.assertEqual(status, {"days_remaining": -9, "is_overdue": True})

    def test_no_target_date(self):
        status = goal_tracker.compute_deadline_status(None, datetime.date(2024, 3, 10))
        self.assertEqual(status, {"days_remaining": None, "is_overdue": False})


class TestDailyPace(unittest.TestCase):
    def test_pace_rounds_up(self):
        self.assertEqual(goal_tracker.compute_required_daily_pace(1000, 0, 3), 334)

    def test_pace_without_days(self):
        self.assertIsNone(goal_tracker.compute_required_daily_pace(1000, 0, None))
        self.assertIsNone(goal_tracker.compute_required_daily_pace(1000, 0, 0))
        self.assertIsNone(goal_tracker.compute_required_daily_pace(1000, 0, -5))


class TestGoalUpdates(unittest.TestCase):
    def test_apply_income_returns_copy(self):
        goal = {"id": "g1", "target_amount": 1000, "current_amount": 100}
        updated = goal_tracker.apply_income(goal, 50)
        self.assertEqual(updated["current_amount"], 150.0)
        self.assertEqual(goal["current_amount"], 100)

    def test_apply_income_rejects_non_positive(self):
        with self.assertRaises(ValidationError):
            goal_tracker.apply_income({"current_amount": 0}, 0)
        with self.assertRaises(ValidationError):
            goal_tracker.apply_income({"current_amount": 0}, -10)

    def test_reset_current_amount(self):
        goal = {"id": "g1", "target_amount": 1000, "current_amount": 700}
        self.assertEqual(goal_tracker.reset_current_amount(goal)["current_amount"], 0.0)
        self.assertEqual(goal["current_amount"], 700)

    def test_reset_twice_stays_at_zero(self):
        goal = {"id": "g1", "target_amount": 1000, "current_amount": 700}
        once = goal_tracker.reset_current_amount(goal)
        self.assertEqual(once["current_amount"], 0.0)
        twice = goal_tracker.reset_current_amount(once)
        self.assertEqual(twice["current_amount"], 0.0)


class TestReconciliation(unittest.TestCase):
    def setUp(self):
        self.transactions = [
            {"type": "income", "amount": 100, "created_at": "2024-03-01T10:00:00+00:00"},
            {"type": "expense", "amount": 40, "created_at": "2024-03-02T10:00:00+00:00"},
            {"type": "income", "amount": 250, "created_at": "2024-03-05T10:00:00Z"},
        ]

    def test_expected_amount_without_reset(self):
        self.assertEqual(goal_tracker.compute_expected_current_amount(self.transactions), 350.0)

    def test_expected_amount_after_reset(self):
        expected = goal_tracker.compute_expected_current_amount(
            self.transactions, "2024-03-03T00:00:00+00:00"
        )
        self.assertEqual(expected, 250.0)

    def test_reset_timestamp_in_other_timezone(self):
        # 2024-03-05T08:00-03:00 é 11:00 UTC, depois do segundo ganho
        expected = goal_tracker.compute_expected_current_amount(
            self.transactions, "2024-03-05T08:00:00-03:00"
        )
        self.assertEqual(expected, 0.0)

    def test_bad_amounts_count_as_zero(self):
        transactions = [
            {"type": "income", "amount": "abc"},
            {"type": "income", "amount": None},
            {"type": "income", "amount": float("nan")},
            {"type": "income", "amount": "40"},
        ]
        self.assertEqual(goal_tracker.compute_expected_current_amount(transactions), 40.0)

    def test_unparseable_created_at_is_skipped_after_reset(self):
        transactions = self.transactions + [
            {"type": "income", "amount": 999, "created_at": "ontem"},
            {"type": "income", "amount": 999},
        ]
        expected = goal_tracker.compute_expected_current_amount(
            transactions, "2024-03-03T00:00:00+00:00"
        )
        self.assertEqual(expected, 250.0)

    def test_drift(self):
        goal = {"current_amount": 300, "reset_at": None}
        self.assertEqual(goal_tracker.compute_drift(goal, self.transactions), 50.0)


class TestGoalOverview(unittest.TestCase):
    def test_overview(self):
        goal = {"target_amount": 1000, "current_amount": 400, "target_date": "2024-03-13"}
        overview = goal_tracker.goal_overview(goal, datetime.date(2024, 3, 10))
        self.assertEqual(overview["progress"], 40.0)
        self.assertEqual(overview["progress_bar"], 40.0)
        self.assertEqual(overview["days_remaining"], 3)
        self.assertFalse(overview["is_overdue"])
        self.assertEqual(overview["daily_pace"], 200)
        self.assertFalse(overview["achieved"])

    def test_overview_overdue_has_no_pace(self):
        goal = {"target_amount": 1000, "current_amount": 400, "target_date": "2024-03-01"}
        overview = goal_tracker.goal_overview(goal, datetime.date(2024, 3, 10))
        self.assertTrue(overview["is_overdue"])
        self.assertIsNone(overview["daily_pace"])

    def test_overview_achieved(self):
        goal = {"target_amount": 100, "current_amount": 120, "target_date": None}
        overview = goal_tracker.goal_overview(goal, datetime.date(2024, 3, 10))
        self.assertTrue(overview["achieved"])
        self.assertEqual(overview["progress"], 120.0)
        self.assertEqual(overview["progress_bar"], 100.0)
        self.assertIsNone(overview["days_remaining"])

    def test_overview_without_goal(self):
        self.assertIsNone(goal_tracker.goal_overview(None))


if __name__ == '__main__':
    unittest.main()
