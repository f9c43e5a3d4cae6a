# tests/test_summary.py
import datetime
import unittest
from unittest.mock import MagicMock, patch

from moneytracker.core import summary
from moneytracker.core.errors import TransientFetchError, ValidationError


class TestPeriods(unittest.TestCase):
    def test_resolve_period_aliases(self):
        self.assertEqual(summary.resolve_period(None), "this_month")
        self.assertEqual(summary.resolve_period("mes"), "this_month")
        self.assertEqual(summary.resolve_period("Anterior"), "last_month")
        self.assertEqual(summary.resolve_period("tudo"), "all")
        self.assertEqual(summary.resolve_period("last_month"), "last_month")

    def test_resolve_period_invalid(self):
        with self.assertRaises(ValidationError):
            summary.resolve_period("semana")

    def test_month_bounds(self):
        self.assertEqual(summary.month_bounds(datetime.date(2024, 2, 15)),
                         (datetime.date(2024, 2, 1), datetime.date(2024, 2, 29)))
        self.assertEqual(summary.month_bounds(datetime.date(2024, 12, 31)),
                         (datetime.date(2024, 12, 1), datetime.date(2024, 12, 31)))

    def test_fetch_window(self):
        today = datetime.date(2024, 1, 20)
        self.assertEqual(summary.fetch_window("this_month", today),
                         {"date_from": datetime.date(2024, 1, 1), "date_to": None})
        self.assertEqual(summary.fetch_window("last_month", today),
                         {"date_from": datetime.date(2023, 12, 1), "date_to": datetime.date(2023, 12, 31)})
        self.assertEqual(summary.fetch_window("all", today), {"date_from": None, "date_to": None})
        with self.assertRaises(ValidationError):
            summary.fetch_window("week", today)

    def test_monthly_summary_is_inclusive(self):
        transactions = [
            {"type": "income", "amount": 100, "date": "2024-03-01"},
            {"type": "expense", "amount": 30, "date": "2024-03-31"},
            {"type": "expense", "amount": 999, "date": "2024-04-01"},
            {"type": "income", "amount": 999, "date": "2024-02-29"},
        ]
        self.assertEqual(
            summary.monthly_summary(transactions, datetime.date(2024, 3, 1), datetime.date(2024, 3, 31)),
            (100.0, 30.0),
        )
        self.assertEqual(summary.monthly_summary([], "2024-03-01", "2024-03-31"), (0.0, 0.0))


class TestBuildDashboard(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = MagicMock()
        self.today = datetime.date(2024, 3, 10)
        self.goal = {"id": "g1", "target_amount": 1000.0, "current_amount": 250.0, "target_date": "2024-03-20"}
        self.month_rows = [
            {"id": "t1", "type": "income", "amount": 500.0, "category": "Salário", "date": "2024-03-05"},
            {"id": "t2", "type": "expense", "amount": 120.0, "category": "Lazer", "date": "2024-03-06"},
        ]

    def _list_transactions(self, client, **kwargs):
        if kwargs.get("limit"):
            return self.month_rows[::-1]
        return self.month_rows

    async def test_dashboard(self):
        with patch.object(summary.db, "get_or_create_goal", return_value=self.goal), \
                patch.object(summary.db, "list_transactions", side_effect=self._list_transactions) as mock_list:
            dashboard = await summary.build_dashboard(self.client, today=self.today, recent_limit=5)

        self.assertEqual(dashboard["errors"], [])
        self.assertEqual(dashboard["goal"]["progress"], 25.0)
        self.assertEqual(dashboard["goal"]["days_remaining"], 10)
        self.assertEqual(dashboard["month"], {
            "start": datetime.date(2024, 3, 1),
            "end": datetime.date(2024, 3, 31),
            "income": 500.0,
            "expense": 120.0,
            "balance": 380.0,
        })
        self.assertEqual([t["id"] for t in dashboard["recent_transactions"]], ["t2", "t1"])
        mock_list.assert_any_call(self.client, date_from=datetime.date(2024, 3, 1),
                                  date_to=datetime.date(2024, 3, 31), ordered=False)
        mock_list.assert_any_call(self.client, limit=5)

    async def test_failed_section_degrades(self):
        with patch.object(summary.db, "get_or_create_goal", side_effect=TransientFetchError("fora do ar")), \
                patch.object(summary.db, "list_transactions", side_effect=self._list_transactions):
            dashboard = await summary.build_dashboard(self.client, today=self.today)

        self.assertEqual(dashboard["errors"], ["goal"])
        self.assertIsNone(dashboard["goal"])
        self.assertEqual(dashboard["month"]["balance"], 380.0)
        self.assertEqual(len(dashboard["recent_transactions"]), 2)

    async def test_failed_month_section(self):
        def list_transactions(client, **kwargs):
            if kwargs.get("limit"):
                return []
            raise TransientFetchError("timeout")

        with patch.object(summary.db, "get_or_create_goal", return_value=self.goal), \
                patch.object(summary.db, "list_transactions", side_effect=list_transactions):
            dashboard = await summary.build_dashboard(self.client, today=self.today)

        self.assertEqual(dashboard["errors"], ["month"])
        self.assertEqual(dashboard["month"]["income"], 0.0)
        self.assertEqual(dashboard["recent_transactions"], [])


class TestBuildAnalytics(unittest.IsolatedAsyncioTestCase):
    async def test_analytics(self):
        client = MagicMock()
        period_rows = [
            {"type": "expense", "amount": 80.0, "category": "Alimentação", "date": "2023-12-10"},
            {"type": "income", "amount": 900.0, "category": "Salário", "date": "2023-12-05"},
        ]
        history_rows = period_rows + [
            {"type": "expense", "amount": 20.0, "category": "Lazer", "date": "2023-11-02"},
        ]

        def list_transactions(client, **kwargs):
            if kwargs.get("date_from"):
                return period_rows
            return history_rows

        with patch.object(summary.db, "list_transactions", side_effect=list_transactions):
            analytics = await summary.build_analytics(client, "last_month", today=datetime.date(2024, 1, 15))

        self.assertEqual(analytics["period"], "last_month")
        self.assertEqual(analytics["window"]["date_to"], datetime.date(2023, 12, 31))
        self.assertEqual(analytics["total_income"], 900.0)
        self.assertEqual(analytics["total_expense"], 80.0)
        self.assertEqual(analytics["category_totals"], [{"name": "Alimentação", "value": 80.0}])
        self.assertEqual(analytics["monthly_totals"], [
            {"month": "2023-11", "income": 0.0, "expense": 20.0},
            {"month": "2023-12", "income": 900.0, "expense": 80.0},
        ])
        self.assertEqual(analytics["errors"], [])

    async def test_analytics_history_failure(self):
        def list_transactions(client, **kwargs):
            if kwargs.get("date_from"):
                return []
            raise TransientFetchError("timeout")

        with patch.object(summary.db, "list_transactions", side_effect=list_transactions):
            analytics = await summary.build_analytics(MagicMock(), "this_month")

        self.assertEqual(analytics["errors"], ["history"])
        self.assertEqual(analytics["monthly_totals"], [])


class TestDashboardCache(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.snapshot = {"goal": None, "month": {}, "recent_transactions": [], "errors": []}

    async def test_recomputes_every_time_when_not_live(self):
        cache = summary.DashboardCache(MagicMock())
        with patch.object(summary, "build_dashboard", return_value=self.snapshot) as mock_build:
            await cache.get()
            await cache.get()
        self.assertEqual(mock_build.call_count, 2)

    async def test_live_cache_reuses_snapshot_until_invalidated(self):
        cache = summary.DashboardCache(MagicMock())
        cache.live = True
        with patch.object(summary, "build_dashboard", return_value=self.snapshot) as mock_build:
            first = await cache.get()
            second = await cache.get()
            self.assertIs(first, second)
            self.assertEqual(mock_build.call_count, 1)

            cache.invalidate({"eventType": "INSERT"})
            await cache.get()
            self.assertEqual(mock_build.call_count, 2)

    async def test_snapshot_with_errors_is_not_reused(self):
        cache = summary.DashboardCache(MagicMock())
        cache.live = True
        failed = dict(self.snapshot, errors=["recent"])
        with patch.object(summary, "build_dashboard", return_value=failed) as mock_build:
            await cache.get()
            await cache.get()
        self.assertEqual(mock_build.call_count, 2)


if __name__ == '__main__':
    unittest.main()
