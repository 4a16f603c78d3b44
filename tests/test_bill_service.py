import unittest
from datetime import date, timedelta
from decimal import Decimal

from services.bill_service import (
    bill_overview,
    expense_bills_due,
    overdue_bills,
    paid_this_month,
    upcoming_bills,
)
from utils.errors import ValidationError
from support import tx

TODAY = date(2024, 5, 15)


def _bill(days_from_today, amount="20.00", paid=False):
    return tx("expense", amount, date(2024, 5, 1), paid=paid,
              due=TODAY + timedelta(days=days_from_today))


class TestBills(unittest.TestCase):
    def setUp(self):
        """Bills spread around today"""
        self.rows = [_bill(d) for d in (-3, -1, 0, 1, 7, 8, 30)]
        self.rows.append(_bill(-2, paid=True))
        self.rows.append(tx("expense", "5.00", date(2024, 5, 2), paid=False))

    def test_due_today_is_upcoming_not_overdue(self):
        overdue = overdue_bills(self.rows, TODAY)
        upcoming = upcoming_bills(self.rows, TODAY)
        self.assertEqual([t.due_date for t in overdue], [date(2024, 5, 12), date(2024, 5, 14)])
        self.assertEqual(upcoming[0].days_until_due, 0)
        self.assertEqual(upcoming[0].due_label, "today")

    def test_horizon_is_inclusive(self):
        upcoming = upcoming_bills(self.rows, TODAY, horizon_days=7)
        self.assertEqual([b.days_until_due for b in upcoming], [0, 1, 7])
        self.assertEqual(upcoming[1].due_label, "tomorrow")
        self.assertEqual(upcoming[2].due_label, "in 7 days")

    def test_unbounded_horizon(self):
        upcoming = upcoming_bills(self.rows, TODAY, horizon_days=None)
        self.assertEqual([b.days_until_due for b in upcoming], [0, 1, 7, 8, 30])

    def test_zero_horizon(self):
        upcoming = upcoming_bills(self.rows, TODAY, horizon_days=0)
        self.assertEqual(len(upcoming), 1)

    def test_negative_horizon(self):
        with self.assertRaises(ValidationError):
            upcoming_bills(self.rows, TODAY, horizon_days=-1)

    def test_paid_and_undated_rows_are_not_bills(self):
        overdue = overdue_bills(self.rows, TODAY)
        upcoming = upcoming_bills(self.rows, TODAY, horizon_days=None)
        classified = overdue + [b.transaction for b in upcoming]
        self.assertTrue(all(not t.is_paid and t.due_date for t in classified))

    def test_overdue_and_upcoming_are_disjoint(self):
        overdue_ids = {t.id for t in overdue_bills(self.rows, TODAY)}
        upcoming_ids = {b.transaction.id for b in upcoming_bills(self.rows, TODAY, None)}
        self.assertFalse(overdue_ids & upcoming_ids)


    def test_unpaid_income_is_not_a_bill(self):
        """Pending income with a due date stays off the bill lists"""
        rows = self.rows + [
            tx("income", "900.00", date(2024, 5, 1), paid=False, due=TODAY + timedelta(days=2)),
            tx("income", "50.00", date(2024, 5, 1), paid=False, due=TODAY - timedelta(days=4)),
        ]
        overdue, upcoming = expense_bills_due(rows, TODAY)
        self.assertTrue(all(t.type == "expense" for t in overdue))
        self.assertTrue(all(b.transaction.type == "expense" for b in upcoming))
        self.assertEqual(len(overdue), 2)
        self.assertEqual([b.days_until_due for b in upcoming], [0, 1, 7])

class TestPaidThisMonth(unittest.TestCase):
    def test_newest_first_in_calendar_month(self):
        rows = [
            tx("expense", "1.00", date(2024, 5, 2)),
            tx("expense", "2.00", date(2024, 5, 31)),
            tx("expense", "3.00", date(2024, 4, 30)),
            tx("expense", "4.00", date(2024, 5, 10), paid=False),
        ]
        paid = paid_this_month(rows, TODAY)
        self.assertEqual([t.amount for t in paid], [Decimal("2.00"), Decimal("1.00")])


class TestOverview(unittest.TestCase):
    def test_amounts(self):
        rows = [_bill(-1, "10.00"), _bill(2, "15.00"), _bill(40, "5.00"),
                tx("expense", "7.00", date(2024, 5, 3))]
        overview = bill_overview(rows, TODAY)
        self.assertEqual(overview.overdue_amount, Decimal("10.00"))
        self.assertEqual(overview.upcoming_amount, Decimal("20.00"))
        self.assertEqual(overview.paid_amount, Decimal("7.00"))

    def test_empty(self):
        overview = bill_overview([], TODAY)
        self.assertEqual(overview.overdue_amount, Decimal("0.00"))
        self.assertEqual(overview.upcoming, [])


if __name__ == "__main__":
    unittest.main()
