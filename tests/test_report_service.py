import csv
import os
import tempfile
import unittest
from datetime import date
from decimal import Decimal

from models.category import Category
from services.report_service import (
    CSV_HEADER,
    ReportFilter,
    category_breakdown,
    export_filename,
    export_rows,
    filter_for_report,
    report,
    summarize,
    write_csv,
)
from utils.currency import money_sum
from utils.errors import ValidationError
from support import tx

JAN = (date(2024, 1, 1), date(2024, 2, 1))


class TestSummarize(unittest.TestCase):
    def test_month_totals(self):
        """Paid income and expenses in the window; unpaid bills counted separately"""
        rows = [
            tx("income", "1000.00", date(2024, 1, 5)),
            tx("expense", "300.00", date(2024, 1, 10)),
            tx("expense", "50.00", date(2023, 12, 20), paid=False, due=date(2024, 1, 1)),
        ]
        s = summarize(rows, *JAN)
        self.assertEqual(s.total_income, Decimal("1000.00"))
        self.assertEqual(s.total_expenses, Decimal("300.00"))
        self.assertEqual(s.balance, Decimal("700.00"))
        self.assertEqual(s.upcoming_bills_count, 1)
        self.assertEqual(s.upcoming_bills_amount, Decimal("50.00"))
        self.assertEqual(s.savings_rate, Decimal("70.0"))

    def test_window_is_half_open(self):
        rows = [
            tx("income", "10.00", date(2024, 1, 1)),
            tx("income", "20.00", date(2024, 2, 1)),
        ]
        self.assertEqual(summarize(rows, *JAN).total_income, Decimal("10.00"))

    def test_unpaid_without_due_date_uses_transaction_date(self):
        rows = [tx("expense", "40.00", date(2024, 1, 20), paid=False)]
        s = summarize(rows, *JAN)
        self.assertEqual(s.total_expenses, Decimal("0.00"))
        self.assertEqual(s.upcoming_bills_count, 1)

    def test_unpaid_income_is_ignored(self):
        rows = [tx("income", "40.00", date(2024, 1, 20), paid=False)]
        s = summarize(rows, *JAN)
        self.assertEqual(s.total_income, Decimal("0.00"))
        self.assertEqual(s.upcoming_bills_count, 0)

    def test_no_income_means_zero_savings_rate(self):
        s = summarize([tx("expense", "10.00", date(2024, 1, 3))], *JAN)
        self.assertEqual(s.savings_rate, Decimal("0.0"))
        self.assertEqual(s.balance, Decimal("-10.00"))

    def test_empty_window(self):
        s = summarize([], date(2024, 1, 1), date(2024, 1, 1))
        self.assertEqual(s.balance, Decimal("0.00"))
        self.assertEqual(s.upcoming_bills_count, 0)

    def test_start_after_end(self):
        with self.assertRaises(ValidationError):
            summarize([], date(2024, 2, 1), date(2024, 1, 1))

    def test_cent_exact_totals(self):
        rows = [tx("expense", "0.10", date(2024, 1, 2)) for _ in range(10)]
        self.assertEqual(summarize(rows, *JAN).total_expenses, Decimal("1.00"))


class TestBreakdown(unittest.TestCase):
    def setUp(self):
        """Two known categories"""
        self.categories = [
            Category(id=1, user_id=1, name="Food", type="expense", color="#F97316"),
            Category(id=2, user_id=1, name="Salary", type="income", color="#22C55E"),
        ]

    def test_buckets_and_shares(self):
        rows = [
            tx("expense", "75.00", category_id=1),
            tx("expense", "25.00", category_id=None),
            tx("income", "500.00", category_id=2),
        ]
        totals = category_breakdown(rows, self.categories)
        self.assertEqual([t.name for t in totals], ["Salary", "Food", "Uncategorized"])
        food = totals[1]
        self.assertEqual(food.expense, Decimal("75.00"))
        self.assertEqual(food.expense_share, Decimal("75.0"))
        self.assertEqual(food.income_share, Decimal("0.0"))
        self.assertEqual(totals[2].expense_share, Decimal("25.0"))
        self.assertEqual(totals[0].income_share, Decimal("100.0"))

    def test_unknown_category_joins_uncategorized(self):
        rows = [
            tx("expense", "10.00", category_id=None),
            tx("expense", "15.00", category_id=99),
        ]
        totals = category_breakdown(rows, self.categories)
        self.assertEqual(len(totals), 1)
        self.assertIsNone(totals[0].category_id)
        self.assertEqual(totals[0].expense, Decimal("25.00"))

    def test_empty(self):
        self.assertEqual(category_breakdown([], self.categories), [])


class TestReportFilter(unittest.TestCase):
    def test_current_and_last_month(self):
        ref = date(2024, 3, 15)
        cur = ReportFilter.for_preset("current_month", ref)
        self.assertEqual((cur.start, cur.end), (date(2024, 3, 1), date(2024, 4, 1)))
        last = ReportFilter.for_preset("last_month", ref)
        self.assertEqual((last.start, last.end), (date(2024, 2, 1), date(2024, 3, 1)))

    def test_last_month_in_january(self):
        last = ReportFilter.for_preset("last_month", date(2024, 1, 9))
        self.assertEqual((last.start, last.end), (date(2023, 12, 1), date(2024, 1, 1)))

    def test_custom_end_is_inclusive(self):
        f = ReportFilter.for_preset(
            "custom", date(2024, 3, 15),
            custom_start=date(2024, 1, 10), custom_end=date(2024, 1, 20),
        )
        self.assertEqual(f.end, date(2024, 1, 21))

    def test_custom_needs_both_dates(self):
        with self.assertRaises(ValidationError):
            ReportFilter.for_preset("custom", date(2024, 3, 15), custom_start=date(2024, 1, 1))

    def test_custom_start_after_end(self):
        with self.assertRaises(ValidationError):
            ReportFilter.for_preset(
                "custom", date(2024, 3, 15),
                custom_start=date(2024, 2, 10), custom_end=date(2024, 1, 1),
            )

    def test_unknown_preset_and_type(self):
        with self.assertRaises(ValidationError):
            ReportFilter.for_preset("fortnight", date(2024, 3, 15))
        with self.assertRaises(ValidationError):
            ReportFilter.for_preset("current_month", date(2024, 3, 15), type_="transfer")


class TestReport(unittest.TestCase):
    def test_filters_and_recent(self):
        rows = [tx("expense", "1.00", date(2024, 1, d), category_id=1) for d in range(1, 13)]
        rows.append(tx("income", "9.00", date(2024, 1, 5), category_id=2))
        rows.append(tx("expense", "3.00", date(2024, 1, 6), paid=False, category_id=1))
        f = ReportFilter(start=JAN[0], end=JAN[1], category_id=1, type="expense")

        self.assertEqual(len(filter_for_report(rows, f)), 12)
        r = report(rows, [], f)
        self.assertEqual(r.transaction_count, 12)
        self.assertEqual(r.summary.total_expenses, Decimal("12.00"))
        self.assertEqual(r.summary.total_income, Decimal("0.00"))
        self.assertEqual(len(r.recent), 10)
        self.assertEqual(r.recent[0].transaction_date, date(2024, 1, 12))


    def test_breakdown_adds_up_to_summary(self):
        """Category subtotals always sum to the period totals"""
        categories = [
            Category(id=1, user_id=1, name="Food", type="expense", color="#F97316"),
            Category(id=2, user_id=1, name="Salary", type="income", color="#22C55E"),
        ]
        rows = [
            tx("income", "1500.00", date(2024, 1, 5), category_id=2),
            tx("income", "120.10", date(2024, 1, 9)),
            tx("expense", "33.33", date(2024, 1, 3), category_id=1),
            tx("expense", "0.01", date(2024, 1, 4)),
            tx("expense", "19.90", date(2024, 1, 8), category_id=42),
            tx("expense", "250.00", date(2024, 1, 9), paid=False, due=date(2024, 1, 20)),
            tx("expense", "70.00", date(2024, 2, 1), category_id=1),
        ]
        r = report(rows, categories, ReportFilter(start=JAN[0], end=JAN[1]))
        self.assertEqual(
            money_sum(b.income for b in r.breakdown), r.summary.total_income
        )
        self.assertEqual(
            money_sum(b.expense for b in r.breakdown), r.summary.total_expenses
        )
        self.assertEqual(r.summary.total_income, Decimal("1620.10"))
        self.assertEqual(r.summary.total_expenses, Decimal("53.24"))

class TestExport(unittest.TestCase):
    def setUp(self):
        """One categorized and one uncategorized row"""
        self.categories = [Category(id=1, user_id=1, name="Food", type="expense")]
        self.rows = [
            tx("expense", "1234.50", date(2024, 3, 7), category_id=1, description="Market"),
            tx("income", "10.00", date(2024, 3, 8), description="Refund"),
        ]

    def test_rows(self):
        out = export_rows(self.rows, self.categories)
        self.assertEqual(out[0], CSV_HEADER)
        self.assertEqual(out[1], ["07/03/2024", "Expense", "Food", "Market", "1234.50"])
        self.assertEqual(out[2], ["08/03/2024", "Income", "Uncategorized", "Refund", "10.00"])

    def test_rows_follow_date_format(self):
        out = export_rows(self.rows, self.categories, date_format="YYYY-MM-DD")
        self.assertEqual(out[1][0], "2024-03-07")

    def test_filename(self):
        self.assertEqual(export_filename(date(2024, 3, 9)), "finance-report-2024-03-09.csv")

    def test_write_csv_quotes_commas(self):
        self.rows[0].description = 'Market, "big" run'
        out = export_rows(self.rows, self.categories)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "report.csv")
            write_csv(path, out)
            with open(path, newline="", encoding="utf-8") as f:
                read_back = list(csv.reader(f))
        self.assertEqual(read_back, out)


if __name__ == "__main__":
    unittest.main()
