import unittest
from datetime import date

from utils.date_helpers import (
    add_months,
    days_until,
    end_inclusive_to_exclusive,
    format_display_date,
    month_window,
    next_month,
    parse_display_date,
    prev_month,
)


class TestAddMonths(unittest.TestCase):
    def test_clamps_to_month_end(self):
        """Jan 31 plus one month lands on the last day of February"""
        self.assertEqual(add_months(date(2024, 1, 31), 1), date(2024, 2, 29))
        self.assertEqual(add_months(date(2023, 1, 31), 1), date(2023, 2, 28))

    def test_steps_from_anchor(self):
        """Two months from Jan 31 is Mar 31, not Mar 29"""
        self.assertEqual(add_months(date(2024, 1, 31), 2), date(2024, 3, 31))

    def test_year_boundaries(self):
        self.assertEqual(add_months(date(2024, 12, 15), 1), date(2025, 1, 15))
        self.assertEqual(add_months(date(2024, 1, 15), -1), date(2023, 12, 15))
        self.assertEqual(add_months(date(2024, 3, 10), 24), date(2026, 3, 10))


class TestWindows(unittest.TestCase):
    def test_month_window_is_half_open(self):
        self.assertEqual(month_window("2024-02"), (date(2024, 2, 1), date(2024, 3, 1)))
        self.assertEqual(month_window("2024-12"), (date(2024, 12, 1), date(2025, 1, 1)))

    def test_month_window_rejects_garbage(self):
        with self.assertRaises(ValueError):
            month_window("2024-13")

    def test_prev_next_month(self):
        self.assertEqual(prev_month("2024-01"), "2023-12")
        self.assertEqual(next_month("2024-12"), "2025-01")

    def test_inclusive_end(self):
        self.assertEqual(end_inclusive_to_exclusive(date(2024, 2, 29)), date(2024, 3, 1))

    def test_days_until(self):
        ref = date(2024, 5, 10)
        self.assertEqual(days_until(date(2024, 5, 10), ref), 0)
        self.assertEqual(days_until(date(2024, 5, 11), ref), 1)
        self.assertEqual(days_until(date(2024, 5, 9), ref), -1)


class TestDisplayDates(unittest.TestCase):
    def test_format(self):
        d = date(2024, 3, 7)
        self.assertEqual(format_display_date(d), "07/03/2024")
        self.assertEqual(format_display_date(d, "MM/DD/YYYY"), "03/07/2024")
        self.assertEqual(format_display_date("2024-03-07", "YYYY-MM-DD"), "2024-03-07")
        self.assertEqual(format_display_date(None), "")

    def test_parse_falls_back_to_iso(self):
        self.assertEqual(parse_display_date("07/03/2024", "DD/MM/YYYY"), date(2024, 3, 7))
        self.assertEqual(parse_display_date("2024-03-07", "DD/MM/YYYY"), date(2024, 3, 7))
        self.assertIsNone(parse_display_date("31/02/2024", "DD/MM/YYYY"))


if __name__ == "__main__":
    unittest.main()
