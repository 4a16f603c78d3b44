import unittest
from decimal import Decimal

from utils.currency import format_currency, format_signed, money_sum, percentage, to_money


class TestCurrency(unittest.TestCase):
    def test_to_money_quantizes(self):
        self.assertEqual(to_money("10"), Decimal("10.00"))
        self.assertEqual(to_money(0.1), Decimal("0.10"))
        self.assertEqual(to_money("2.005"), Decimal("2.01"))

    def test_to_money_rejects_garbage(self):
        for bad in ("abc", None, True, "nan", "inf", ""):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    to_money(bad)

    def test_to_money_rejects_amounts_beyond_precision(self):
        for huge in ("9" * 29, Decimal("1E+30"), 10 ** 40):
            with self.subTest(value=huge):
                with self.assertRaises(ValueError):
                    to_money(huge)
        self.assertEqual(to_money("9" * 26), Decimal("9" * 26 + ".00"))

    def test_money_sum_is_exact(self):
        """Ten 0.10 amounts add up to exactly 1.00"""
        self.assertEqual(money_sum(["0.10"] * 10), Decimal("1.00"))
        self.assertEqual(money_sum([]), Decimal("0.00"))

    def test_percentage(self):
        self.assertEqual(percentage(Decimal("700"), Decimal("1000")), Decimal("70.0"))
        self.assertEqual(percentage(Decimal("5"), Decimal("0")), Decimal("0.0"))
        self.assertEqual(percentage(Decimal("1"), Decimal("3")), Decimal("33.3"))

    def test_formatting(self):
        self.assertEqual(format_currency(Decimal("1234.5"), "USD"), "$ 1,234.50")
        self.assertEqual(format_currency(Decimal("-3"), "BRL"), "-R$ 3.00")
        self.assertEqual(format_signed(Decimal("3"), "EUR"), "+€ 3.00")
        self.assertEqual(format_currency(Decimal("1"), "XXX"), "R$ 1.00")


if __name__ == "__main__":
    unittest.main()
