import unittest
from datetime import date
from decimal import Decimal

from models.transaction import TransactionDraft
from services.installments import expand, validate_count
from utils.errors import ValidationError


def _draft(**overrides):
    fields = dict(
        type="expense",
        amount=Decimal("250.00"),
        transaction_date=date(2024, 1, 31),
        description="Laptop",
        is_paid=True,
    )
    fields.update(overrides)
    return TransactionDraft(**fields)


class TestExpand(unittest.TestCase):
    def test_plain_draft_is_one_row(self):
        """A non-installment draft yields one row with the installment fields unset"""
        rows = expand(_draft())
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertFalse(row["is_installment"])
        self.assertIsNone(row["installment_number"])
        self.assertIsNone(row["installment_count"])
        self.assertEqual(row["amount"], Decimal("250.00"))
        self.assertTrue(row["is_paid"])
        self.assertNotIn("user_id", row)

    def test_installments_count_and_numbering(self):
        rows = expand(_draft(is_installment=True, installment_count=4))
        self.assertEqual(len(rows), 4)
        self.assertEqual([r["installment_number"] for r in rows], [1, 2, 3, 4])
        self.assertTrue(all(r["installment_count"] == 4 for r in rows))
        self.assertTrue(all(r["is_installment"] for r in rows))

    def test_dates_step_monthly_from_anchor(self):
        """Month-end anchors clamp per month without drifting"""
        rows = expand(_draft(is_installment=True, installment_count=3))
        self.assertEqual(
            [r["transaction_date"] for r in rows],
            [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)],
        )

    def test_dates_cross_year(self):
        rows = expand(_draft(
            transaction_date=date(2024, 11, 10), is_installment=True, installment_count=3,
        ))
        self.assertEqual(rows[-1]["transaction_date"], date(2025, 1, 10))

    def test_only_first_may_be_paid(self):
        rows = expand(_draft(is_installment=True, installment_count=3, is_paid=True))
        self.assertEqual([r["is_paid"] for r in rows], [True, False, False])

        rows = expand(_draft(is_installment=True, installment_count=3, is_paid=False))
        self.assertEqual([r["is_paid"] for r in rows], [False, False, False])

    def test_other_fields_copied(self):
        """Each installment carries the full amount and the same due date"""
        due = date(2024, 2, 10)
        rows = expand(_draft(
            is_installment=True, installment_count=2, due_date=due,
            category_id=7, is_fixed=True,
        ))
        for r in rows:
            self.assertEqual(r["amount"], Decimal("250.00"))
            self.assertEqual(r["due_date"], due)
            self.assertEqual(r["category_id"], 7)
            self.assertEqual(r["description"], "Laptop")
            self.assertTrue(r["is_fixed"])

    def test_bounds(self):
        self.assertEqual(len(expand(_draft(is_installment=True, installment_count=2))), 2)
        self.assertEqual(len(expand(_draft(is_installment=True, installment_count=60))), 60)
        for bad in (1, 61, 0, -3):
            with self.subTest(count=bad):
                with self.assertRaises(ValidationError):
                    expand(_draft(is_installment=True, installment_count=bad))

    def test_missing_count(self):
        with self.assertRaises(ValidationError):
            expand(_draft(is_installment=True))

    def test_count_without_installment_flag(self):
        with self.assertRaises(ValidationError):
            expand(_draft(installment_count=3))


class TestValidateCount(unittest.TestCase):
    def test_rejects_non_integers(self):
        for bad in (True, 3.0, "3", None):
            with self.subTest(count=bad):
                with self.assertRaises(ValidationError):
                    validate_count(bad)

    def test_accepts_range(self):
        self.assertEqual(validate_count(12), 12)


if __name__ == "__main__":
    unittest.main()
