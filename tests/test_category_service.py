import unittest

from utils.errors import AuthenticationError, ValidationError
from support import draft, make_stack


class TestCategoryService(unittest.TestCase):
    def setUp(self):
        """Signed-in user with the default categories"""
        self.s = make_stack()
        self.svc = self.s.categories

    def test_defaults_seeded(self):
        self.assertEqual(len(self.svc.list("income")), 3)
        self.assertEqual(len(self.svc.list("expense")), 6)

    def test_create_normalizes(self):
        cat = self.svc.create("  Pets ", "expense", "#a855f7")
        self.assertEqual(cat.name, "Pets")
        self.assertEqual(cat.color, "#A855F7")
        self.assertIn("Pets", [c.name for c in self.svc.list("expense")])

    def test_duplicate_names_per_type(self):
        """Names are unique per type regardless of case"""
        with self.assertRaises(ValidationError):
            self.svc.create("housing", "expense", "#EF4444")
        cat = self.svc.create("Housing", "income", "#EF4444")
        self.assertEqual(cat.type, "income")

    def test_uncategorized_is_reserved(self):
        """The bucket name for rows without a category cannot be taken"""
        for name in ("Uncategorized", "uncategorized", " UNCATEGORIZED "):
            with self.subTest(name=name):
                with self.assertRaises(ValidationError):
                    self.svc.create(name, "expense", "#FFFFFF")
        housing = next(c for c in self.svc.list("expense") if c.name == "Housing")
        with self.assertRaises(ValidationError):
            self.svc.update(housing.id, "Uncategorized", "expense", "#FFFFFF")

    def test_callers_cannot_alter_the_cached_list(self):
        rows = self.svc.list("expense")
        rows.clear()
        self.assertEqual(len(self.svc.list("expense")), 6)

    def test_rename_to_own_name_is_allowed(self):
        housing = next(c for c in self.svc.list("expense") if c.name == "Housing")
        updated = self.svc.update(housing.id, "HOUSING", "expense", "#000000")
        self.assertEqual(updated.name, "HOUSING")
        with self.assertRaises(ValidationError):
            self.svc.update(housing.id, "Transport", "expense", "#000000")

    def test_rejects_bad_input(self):
        for name, type_, color in (
            ("   ", "expense", "#FFFFFF"),
            ("Gifts", "transfer", "#FFFFFF"),
            ("Gifts", "expense", "red"),
            ("Gifts", "expense", "#FFF"),
        ):
            with self.subTest(name=name, type=type_, color=color):
                with self.assertRaises(ValidationError):
                    self.svc.create(name, type_, color)

    def test_delete_uncategorizes_transactions(self):
        housing = next(c for c in self.svc.list("expense") if c.name == "Housing")
        tx = self.s.transactions.create(draft(category_id=housing.id))[0]
        self.assertEqual(self.s.transactions.list()[0].category_name, "Housing")

        self.svc.delete(housing.id)

        after = self.s.transactions.list()
        self.assertEqual(after[0].id, tx.id)
        self.assertIsNone(after[0].category_id)
        self.assertEqual(after[0].category_name, "")
        self.assertNotIn("Housing", [c.name for c in self.svc.list()])

    def test_signed_out(self):
        self.s.auth.sign_out()
        self.assertEqual(self.svc.list(), [])
        with self.assertRaises(AuthenticationError):
            self.svc.create("Pets", "expense", "#A855F7")


if __name__ == "__main__":
    unittest.main()
