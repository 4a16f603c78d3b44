import unittest

from utils.errors import AuthenticationError, PersistenceError
from support import make_stack


class TestBackend(unittest.TestCase):
    def setUp(self):
        """Signed-in user; backend used directly"""
        self.s = make_stack()
        self.backend = self.s.backend

    def _insert_tx(self, **fields):
        row = dict(type="expense", amount="10.00", transaction_date="2024-01-10")
        row.update(fields)
        return self.backend.insert("transactions", [row])[0]

    def test_insert_stamps_owner(self):
        row = self._insert_tx()
        self.assertEqual(row["user_id"], self.s.user.id)
        self.assertIsNotNone(row["id"])

    def test_filters_and_ordering(self):
        self._insert_tx(transaction_date="2024-01-05")
        self._insert_tx(transaction_date="2024-02-05", due_date="2024-02-10")
        self._insert_tx(transaction_date="2024-03-05")
        rows = self.backend.query(
            "transactions",
            {"transaction_date": ("gte", "2024-02-01")},
            ordering=[("transaction_date", False)],
        )
        self.assertEqual([r["transaction_date"] for r in rows], ["2024-03-05", "2024-02-05"])
        undated = self.backend.query("transactions", {"due_date": ("is", None)})
        self.assertEqual(len(undated), 2)

    def test_unknown_names_rejected(self):
        with self.assertRaises(PersistenceError):
            self.backend.query("users")
        with self.assertRaises(PersistenceError):
            self.backend.query("transactions", {"password_hash": "x"})
        with self.assertRaises(PersistenceError):
            self.backend.query("transactions", {"amount": ("like", "1%")})
        with self.assertRaises(PersistenceError):
            self._insert_tx(note="x")

    def test_ownership_cannot_change(self):
        row = self._insert_tx()
        with self.assertRaises(PersistenceError):
            self.backend.update("transactions", row["id"], {"user_id": 999})

    def test_update_touches_updated_at(self):
        row = self._insert_tx()
        conn = self.s.db.get_connection()
        conn.execute("UPDATE transactions SET updated_at = '2000-01-01 00:00:00'")
        conn.commit()
        updated = self.backend.update("transactions", row["id"], {"description": "x"})
        self.assertNotEqual(updated["updated_at"], "2000-01-01 00:00:00")

    def test_signed_out(self):
        self.s.auth.sign_out()
        self.assertEqual(self.backend.query("transactions"), [])
        with self.assertRaises(AuthenticationError):
            self._insert_tx()
        with self.assertRaises(AuthenticationError):
            self.backend.delete("transactions", 1)

    def test_settings_table(self):
        self.assertEqual(self.s.db.get_setting("date_format"), "DD/MM/YYYY")
        self.s.db.set_setting("date_format", "YYYY-MM-DD")
        self.assertEqual(self.s.db.get_setting("date_format"), "YYYY-MM-DD")
        self.assertEqual(self.s.db.get_setting("missing", "fallback"), "fallback")


if __name__ == "__main__":
    unittest.main()
