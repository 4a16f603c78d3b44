import unittest

from utils.errors import AuthenticationError, ValidationError
from support import PASSWORD, make_stack


class TestAuthService(unittest.TestCase):
    def setUp(self):
        """Empty database, nobody signed in"""
        self.s = make_stack(email=None)
        self.auth = self.s.auth

    def test_sign_up_signs_in(self):
        user = self.auth.sign_up("  Ana@Example.COM ", PASSWORD)
        self.assertEqual(user.email, "ana@example.com")
        self.assertEqual(self.auth.current_user_id(), user.id)
        self.assertEqual(self.s.profiles.get().currency, "BRL")

    def test_password_is_hashed(self):
        user = self.auth.sign_up("ana@example.com", PASSWORD)
        row = self.s.db.get_connection().execute(
            "SELECT password_hash FROM users WHERE id = ?", (user.id,)
        ).fetchone()
        self.assertNotEqual(row["password_hash"], PASSWORD)

    def test_sign_up_validation(self):
        with self.assertRaises(ValidationError):
            self.auth.sign_up("not-an-email", PASSWORD)
        with self.assertRaises(ValidationError):
            self.auth.sign_up("ana@example.com", "12345")
        self.auth.sign_up("ana@example.com", PASSWORD)
        with self.assertRaises(ValidationError):
            self.auth.sign_up("ANA@example.com", PASSWORD)

    def test_sign_in(self):
        self.auth.sign_up("ana@example.com", PASSWORD)
        self.auth.sign_out()
        self.assertIsNone(self.auth.current_user)
        user = self.auth.sign_in("Ana@example.com", PASSWORD)
        self.assertEqual(self.auth.current_user, user)

    def test_wrong_credentials(self):
        self.auth.sign_up("ana@example.com", PASSWORD)
        self.auth.sign_out()
        with self.assertRaises(AuthenticationError):
            self.auth.sign_in("ana@example.com", "wrong-password")
        with self.assertRaises(AuthenticationError):
            self.auth.sign_in("nobody@example.com", PASSWORD)
        self.assertIsNone(self.auth.current_user_id())

    def test_update_password(self):
        self.auth.sign_up("ana@example.com", PASSWORD)
        with self.assertRaises(ValidationError):
            self.auth.update_password("newpass1", "newpass2")
        self.auth.update_password("newpass1", "newpass1")
        self.auth.sign_out()
        with self.assertRaises(AuthenticationError):
            self.auth.sign_in("ana@example.com", PASSWORD)
        self.auth.sign_in("ana@example.com", "newpass1")

    def test_require_user(self):
        with self.assertRaises(AuthenticationError):
            self.auth.require_user()
        with self.assertRaises(AuthenticationError):
            self.auth.update_password("newpass1", "newpass1")


if __name__ == "__main__":
    unittest.main()
