import unittest

from utils.errors import AuthenticationError, ValidationError
from support import make_stack


class TestProfileService(unittest.TestCase):
    def setUp(self):
        """Signed-in user with a default profile"""
        self.s = make_stack()
        self.svc = self.s.profiles

    def test_defaults(self):
        profile = self.svc.get()
        self.assertEqual(profile.user_id, self.s.user.id)
        self.assertEqual(profile.theme, "system")
        self.assertEqual(profile.currency, "BRL")
        self.assertEqual(profile.full_name, "")

    def test_missing_profile_is_recreated(self):
        conn = self.s.db.get_connection()
        conn.execute("DELETE FROM profiles WHERE user_id = ?", (self.s.user.id,))
        conn.commit()
        self.assertEqual(self.svc.get().currency, "BRL")

    def test_update_name_and_preferences(self):
        self.svc.update_name("  Ana Souza ")
        self.svc.update_preferences(theme="dark", currency="EUR")
        profile = self.svc.get()
        self.assertEqual(profile.full_name, "Ana Souza")
        self.assertEqual(profile.theme, "dark")
        self.assertEqual(profile.currency, "EUR")

    def test_rejects_unknown_values(self):
        with self.assertRaises(ValidationError):
            self.svc.update_preferences(theme="neon")
        with self.assertRaises(ValidationError):
            self.svc.update_preferences(currency="JPY")
        self.assertEqual(self.svc.get().theme, "system")

    def test_signed_out(self):
        self.s.auth.sign_out()
        with self.assertRaises(AuthenticationError):
            self.svc.get()


if __name__ == "__main__":
    unittest.main()
