import unittest

from services.query_cache import QueryCache


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestQueryCache(unittest.TestCase):
    def setUp(self):
        """Cache driven by a hand-advanced clock"""
        self.clock = FakeClock()
        self.cache = QueryCache(clock=self.clock)

    def test_miss_then_hit(self):
        self.assertIsNone(self.cache.get(1, "transactions"))
        self.cache.put(1, "transactions", None, ["row"])
        self.assertEqual(self.cache.get(1, "transactions"), ["row"])
        self.assertEqual(self.cache.fetched_at(1, "transactions"), 100.0)

    def test_keys_include_user_and_params(self):
        self.cache.put(1, "transactions", "income", ["a"])
        self.assertIsNone(self.cache.get(2, "transactions", "income"))
        self.assertIsNone(self.cache.get(1, "transactions", "expense"))

    def test_max_age(self):
        self.cache.put(1, "categories", None, ["c"])
        self.clock.now += 30
        self.assertEqual(self.cache.get(1, "categories", max_age=60), ["c"])
        self.clock.now += 31
        self.assertIsNone(self.cache.get(1, "categories", max_age=60))
        self.assertIsNone(self.cache.get(1, "categories"))

    def test_invalidate_by_table(self):
        self.cache.put(1, "transactions", None, [])
        self.cache.put(1, "transactions", "income", [])
        self.cache.put(1, "categories", None, [])
        self.cache.put(2, "transactions", None, [])
        self.assertEqual(self.cache.invalidate(1, "transactions"), 2)
        self.assertIsNotNone(self.cache.get(1, "categories"))
        self.assertIsNotNone(self.cache.get(2, "transactions"))
        self.assertEqual(self.cache.invalidate(1), 1)

    def test_clear(self):
        self.cache.put(1, "transactions", None, [])
        self.cache.clear()
        self.assertIsNone(self.cache.get(1, "transactions"))


if __name__ == "__main__":
    unittest.main()
