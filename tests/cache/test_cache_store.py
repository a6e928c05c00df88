import unittest

from fakes import FakeClock, utc

from gdindex.cache.store import MemoryKVStore
from gdindex.errors import InvalidArgumentError


class TestMemoryKVStore(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock(utc(2026, 1, 1))
        self.store = MemoryKVStore(clock=self.clock)

    def test_put_get_returns_a_copy(self) -> None:
        value = {"files": [1, 2]}
        self.store.put("k", value, 60)
        value["files"].append(3)

        self.assertEqual(self.store.get("k"), {"files": [1, 2]})
        self.assertIsNone(self.store.get("missing"))

    def test_values_expire(self) -> None:
        self.store.put("k", "v", 60)
        self.store.put("forever", "v")

        self.clock.advance(seconds=59)
        self.assertEqual(self.store.get("k"), "v")
        self.clock.advance(seconds=1)
        self.assertIsNone(self.store.get("k"))
        self.assertEqual(self.store.get("forever"), "v")
        self.assertEqual(self.store.list("").keys, ["forever"])

    def test_ttl_below_minimum_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.store.put("k", "v", 59)

    def test_list_pages_by_prefix(self) -> None:
        for name in ("a:1", "a:2", "a:3", "b:1"):
            self.store.put(name, 1)

        first = self.store.list("a:", limit=2)
        self.assertEqual(first.keys, ["a:1", "a:2"])
        self.assertFalse(first.list_complete)

        second = self.store.list("a:", cursor=first.cursor, limit=2)
        self.assertEqual(second.keys, ["a:3"])
        self.assertTrue(second.list_complete)
        self.assertIsNone(second.cursor)

    def test_deleting_between_pages_skips_nothing(self) -> None:
        for i in range(5):
            self.store.put(f"k{i}", i)

        seen = []
        cursor = None
        while True:
            page = self.store.list("k", cursor=cursor, limit=2)
            for key in page.keys:
                self.store.delete(key)
            seen.extend(page.keys)
            if page.list_complete:
                break
            cursor = page.cursor

        self.assertEqual(seen, [f"k{i}" for i in range(5)])

    def test_delete_is_idempotent(self) -> None:
        self.store.put("k", 1)
        self.store.delete("k")
        self.store.delete("k")
        self.assertIsNone(self.store.get("k"))


if __name__ == "__main__":
    unittest.main()
