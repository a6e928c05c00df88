import unittest

from gdindex.cache.keys import (
    KeyKind,
    TtlClass,
    all_files_key,
    dir_id_key,
    drive_prefixes,
    file_key,
    list_key,
    path_by_id_key,
    path_prefix,
    search_key,
)


class TestCacheKeys(unittest.TestCase):
    def test_serialized_layout(self) -> None:
        self.assertEqual(file_key(0, "/a/b.txt").serialize(), "file:0:/a/b.txt")
        self.assertEqual(list_key(1, "/a/", 2, "TOK").serialize(), "list:1:/a/:2:TOK")
        self.assertEqual(list_key(1, "/a/", 0, None).serialize(), "list:1:/a/:0:")
        self.assertEqual(all_files_key(0, "R").serialize(), "all_files:0:R")
        self.assertEqual(search_key(3, "doc").serialize(), "search:3:doc:")
        self.assertEqual(path_by_id_key(0, "D1").serialize(), "path_by_id:0:D1")
        self.assertEqual(dir_id_key(0, "F1", "A").serialize(), "dirid:0:F1:A")

    def test_colons_cannot_spill_into_other_fields(self) -> None:
        tricky = dir_id_key(0, "P", "a:b")
        other = dir_id_key(0, "P:a", "b")

        self.assertEqual(tricky.serialize(), "dirid:0:P:a%3Ab")
        self.assertNotEqual(tricky.serialize(), other.serialize())
        self.assertEqual(file_key(0, "/100%.txt").serialize(), "file:0:/100%25.txt")

    def test_ttl_classes(self) -> None:
        self.assertEqual(all_files_key(0, "R").ttl_class, TtlClass.SNAPSHOT)
        for key in (file_key(0, "/x"), list_key(0, "/", 0, None), dir_id_key(0, "P", "n")):
            self.assertEqual(key.ttl_class, TtlClass.BROWSING)

    def test_keys_are_hashable_values(self) -> None:
        self.assertEqual(file_key(0, "/x"), file_key(0, "/x"))
        self.assertEqual(len({file_key(0, "/x"), file_key(0, "/x"), file_key(1, "/x")}), 2)

    def test_drive_prefixes_cover_every_kind(self) -> None:
        prefixes = drive_prefixes(2)

        self.assertEqual(len(prefixes), len(KeyKind))
        self.assertIn("dirid:2:", prefixes)
        for key in (file_key(2, "/x"), search_key(2, "q"), all_files_key(2, "R")):
            self.assertTrue(any(key.serialize().startswith(p) for p in prefixes))
        self.assertFalse(any(file_key(20, "/x").serialize().startswith(p) for p in prefixes))

    def test_path_prefix_distinguishes_directories(self) -> None:
        self.assertEqual(path_prefix(0, "/a/"), "list:0:/a/")
        self.assertEqual(path_prefix(0, "/a/b.txt"), "file:0:/a/b.txt")
        self.assertTrue(list_key(0, "/a/", 3, "T").serialize().startswith(path_prefix(0, "/a/")))


if __name__ == "__main__":
    unittest.main()
