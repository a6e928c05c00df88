import unittest

from gdindex.util.paths import (
    child_path,
    escape_query_value,
    is_dir_path,
    normalize_path,
    split_parent,
    split_segments,
)


class TestUtilPaths(unittest.TestCase):
    def test_is_dir_path(self) -> None:
        self.assertTrue(is_dir_path("/"))
        self.assertTrue(is_dir_path("/a/"))
        self.assertFalse(is_dir_path("/a"))

    def test_split_segments_decodes_and_drops_empties(self) -> None:
        self.assertEqual(split_segments("/a//b%20c/"), ["a", "b c"])
        self.assertEqual(split_segments("/"), [])

    def test_normalize_path(self) -> None:
        self.assertEqual(normalize_path(""), "/")
        self.assertEqual(normalize_path("/"), "/")
        self.assertEqual(normalize_path("a/b"), "/a/b")
        self.assertEqual(normalize_path("//a//b/"), "/a/b/")
        self.assertEqual(normalize_path("/my%20dir/"), "/my dir/")

    def test_split_parent(self) -> None:
        self.assertEqual(split_parent("/a/b/c.txt"), ("/a/b/", "c.txt"))
        self.assertEqual(split_parent("/c.txt"), ("/", "c.txt"))
        self.assertEqual(split_parent("/"), ("/", ""))

    def test_child_path(self) -> None:
        self.assertEqual(child_path("/", "a", folder=True), "/a/")
        self.assertEqual(child_path("/a/", "b.txt", folder=False), "/a/b.txt")
        self.assertEqual(child_path("/a", "b", folder=False), "/a/b")

    def test_escape_query_value(self) -> None:
        self.assertEqual(escape_query_value("it's"), "it\\'s")
        self.assertEqual(escape_query_value("a\\b"), "a\\\\b")


if __name__ == "__main__":
    unittest.main()
