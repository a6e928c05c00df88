import unittest
from datetime import datetime, timezone

from gdindex.models import Node, ShortcutTarget
from gdindex.util.mime import FOLDER_MIME, SHORTCUT_MIME
from gdindex.util.time import to_rfc3339


class TestNode(unittest.TestCase):
    def test_from_dict_parses_drive_fields(self) -> None:
        dt = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        data = {
            "id": "F1",
            "name": "n.txt",
            "mimeType": "text/plain",
            "parents": ["P1", "P2"],
            "modifiedTime": to_rfc3339(dt),
            "createdTime": to_rfc3339(dt),
            "fileExtension": "txt",
            "size": "123",
        }
        node = Node.from_dict(data)

        self.assertEqual(node.id, "F1")
        self.assertEqual(node.parents, ("P1", "P2"))
        self.assertEqual(node.size, 123)
        self.assertEqual(node.modified_time, dt)
        self.assertEqual(node.created_time, dt)
        self.assertEqual(node.file_extension, "txt")
        self.assertFalse(node.is_folder)
        self.assertFalse(node.is_shortcut)

    def test_from_dict_tolerates_missing_and_bad_fields(self) -> None:
        node = Node.from_dict({"id": "X", "size": "big", "modifiedTime": "yesterday"})

        self.assertEqual(node.name, "")
        self.assertEqual(node.parents, ())
        self.assertIsNone(node.size)
        self.assertIsNone(node.modified_time)

    def test_to_dict_round_trip(self) -> None:
        dt = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
        node = Node(
            id="S1",
            name="link",
            mime_type=SHORTCUT_MIME,
            parents=("P",),
            size=5,
            modified_time=dt,
            shortcut_target=ShortcutTarget(id="T1", mime_type=FOLDER_MIME),
        )

        data = node.to_dict()

        self.assertEqual(data["size"], "5")
        self.assertEqual(data["shortcutDetails"], {"targetId": "T1", "targetMimeType": FOLDER_MIME})
        self.assertNotIn("isShortcut", data)
        self.assertEqual(Node.from_dict(data), node)

    def test_with_target_identity(self) -> None:
        node = Node(
            id="S1",
            name="link",
            mime_type=SHORTCUT_MIME,
            parents=("P",),
            shortcut_target=ShortcutTarget(id="T1", mime_type=FOLDER_MIME),
        )

        resolved = node.with_target_identity()

        self.assertTrue(node.is_raw_shortcut)
        self.assertEqual(resolved.id, "T1")
        self.assertEqual(resolved.name, "link")
        self.assertTrue(resolved.is_folder)
        self.assertTrue(resolved.is_shortcut)
        self.assertFalse(resolved.is_raw_shortcut)
        self.assertTrue(resolved.to_dict()["isShortcut"])

    def test_with_target_identity_without_target(self) -> None:
        node = Node(id="S1", name="broken", mime_type=SHORTCUT_MIME)
        self.assertIs(node.with_target_identity(), node)


if __name__ == "__main__":
    unittest.main()
