"""In-memory stand-ins for the Drive controller and the clock."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from gdindex.errors import ApiError, NotFoundError
from gdindex.models import ChildrenPage, Node, ShortcutTarget
from gdindex.util.mime import FOLDER_MIME, PASSWORD_FILENAME, SHORTCUT_MIME


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now = self.now + timedelta(**kwargs)


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


class FakeController:
    """
    A tiny Drive: nodes by id, children in insertion order.

    `calls` counts every method invocation so tests can assert how many
    upstream requests an operation made.
    """

    def __init__(self, *, user_root_id: str = "USER_ROOT") -> None:
        self.user_root_id = user_root_id
        self.nodes: dict[str, Node] = {}
        self.children: dict[str, list[str]] = {}
        self.share_drives: dict[str, str] = {}
        self.failing_folders: set[str] = set()
        self.calls: Counter = Counter()
        self.add_folder(user_root_id, "My Drive", parent=None)

    # ----------------------------
    # Tree building
    # ----------------------------
    def _add(self, node: Node) -> Node:
        self.nodes[node.id] = node
        for parent in node.parents[:1]:
            self.children.setdefault(parent, []).append(node.id)
        return node

    def add_folder(self, node_id: str, name: str, parent: Optional[str]) -> Node:
        parents = (parent,) if parent else ()
        return self._add(Node(id=node_id, name=name, mime_type=FOLDER_MIME, parents=parents))

    def add_file(self, node_id: str, name: str, parent: str, mime_type: str = "text/plain") -> Node:
        return self._add(Node(id=node_id, name=name, mime_type=mime_type, parents=(parent,), size=10))

    def add_shortcut(self, node_id: str, name: str, parent: str, target_id: str) -> Node:
        target = self.nodes[target_id]
        return self._add(
            Node(
                id=node_id,
                name=name,
                mime_type=SHORTCUT_MIME,
                parents=(parent,),
                shortcut_target=ShortcutTarget(id=target_id, mime_type=target.mime_type),
            )
        )

    def add_share_drive(self, drive_id: str, name: str) -> Node:
        self.share_drives[drive_id] = name
        return self.add_folder(drive_id, name, parent=None)

    # ----------------------------
    # Controller surface
    # ----------------------------
    def get(self, node_id: str) -> Node:
        self.calls["get"] += 1
        if node_id == "root":
            node_id = self.user_root_id
        node = self.nodes.get(node_id)
        if node is None:
            raise NotFoundError("File not found", details={"fileId": node_id})
        return node

    def list_children_page(
        self,
        parent_id: str,
        *,
        page_token: Optional[str] = None,
        page_size: int = 200,
    ) -> ChildrenPage:
        self.calls["list_children_page"] += 1
        if parent_id == "root":
            parent_id = self.user_root_id
        if parent_id in self.failing_folders:
            raise ApiError("backend error", details={"folder": parent_id})

        ids = [i for i in self.children.get(parent_id, []) if self.nodes[i].name != PASSWORD_FILENAME]
        start = int(page_token) if page_token else 0
        end = start + page_size
        return ChildrenPage(
            nodes=[self.nodes[i] for i in ids[start:end]],
            next_page_token=str(end) if end < len(ids) else None,
        )

    def find_child(self, parent_id: str, name: str, *, folders_only: bool = False) -> Optional[Node]:
        self.calls["find_child"] += 1
        if parent_id == "root":
            parent_id = self.user_root_id
        for child_id in self.children.get(parent_id, []):
            node = self.nodes[child_id]
            if node.name != name:
                continue
            if folders_only and node.mime_type not in (FOLDER_MIME, SHORTCUT_MIME):
                continue
            return node
        return None

    def get_share_drive(self, drive_id: str) -> Optional[dict[str, Any]]:
        self.calls["get_share_drive"] += 1
        if drive_id in self.share_drives:
            return {"id": drive_id, "name": self.share_drives[drive_id]}
        return None

    def upstream_calls(self) -> int:
        return sum(self.calls.values())
