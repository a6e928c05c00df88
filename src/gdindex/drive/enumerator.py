"""Breadth-first enumeration of a folder subtree."""

from __future__ import annotations

from collections import deque
from typing import Optional

from gdindex.controller import GoogleDriveController
from gdindex.errors import GDIndexError
from gdindex.models import TreeEntry
from gdindex.util.log import get_logger
from gdindex.util.paths import child_path

from .shortcuts import resolve_shortcuts

logger = get_logger(__name__)


class TreeEnumerator:
    """
    Flatten a folder subtree into (node, path) entries.

    Notes:
        - A folder that fails to list is logged and skipped; entries already
          collected (including earlier pages of that folder) are kept.
        - Each folder id is listed at most once, which also breaks shortcut
          loops.
        - Runtime is unbounded; call it from background work or cold search.
    """

    def __init__(self, controller: GoogleDriveController, *, page_size: int = 200) -> None:
        self._controller = controller
        self._page_size = page_size

    def enumerate(self, folder_id: str, base_path: str = "/") -> list[TreeEntry]:
        if not base_path.endswith("/"):
            base_path += "/"

        entries: list[TreeEntry] = []
        queue: deque[tuple[str, str]] = deque([(folder_id, base_path)])
        visited: set[str] = set()
        failed = 0

        logger.info("enumeration_started", folder_id=folder_id, base_path=base_path)

        while queue:
            current_id, prefix = queue.popleft()
            if current_id in visited:
                continue
            visited.add(current_id)

            page_token: Optional[str] = None
            while True:
                try:
                    page = self._controller.list_children_page(
                        current_id,
                        page_token=page_token,
                        page_size=self._page_size,
                    )
                except GDIndexError as exc:
                    failed += 1
                    logger.warning(
                        "folder_list_failed",
                        folder_id=current_id,
                        path=prefix,
                        error=str(exc),
                    )
                    break

                for node in resolve_shortcuts(page.nodes):
                    path = child_path(prefix, node.name, folder=node.is_folder)
                    entries.append(TreeEntry(node=node, path=path))
                    if node.is_folder:
                        queue.append((node.id, path))

                page_token = page.next_page_token
                if not page_token:
                    break

        logger.info(
            "enumeration_finished",
            folder_id=folder_id,
            entries=len(entries),
            folders_listed=len(visited),
            folders_failed=failed,
        )
        return entries
