"""Path <-> node id resolution for one drive."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Optional, Union

from gdindex.cache import CacheOrchestrator, dir_id_key, file_key, path_by_id_key
from gdindex.controller import GoogleDriveController
from gdindex.errors import NotFoundError
from gdindex.models import DriveRoot, Node, RootType
from gdindex.util.log import get_logger
from gdindex.util.mime import PASSWORD_FILENAME
from gdindex.util.paths import is_dir_path, normalize_path, split_parent, split_segments

from .shortcuts import resolve_shortcut

logger = get_logger(__name__)

ROOT_ALIAS = "root"


class UserDriveRootId:
    """
    The real id behind the "root" alias of the authenticated user's drive.

    Fetched at most once per process (only a successful fetch is kept) and
    shared by every drive's resolver.
    """

    def __init__(self, fetch: Callable[[], str]) -> None:
        self._fetch = fetch
        self._lock = threading.Lock()
        self._value: Optional[str] = None

    def get(self) -> str:
        with self._lock:
            if self._value is None:
                self._value = self._fetch()
            return self._value


# ----------------------------
# Parent walk results
# ----------------------------
@dataclass(frozen=True)
class Reached:
    """The walk hit the top; nodes run from the start node upward."""

    nodes: tuple[Node, ...]


@dataclass(frozen=True)
class Unanchored:
    """The walk ran out of parents (or looped) before reaching the top."""

    reason: str
    last_id: str


WalkResult = Union[Reached, Unanchored]


class PathResolver:
    """
    Bidirectional mapping between root-relative paths and node ids.

    Two tiers are consulted: the resolver's own memo (path -> id and
    id -> path, always filled together) and the KV cache behind the
    orchestrator (`dirid:` per folder segment, `file:` for a final file
    segment, `path_by_id:` for reverse lookups).

    Resolution failures are reported as None / "" and never cached;
    upstream errors other than NotFoundError propagate.
    """

    def __init__(
        self,
        root: DriveRoot,
        controller: GoogleDriveController,
        cache: CacheOrchestrator,
        user_root_id: UserDriveRootId,
    ) -> None:
        self._root = root
        self._controller = controller
        self._cache = cache
        self._user_root_id = user_root_id
        self._path_ids: dict[str, str] = {}
        self._id_paths: dict[str, str] = {}

    @property
    def root(self) -> DriveRoot:
        return self._root

    # ----------------------------
    # Root classification
    # ----------------------------
    def resolve_root_type(self) -> RootType:
        """
        Classify the drive root and store the result on the DriveRoot.

        A shortcut root is replaced by its target, which must be a folder.
        """
        root = self._root
        root.root_type = RootType.INVALID

        try:
            node = self._controller.get(root.root_id)
        except NotFoundError:
            logger.error("root_not_found", drive=root.order, root_id=root.root_id)
            return root.root_type

        if node.is_raw_shortcut:
            target = resolve_shortcut(node)
            if not target.is_folder:
                logger.error(
                    "root_shortcut_not_folder",
                    drive=root.order,
                    root_id=root.root_id,
                    target_mime=target.mime_type,
                )
                return root.root_type
            root.root_id = target.id
            node = target

        if root.root_id == ROOT_ALIAS or root.root_id == self._user_root_id.get():
            root.root_type = RootType.USER_DRIVE
        elif self._controller.get_share_drive(root.root_id) is not None:
            root.root_type = RootType.SHARE_DRIVE
        elif node.is_folder:
            root.root_type = RootType.SUB_FOLDER
        else:
            logger.error("root_not_folder", drive=root.order, root_id=root.root_id, mime=node.mime_type)
            return root.root_type

        self.clear_memo()
        logger.info("root_type_resolved", drive=root.order, root_id=root.root_id, root_type=root.root_type.value)
        return root.root_type

    # ----------------------------
    # Path -> id
    # ----------------------------
    def resolve_path_to_id(self, path: str) -> Optional[str]:
        if not self._root.is_usable:
            return None

        path = normalize_path(path)
        cached = self._path_ids.get(path)
        if cached:
            return cached

        if is_dir_path(path):
            return self._resolve_dir(path)

        node = self._resolve_leaf(path)
        return node.id if node is not None else None

    def resolve_file(self, path: str) -> Optional[Node]:
        """Resolve a file path (no trailing '/') to its shortcut-resolved node."""
        if not self._root.is_usable:
            return None

        path = normalize_path(path)
        if is_dir_path(path):
            return None

        node = self._resolve_leaf(path)
        if node is None or node.is_folder:
            return None
        return node

    def _resolve_leaf(self, path: str) -> Optional[Node]:
        # A folder named without its trailing '/' is recorded under the
        # directory form only; `file:` keys hold files.
        key = file_key(self._root.order, path)
        cached = self._cache.get(key)
        if isinstance(cached, dict):
            node = Node.from_dict(cached)
            self._memoize(path, node.id)
            return node

        parent_path, name = split_parent(path)
        if name == PASSWORD_FILENAME:
            return None

        parent_id = self._resolve_dir(parent_path)
        if parent_id is None:
            return None

        try:
            found = self._controller.find_child(parent_id, name)
        except NotFoundError:
            return None
        if found is None:
            return None

        node = resolve_shortcut(found)
        if node.is_folder:
            self.remember(path + "/", node.id)
            return node

        self._cache.put(key, node.to_dict())
        self.remember(path, node.id)
        return node

    def _resolve_dir(self, path: str) -> Optional[str]:
        node_id = self._root.root_id
        prefix = "/"
        for name in split_segments(path):
            prefix = f"{prefix}{name}/"
            cached = self._path_ids.get(prefix)
            if cached:
                node_id = cached
                continue

            child_id = self._resolve_folder_segment(prefix, node_id, name)
            if child_id is None:
                return None
            node_id = child_id
        return node_id

    def _resolve_folder_segment(self, path: str, parent_id: str, name: str) -> Optional[str]:
        key = dir_id_key(self._root.order, parent_id, name)
        cached = self._cache.get(key)
        if isinstance(cached, str) and cached:
            self._memoize(path, cached)
            return cached

        try:
            found = self._controller.find_child(parent_id, name, folders_only=True)
        except NotFoundError:
            return None
        if found is None:
            return None

        node = resolve_shortcut(found)
        if not node.is_folder:
            # Shortcut to a file used as a directory segment.
            return None

        self._cache.put(key, node.id)
        self.remember(path, node.id)
        return node.id

    # ----------------------------
    # Id -> path
    # ----------------------------
    def resolve_id_to_path(self, node_id: str) -> str:
        if not self._root.is_usable or not node_id:
            return ""

        cached = self._id_paths.get(node_id)
        if cached:
            return cached

        top_id = self._top_id()
        if node_id in (self._root.root_id, top_id):
            return "/"

        key = path_by_id_key(self._root.order, node_id)
        stored = self._cache.get(key)
        if isinstance(stored, str) and stored:
            self._memoize(stored, node_id)
            return stored

        result = self._walk_to_top(node_id, top_id)
        if isinstance(result, Unanchored):
            logger.info(
                "parent_walk_unanchored",
                drive=self._root.order,
                node_id=node_id,
                reason=result.reason,
                last_id=result.last_id,
            )
            return ""

        names = [n.name for n in reversed(result.nodes)]
        path = "/" + "/".join(names)
        if resolve_shortcut(result.nodes[0]).is_folder:
            path += "/"

        self.remember(path, node_id)
        return path

    def _walk_to_top(self, node_id: str, top_id: str) -> WalkResult:
        chain: list[Node] = []
        visited: set[str] = set()
        current = node_id

        while True:
            if current in visited:
                return Unanchored(reason="cycle", last_id=current)
            visited.add(current)

            try:
                node = self._controller.get(current)
            except NotFoundError:
                return Unanchored(reason="missing", last_id=current)
            chain.append(node)

            if not node.parents:
                return Unanchored(reason="no_parent", last_id=current)

            parent_id = node.parents[0]
            if parent_id == top_id:
                return Reached(nodes=tuple(chain))
            current = parent_id

    def _top_id(self) -> str:
        if self._root.root_type is RootType.USER_DRIVE:
            return self._user_root_id.get()
        return self._root.root_id

    # ----------------------------
    # Memo
    # ----------------------------
    def remember(self, path: str, node_id: str) -> None:
        """Record a freshly resolved (path, id) pair in both directions."""
        self._memoize(path, node_id)
        self._cache.put(path_by_id_key(self._root.order, node_id), path)

    def forget(self, path: str) -> None:
        node_id = self._path_ids.pop(normalize_path(path), None)
        if node_id is not None:
            self._id_paths.pop(node_id, None)

    def clear_memo(self) -> None:
        self._path_ids.clear()
        self._id_paths.clear()
        if self._root.is_usable:
            self._memoize("/", self._root.root_id)

    def _memoize(self, path: str, node_id: str) -> None:
        self._path_ids[path] = node_id
        self._id_paths[node_id] = path
