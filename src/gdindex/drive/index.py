"""Per-drive facade used by the HTTP layer."""

from __future__ import annotations

from typing import Optional

from gdindex.cache import CacheOrchestrator, SnapshotFreshness, list_key, search_key
from gdindex.controller import GoogleDriveController
from gdindex.errors import InitializationError, InvalidStateError, NotFoundError
from gdindex.models import (
    ClearResult,
    DriveRoot,
    ListPage,
    Node,
    RootType,
    SearchResult,
    TreeEntry,
    TreeSnapshot,
)
from gdindex.util.log import get_logger
from gdindex.util.paths import normalize_path

from .enumerator import TreeEnumerator
from .resolver import PathResolver, UserDriveRootId
from .shortcuts import resolve_shortcuts

logger = get_logger(__name__)


class DriveIndex:
    """
    One configured drive: path lookups, listings, search and snapshots.

    Every operation checks that the root type was resolved; on an unusable
    drive lookups return None / "" and search returns an empty result.
    """

    def __init__(
        self,
        root: DriveRoot,
        controller: GoogleDriveController,
        cache: CacheOrchestrator,
        user_root_id: UserDriveRootId,
        *,
        enumerator: Optional[TreeEnumerator] = None,
    ) -> None:
        self._root = root
        self._controller = controller
        self._cache = cache
        self._page_size = cache.config.files_list_page_size
        self._resolver = PathResolver(root, controller, cache, user_root_id)
        self._enumerator = enumerator or TreeEnumerator(controller, page_size=self._page_size)

    @property
    def root(self) -> DriveRoot:
        return self._root

    @property
    def order(self) -> int:
        return self._root.order

    @property
    def cache(self) -> CacheOrchestrator:
        return self._cache

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    @property
    def is_ready(self) -> bool:
        return self._root.is_usable

    def initialize(self) -> RootType:
        """Resolve the root type. Raises InitializationError if the drive is unusable."""
        root_type = self._resolver.resolve_root_type()
        if root_type is RootType.INVALID:
            raise InitializationError(
                "Drive root type could not be determined",
                details={"drive": self._root.order, "root_id": self._root.root_id},
            )
        return root_type

    def authorize(self, authorization_header: Optional[str]) -> bool:
        return self._root.authorize(authorization_header)

    # ----------------------------
    # Lookups
    # ----------------------------
    def file(self, path: str) -> Optional[Node]:
        return self._resolver.resolve_file(path)

    def path_to_id(self, path: str) -> Optional[str]:
        return self._resolver.resolve_path_to_id(path)

    def path_by_id(self, node_id: str) -> str:
        return self._resolver.resolve_id_to_path(node_id)

    def list(
        self,
        path: str,
        page_token: Optional[str] = None,
        page_index: int = 0,
    ) -> Optional[ListPage]:
        """Return one page of a directory listing, or None if the directory is absent."""
        if not self.is_ready:
            return None

        path = normalize_path(path)
        if not path.endswith("/"):
            path += "/"

        key = list_key(self.order, path, page_index, page_token)
        cached = ListPage.from_dict(self._cache.get(key))
        if cached is not None:
            return cached

        folder_id = self._resolver.resolve_path_to_id(path)
        if folder_id is None:
            return None

        try:
            page = self._controller.list_children_page(
                folder_id,
                page_token=page_token,
                page_size=self._page_size,
            )
        except NotFoundError:
            return None

        result = ListPage(
            files=resolve_shortcuts(page.nodes),
            cur_page_index=page_index,
            next_page_token=page.next_page_token,
        )
        self._cache.put(key, result.to_dict())
        return result

    # ----------------------------
    # Search / snapshots
    # ----------------------------
    def search(self, query: str) -> SearchResult:
        """Case-insensitive substring match on names over the drive snapshot."""
        needle = (query or "").strip().lower()
        if not self.is_ready or not needle:
            return SearchResult()

        key = search_key(self.order, needle)
        cached = SearchResult.from_dict(self._cache.get(key))
        if cached is not None:
            return cached

        snapshot = self.ensure_snapshot()
        matches = [e for e in snapshot.files if needle in e.node.name.lower()]
        result = SearchResult(
            files=matches,
            total_files=snapshot.total_files,
            cache_timestamp=snapshot.generated_at,
        )
        self._cache.put(key, result.to_dict())
        self._prewarm_paths(matches)
        return result

    def snapshot(self) -> Optional[TreeSnapshot]:
        if not self.is_ready:
            return None
        return self._cache.get_snapshot(self.order, self._root.root_id)

    def ensure_snapshot(self) -> TreeSnapshot:
        """Return the cached snapshot, regenerating it when missing or due."""
        snapshot = self.snapshot()
        if snapshot is None or self._cache.classify(snapshot) is SnapshotFreshness.STALE:
            snapshot = self.build_snapshot()
        return snapshot

    def build_snapshot(self, force: bool = False) -> TreeSnapshot:
        """Enumerate the whole drive and cache the result as its snapshot."""
        if not self.is_ready:
            raise InvalidStateError(
                "Drive is not initialized",
                details={"drive": self._root.order},
            )

        entries = self._enumerator.enumerate(self._root.root_id, "/")
        snapshot = TreeSnapshot(
            files=entries,
            generated_at=self._cache.now(),
            force_updated=force,
        )
        self._cache.put_snapshot(self.order, self._root.root_id, snapshot)
        logger.info(
            "snapshot_built",
            drive=self.order,
            total_files=snapshot.total_files,
            force_updated=force,
        )
        return snapshot

    # ----------------------------
    # Invalidation
    # ----------------------------
    def refresh_path(self, path: str) -> ClearResult:
        """Drop the cached listing (directory) or metadata (file) for one path."""
        path = normalize_path(path)
        self._resolver.forget(path)
        return self._cache.clear_path(self.order, path)

    def reset_memo(self) -> None:
        self._cache.clear_memo()
        self._resolver.clear_memo()

    def _prewarm_paths(self, entries: list[TreeEntry]) -> None:
        for entry in entries:
            self._resolver.remember(entry.path, entry.node.id)
