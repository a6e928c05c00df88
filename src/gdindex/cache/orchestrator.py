"""Two-tier cache policy: per-request memo in front of the persistent KV store."""

from __future__ import annotations

import threading
from concurrent.futures import Executor, Future, wait
from datetime import datetime
from typing import Any, Callable, Optional

from gdindex.config import IndexConfig
from gdindex.errors import GDIndexError
from gdindex.models import ClearResult, TreeSnapshot
from gdindex.util.log import get_logger
from gdindex.util.time import now_utc

from .freshness import SnapshotFreshness, classify_snapshot
from .keys import (
    REFRESH_CURSOR_KEY,
    CacheKey,
    TtlClass,
    all_files_key,
    drive_prefixes,
    path_prefix,
)
from .store import KVStore

logger = get_logger(__name__)


class CacheOrchestrator:
    """
    Central cache policy.

    Reads consult the in-memory memo first, then the KV store (a KV hit
    fills the memo). Writes fill the memo immediately and reach the KV
    store in the background when an executor is configured; a failed KV
    write is logged and never reported to the caller.

    One orchestrator (and therefore one memo) belongs to one drive index
    instance; the KV store and the write executor are shared.
    """

    def __init__(
        self,
        config: IndexConfig,
        store: Optional[KVStore] = None,
        *,
        executor: Optional[Executor] = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._config = config
        self._store = store
        self._executor = executor
        self._clock = clock
        self._memo: dict[CacheKey, Any] = {}
        self._pending: list[Future] = []
        self._pending_lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        """True when a persistent KV tier is available."""
        return self._store is not None and self._config.enable_kv_cache

    @property
    def config(self) -> IndexConfig:
        return self._config

    def now(self) -> datetime:
        return self._clock()

    def ttl_for(self, ttl_class: TtlClass) -> int:
        if ttl_class is TtlClass.SNAPSHOT:
            ttl = self._config.snapshot_cache_ttl
        else:
            ttl = self._config.browsing_cache_ttl
        return max(self._config.min_cache_ttl, ttl)

    # ----------------------------
    # Read / write
    # ----------------------------
    def get(self, key: CacheKey) -> Any:
        if key in self._memo:
            return self._memo[key]
        if not self.enabled:
            return None

        try:
            value = self._store.get(key.serialize())  # type: ignore[union-attr]
        except GDIndexError as exc:
            logger.warning("kv_get_failed", key=key.serialize(), error=str(exc))
            return None

        if value is not None:
            self._memo[key] = value
        return value

    def put(self, key: CacheKey, value: Any) -> None:
        """Populate the memo now and write through to KV without blocking."""
        self._memo[key] = value
        if not self.enabled:
            return

        ttl = self.ttl_for(key.ttl_class)
        self._submit(self._write, key.serialize(), value, ttl)

    def clear_memo(self, prefix: str = "") -> None:
        for key in [k for k in self._memo if k.serialize().startswith(prefix)]:
            del self._memo[key]

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait for background KV writes submitted so far."""
        with self._pending_lock:
            pending, self._pending = self._pending, []
        if not pending:
            return
        wait(pending, timeout=timeout)
        for fut in pending:
            if fut.done() and fut.exception() is not None:
                logger.error("kv_background_task_failed", error=str(fut.exception()))

    # ----------------------------
    # Snapshots
    # ----------------------------
    def get_snapshot(self, order: int, root_id: str) -> Optional[TreeSnapshot]:
        return TreeSnapshot.from_dict(self.get(all_files_key(order, root_id)))

    def put_snapshot(self, order: int, root_id: str, snapshot: TreeSnapshot) -> None:
        self.put(all_files_key(order, root_id), snapshot.to_dict())

    def classify(self, snapshot: Optional[TreeSnapshot], now: Optional[datetime] = None) -> SnapshotFreshness:
        return classify_snapshot(
            snapshot,
            now or self._clock(),
            refresh_hour=self._config.refresh_hour,
            utc_offset_hours=self._config.reference_utc_offset_hours,
        )

    # ----------------------------
    # Refresh cursor
    # ----------------------------
    def read_refresh_cursor(self) -> Optional[int]:
        if not self.enabled:
            return None
        try:
            raw = self._store.get(REFRESH_CURSOR_KEY)  # type: ignore[union-attr]
        except GDIndexError as exc:
            logger.warning("kv_get_failed", key=REFRESH_CURSOR_KEY, error=str(exc))
            return None
        try:
            return int(raw) if raw is not None else None
        except (TypeError, ValueError):
            return None

    def write_refresh_cursor(self, index: int) -> bool:
        if not self.enabled:
            return False
        return self._write(REFRESH_CURSOR_KEY, str(index), None)

    # ----------------------------
    # Invalidation
    # ----------------------------
    def delete_prefix(self, prefix: str) -> int:
        """Delete every KV key (and memo entry) under prefix. Returns KV keys deleted."""
        self.clear_memo(prefix)
        if not self.enabled:
            return 0

        deleted = 0
        cursor: Optional[str] = None
        while True:
            page = self._store.list(prefix, cursor)  # type: ignore[union-attr]
            for name in page.keys:
                self._store.delete(name)  # type: ignore[union-attr]
            deleted += len(page.keys)
            if page.list_complete or not page.cursor:
                break
            cursor = page.cursor
        return deleted

    def clear_drive(self, order: int) -> ClearResult:
        return self._clear(drive_prefixes(order), f"drive {order}")

    def clear_all(self) -> ClearResult:
        result = self._clear([""], "all drives")
        if result.success and self.enabled:
            try:
                self._store.delete(REFRESH_CURSOR_KEY)  # type: ignore[union-attr]
            except GDIndexError as exc:
                logger.warning("kv_delete_failed", key=REFRESH_CURSOR_KEY, error=str(exc))
        return result

    def clear_path(self, order: int, path: str) -> ClearResult:
        return self._clear([path_prefix(order, path)], f"path {path!r} of drive {order}")

    # ----------------------------
    # Internals
    # ----------------------------
    def _clear(self, prefixes: list[str], what: str) -> ClearResult:
        if not self.enabled:
            for prefix in prefixes:
                self.delete_prefix(prefix)
            return ClearResult(success=True, message="KV cache is not enabled.")

        total = 0
        try:
            for prefix in prefixes:
                total += self.delete_prefix(prefix)
        except GDIndexError as exc:
            logger.error("kv_clear_failed", target=what, error=str(exc))
            return ClearResult(success=False, keys_deleted=total, message=f"Failed to clear cache: {exc}")

        logger.info("kv_cleared", target=what, keys_deleted=total)
        return ClearResult(success=True, keys_deleted=total, message=f"Deleted {total} cache keys for {what}.")

    def _write(self, key: str, value: Any, ttl: Optional[int]) -> bool:
        try:
            self._store.put(key, value, ttl)  # type: ignore[union-attr]
        except GDIndexError as exc:
            logger.warning("kv_put_failed", key=key, error=str(exc))
            return False
        return True

    def _submit(self, func: Callable[..., Any], *args: Any) -> None:
        if self._executor is None:
            func(*args)
            return
        fut = self._executor.submit(func, *args)
        with self._pending_lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(fut)
