"""Registry of lazily initialized drive indexes."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from typing import Callable, Mapping, Optional, Union

from gdindex.auth import AuthInfo
from gdindex.cache import CacheOrchestrator, KVStore, TtlClass
from gdindex.config import IndexConfig, auth_info_from_env, cloudflare_store_from_env
from gdindex.controller import GoogleDriveController
from gdindex.errors import ConfigurationError, GDIndexError, InitializationError
from gdindex.models import CacheStatus, ClearResult, DriveCacheStatus, TreeSnapshot
from gdindex.util.log import get_logger
from gdindex.util.time import now_utc

from .index import DriveIndex
from .resolver import ROOT_ALIAS, UserDriveRootId

logger = get_logger(__name__)

ALL_DRIVES = "all"


class DriveRegistry:
    """
    Drive indexes keyed by configured order.

    Each index is built and initialized on first use under a per-order lock,
    so concurrent callers for the same drive share one initialization. A
    failed initialization is not kept; the next call tries again.
    """

    def __init__(
        self,
        config: IndexConfig,
        controller: GoogleDriveController,
        store: Optional[KVStore] = None,
        *,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._config = config
        self._controller = controller
        self._store = store
        self._clock = clock

        self._user_root_id = UserDriveRootId(lambda: controller.get(ROOT_ALIAS).id)
        self._indexes: dict[int, DriveIndex] = {}
        self._locks = [threading.Lock() for _ in config.roots]

        self._executor: Optional[ThreadPoolExecutor] = None
        if store is not None and config.enable_kv_cache and config.write_workers > 0:
            self._executor = ThreadPoolExecutor(
                max_workers=config.write_workers,
                thread_name_prefix="gdindex-kv",
            )

    @classmethod
    def from_auth_info(
        cls,
        config: IndexConfig,
        auth_info: AuthInfo,
        store: Optional[KVStore] = None,
    ) -> "DriveRegistry":
        config.require_roots()
        return cls(config, GoogleDriveController(auth_info), store)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DriveRegistry":
        """Build config, credentials and the KV store from environment variables."""
        config = IndexConfig.from_env(environ)
        return cls.from_auth_info(config, auth_info_from_env(environ), cloudflare_store_from_env(environ))

    def __len__(self) -> int:
        return len(self._config.roots)

    @property
    def config(self) -> IndexConfig:
        return self._config

    @property
    def user_root_id(self) -> UserDriveRootId:
        return self._user_root_id

    def admin_cache(self) -> CacheOrchestrator:
        """A memo-less view of the shared KV store with synchronous writes."""
        return CacheOrchestrator(self._config, self._store, clock=self._clock)

    # ----------------------------
    # Drive access
    # ----------------------------
    def get(self, order: Optional[int] = None, *, force_reload: bool = False) -> DriveIndex:
        """
        Return the initialized index for a drive.

        Raises:
            ConfigurationError: no roots configured or order out of range.
            InitializationError: the drive's root type could not be resolved.
        """
        order = self._config.default_drive if order is None else order
        self._check_order(order)

        with self._locks[order]:
            index = self._indexes.get(order)
            if index is not None and not force_reload:
                return index

            # Fresh DriveRoot per instance: resolution rewrites it in place.
            root = replace(self._config.roots[order])
            cache = CacheOrchestrator(self._config, self._store, executor=self._executor, clock=self._clock)
            index = DriveIndex(root, self._controller, cache, self._user_root_id)

            try:
                index.initialize()
            except InitializationError:
                self._indexes.pop(order, None)
                raise
            except GDIndexError as exc:
                self._indexes.pop(order, None)
                raise InitializationError(
                    "Drive initialization failed",
                    details={"drive": order, "root_id": root.root_id},
                    cause=exc,
                ) from exc

            self._indexes[order] = index
            return index

    def loaded(self, order: int) -> Optional[DriveIndex]:
        return self._indexes.get(order)

    # ----------------------------
    # Admin operations
    # ----------------------------
    def clear_cache(self, target: Union[int, str]) -> ClearResult:
        """Clear one drive's keys, or every key (and the refresh cursor) for "all"."""
        if target == ALL_DRIVES:
            result = self.admin_cache().clear_all()
            for index in list(self._indexes.values()):
                index.reset_memo()
            return result

        if not isinstance(target, int):
            raise ConfigurationError(f"Invalid drive target: {target!r}")
        self._check_order(target)

        index = self._indexes.get(target)
        if index is not None:
            result = index.cache.clear_drive(target)
            index.reset_memo()
            return result
        return self.admin_cache().clear_drive(target)

    def cache_status(self) -> CacheStatus:
        admin = self.admin_cache()
        count = len(self)

        cursor = admin.read_refresh_cursor()
        if cursor is None or not 0 <= cursor < max(count, 1):
            cursor = 0

        drives: list[DriveCacheStatus] = []
        for root in self._config.roots:
            index = self._indexes.get(root.order)
            cache = index.cache if index is not None else admin
            root_id = index.root.root_id if index is not None else root.root_id

            snapshot = cache.get_snapshot(root.order, root_id)
            drives.append(
                DriveCacheStatus(
                    order=root.order,
                    name=root.name,
                    has_cache=snapshot is not None,
                    cache_time=snapshot.generated_at if snapshot else None,
                    file_count=snapshot.total_files if snapshot else 0,
                    is_next_refresh=root.order == cursor,
                )
            )

        return CacheStatus(
            drives=drives,
            next_refresh_drive=cursor,
            refresh_hour=self._config.refresh_hour,
            current_time=self._clock(),
            browsing_ttl=admin.ttl_for(TtlClass.BROWSING),
            snapshot_ttl=admin.ttl_for(TtlClass.SNAPSHOT),
        )

    def force_update(self, order: int) -> TreeSnapshot:
        """Reload a drive and rebuild its snapshot regardless of freshness."""
        index = self.get(order, force_reload=True)
        snapshot = index.build_snapshot(force=True)
        index.cache.flush()
        return snapshot

    def close(self) -> None:
        for index in list(self._indexes.values()):
            index.cache.flush()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _check_order(self, order: int) -> None:
        self._config.require_roots()
        if not 0 <= order < len(self._config.roots):
            raise ConfigurationError(
                f"Drive index {order} is out of range",
                details={"order": order, "drives": len(self._config.roots)},
            )
