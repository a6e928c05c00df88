"""Round-robin scheduled snapshot refresh."""

from __future__ import annotations

from gdindex.cache import CacheOrchestrator, SnapshotFreshness
from gdindex.errors import GDIndexError
from gdindex.models import TickAction, TickResult
from gdindex.util.log import get_logger

from .registry import DriveRegistry

logger = get_logger(__name__)


class ScheduledRefresher:
    """
    Refresh at most one drive snapshot per tick.

    The next drive to examine is a cursor kept in the KV store. The cursor
    advances after every tick except when a drive with an existing snapshot
    is not yet due (before the refresh hour); that drive is retried on the
    next tick. Overlapping ticks are not guarded against.
    """

    def __init__(self, registry: DriveRegistry) -> None:
        self._registry = registry

    def tick(self) -> TickResult:
        registry = self._registry
        count = len(registry)
        cache = registry.admin_cache()

        if count == 0 or not cache.enabled:
            logger.info("refresh_not_configured", drives=count, kv_enabled=cache.enabled)
            return TickResult(action=TickAction.NOT_CONFIGURED)

        cursor = cache.read_refresh_cursor()
        if cursor is None or not 0 <= cursor < count:
            cursor = 0
        next_cursor = (cursor + 1) % count
        logger.info("refresh_drive_selected", drive=cursor, drives=count)

        try:
            index = registry.get(cursor, force_reload=True)
        except GDIndexError as exc:
            logger.error("refresh_init_failed", drive=cursor, error=str(exc))
            return self._advance(cache, TickAction.INIT_FAILED, cursor, next_cursor)

        freshness = index.cache.classify(index.snapshot())
        if freshness is SnapshotFreshness.FRESH:
            logger.info("refresh_skipped_fresh", drive=cursor)
            return self._advance(cache, TickAction.SKIPPED_FRESH, cursor, next_cursor)

        if freshness is SnapshotFreshness.POSTPONE:
            logger.info(
                "refresh_postponed",
                drive=cursor,
                refresh_hour=registry.config.refresh_hour,
            )
            return TickResult(action=TickAction.POSTPONED, drive_order=cursor, next_cursor=cursor)

        try:
            snapshot = index.build_snapshot()
        except GDIndexError as exc:
            logger.error("refresh_failed", drive=cursor, error=str(exc))
            return self._advance(cache, TickAction.REFRESH_FAILED, cursor, next_cursor)
        finally:
            index.cache.flush()

        logger.info("refresh_completed", drive=cursor, total_files=snapshot.total_files)
        return self._advance(cache, TickAction.REFRESHED, cursor, next_cursor)

    def _advance(
        self,
        cache: CacheOrchestrator,
        action: TickAction,
        cursor: int,
        next_cursor: int,
    ) -> TickResult:
        cache.write_refresh_cursor(next_cursor)
        logger.info("refresh_cursor_advanced", drive=cursor, next_drive=next_cursor)
        return TickResult(action=action, drive_order=cursor, next_cursor=next_cursor)
