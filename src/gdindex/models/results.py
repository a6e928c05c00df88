"""Result models returned to the HTTP layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from gdindex.util.time import to_rfc3339

from .node import Node


@dataclass(slots=True)
class ListPage:
    """One cached page of a directory listing."""

    files: list[Node]
    cur_page_index: int = 0
    next_page_token: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nextPageToken": self.next_page_token,
            "curPageIndex": self.cur_page_index,
            "data": {"files": [node.to_dict() for node in self.files]},
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional[ListPage]:
        if not isinstance(data, dict) or not isinstance(data.get("data"), dict):
            return None
        files = data["data"].get("files") or []
        return cls(
            files=[Node.from_dict(f) for f in files if isinstance(f, dict)],
            cur_page_index=int(data.get("curPageIndex") or 0),
            next_page_token=data.get("nextPageToken") or None,
        )


@dataclass(slots=True)
class ClearResult:
    """Outcome of a cache invalidation request."""

    success: bool
    keys_deleted: int = 0
    message: str = ""


@dataclass(slots=True)
class DriveCacheStatus:
    order: int
    name: str
    has_cache: bool = False
    cache_time: Optional[datetime] = None
    file_count: int = 0
    is_next_refresh: bool = False


@dataclass(slots=True)
class CacheStatus:
    """Snapshot/cursor overview for all configured drives."""

    drives: list[DriveCacheStatus] = field(default_factory=list)
    next_refresh_drive: int = 0
    refresh_hour: int = 4
    current_time: Optional[datetime] = None
    browsing_ttl: int = 0
    snapshot_ttl: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "drives": [
                {
                    "index": d.order,
                    "name": d.name,
                    "hasCache": d.has_cache,
                    "cacheTime": to_rfc3339(d.cache_time) if d.cache_time else None,
                    "fileCount": d.file_count,
                    "isNextCron": d.is_next_refresh,
                }
                for d in self.drives
            ],
            "nextCronDrive": self.next_refresh_drive,
            "cronUpdateHour": self.refresh_hour,
            "currentTime": to_rfc3339(self.current_time) if self.current_time else None,
            "cacheConfig": {
                "browsing_ttl": self.browsing_ttl,
                "cron_ttl": self.snapshot_ttl,
            },
        }


class TickAction(str, Enum):
    """What one scheduled refresh tick did."""

    REFRESHED = "refreshed"
    SKIPPED_FRESH = "skipped_fresh"
    POSTPONED = "postponed"
    INIT_FAILED = "init_failed"
    REFRESH_FAILED = "refresh_failed"
    NOT_CONFIGURED = "not_configured"


@dataclass(slots=True, frozen=True)
class TickResult:
    action: TickAction
    drive_order: Optional[int] = None
    next_cursor: Optional[int] = None
