"""Whole-drive enumeration results used for search."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from gdindex.util.time import parse_rfc3339, to_rfc3339

from .node import Node


@dataclass(slots=True, frozen=True)
class TreeEntry:
    """A node together with its root-relative path."""

    node: Node
    path: str

    def to_dict(self) -> dict[str, Any]:
        data = self.node.to_dict()
        data["path"] = self.path
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TreeEntry:
        return cls(node=Node.from_dict(data), path=str(data.get("path") or ""))


@dataclass(slots=True)
class TreeSnapshot:
    """
    Flattened enumeration of a whole drive (or sub-folder tree).

    Snapshots are regenerated wholesale; they are never patched.
    """

    files: list[TreeEntry]
    generated_at: datetime
    force_updated: bool = False

    @property
    def total_files(self) -> int:
        return len(self.files)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "files": [entry.to_dict() for entry in self.files],
            "last_updated": to_rfc3339(self.generated_at),
            "total_files": self.total_files,
        }
        if self.force_updated:
            data["force_updated"] = True
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Optional[TreeSnapshot]:
        """Parse a cached snapshot; returns None for malformed payloads."""
        if not isinstance(data, dict) or not isinstance(data.get("files"), list):
            return None
        try:
            generated_at = parse_rfc3339(data.get("last_updated"))
        except (TypeError, ValueError):
            return None
        files = [TreeEntry.from_dict(f) for f in data["files"] if isinstance(f, dict)]
        return cls(
            files=files,
            generated_at=generated_at,
            force_updated=bool(data.get("force_updated", False)),
        )


@dataclass(slots=True)
class SearchResult:
    """Filtered snapshot entries for one query."""

    files: list[TreeEntry] = field(default_factory=list)
    total_files: int = 0
    cache_timestamp: Optional[datetime] = None

    @property
    def filtered_count(self) -> int:
        return len(self.files)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": {
                "files": [entry.to_dict() for entry in self.files],
                "cache_info": {
                    "total_files": self.total_files,
                    "filtered_count": self.filtered_count,
                    "cache_timestamp": (
                        to_rfc3339(self.cache_timestamp) if self.cache_timestamp else None
                    ),
                },
            }
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional[SearchResult]:
        if not isinstance(data, dict) or not isinstance(data.get("data"), dict):
            return None
        body = data["data"]
        info = body.get("cache_info") or {}
        stamp = info.get("cache_timestamp")
        try:
            cache_timestamp = parse_rfc3339(stamp) if stamp else None
        except ValueError:
            cache_timestamp = None
        files = [TreeEntry.from_dict(f) for f in body.get("files") or [] if isinstance(f, dict)]
        return cls(
            files=files,
            total_files=int(info.get("total_files") or len(files)),
            cache_timestamp=cache_timestamp,
        )
