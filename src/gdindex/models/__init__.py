"""Public model exports for gdindex."""

from __future__ import annotations

from .drive_root import BasicAuth, DriveRoot, RootType
from .node import ChildrenPage, Node, ShortcutTarget
from .results import (
    CacheStatus,
    ClearResult,
    DriveCacheStatus,
    ListPage,
    TickAction,
    TickResult,
)
from .snapshot import SearchResult, TreeEntry, TreeSnapshot

__all__ = [
    "Node",
    "ShortcutTarget",
    "ChildrenPage",
    "DriveRoot",
    "RootType",
    "BasicAuth",
    "TreeEntry",
    "TreeSnapshot",
    "SearchResult",
    "ListPage",
    "ClearResult",
    "CacheStatus",
    "DriveCacheStatus",
    "TickAction",
    "TickResult",
]
