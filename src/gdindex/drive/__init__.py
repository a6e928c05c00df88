"""Path resolution, enumeration and drive lifecycle."""

from __future__ import annotations

from .enumerator import TreeEnumerator
from .index import DriveIndex
from .refresher import ScheduledRefresher
from .registry import ALL_DRIVES, DriveRegistry
from .resolver import PathResolver, Reached, Unanchored, UserDriveRootId
from .shortcuts import resolve_shortcut, resolve_shortcuts

__all__ = [
    "resolve_shortcut",
    "resolve_shortcuts",
    "PathResolver",
    "UserDriveRootId",
    "Reached",
    "Unanchored",
    "TreeEnumerator",
    "DriveIndex",
    "DriveRegistry",
    "ALL_DRIVES",
    "ScheduledRefresher",
]
