"""Cache layer: structured keys, KV stores and the orchestrator."""

from __future__ import annotations

from .cloudflare import CloudflareKVStore
from .freshness import SnapshotFreshness, classify_snapshot, is_fresh_for_today
from .keys import (
    REFRESH_CURSOR_KEY,
    CacheKey,
    KeyKind,
    TtlClass,
    all_files_key,
    dir_id_key,
    drive_prefixes,
    file_key,
    kind_prefix,
    list_key,
    path_by_id_key,
    path_prefix,
    search_key,
)
from .orchestrator import CacheOrchestrator
from .store import MIN_TTL_SECONDS, KVListResult, KVStore, MemoryKVStore

__all__ = [
    "CacheKey",
    "KeyKind",
    "TtlClass",
    "REFRESH_CURSOR_KEY",
    "file_key",
    "list_key",
    "all_files_key",
    "search_key",
    "path_by_id_key",
    "dir_id_key",
    "kind_prefix",
    "drive_prefixes",
    "path_prefix",
    "KVStore",
    "KVListResult",
    "MemoryKVStore",
    "MIN_TTL_SECONDS",
    "CloudflareKVStore",
    "CacheOrchestrator",
    "SnapshotFreshness",
    "classify_snapshot",
    "is_fresh_for_today",
]
