"""gdindex public API."""

from __future__ import annotations

from gdindex.auth import AuthInfo, OAuthClient
from gdindex.cache import (
    CacheKey,
    CacheOrchestrator,
    CloudflareKVStore,
    KVStore,
    MemoryKVStore,
    SnapshotFreshness,
)
from gdindex.config import IndexConfig, parse_drive_roots
from gdindex.controller import GoogleDriveController
from gdindex.drive import (
    DriveIndex,
    DriveRegistry,
    PathResolver,
    ScheduledRefresher,
    TreeEnumerator,
    UserDriveRootId,
)
from gdindex.errors import (
    ApiError,
    AuthError,
    CacheError,
    ConfigurationError,
    GDIndexError,
    HttpErrorInfo,
    InitializationError,
    InvalidArgumentError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    map_http_error,
)
from gdindex.models import (
    CacheStatus,
    ClearResult,
    DriveRoot,
    ListPage,
    Node,
    RootType,
    SearchResult,
    TickAction,
    TickResult,
    TreeEntry,
    TreeSnapshot,
)
from gdindex.util.log import get_logger, setup_logging

__all__ = [
    # High-level
    "DriveRegistry",
    "DriveIndex",
    "ScheduledRefresher",
    "IndexConfig",
    "parse_drive_roots",
    # Core
    "PathResolver",
    "TreeEnumerator",
    "UserDriveRootId",
    "CacheOrchestrator",
    "CacheKey",
    "SnapshotFreshness",
    # Storage / KV
    "GoogleDriveController",
    "KVStore",
    "MemoryKVStore",
    "CloudflareKVStore",
    # Auth
    "AuthInfo",
    "OAuthClient",
    # Models
    "Node",
    "DriveRoot",
    "RootType",
    "TreeEntry",
    "TreeSnapshot",
    "SearchResult",
    "ListPage",
    "ClearResult",
    "CacheStatus",
    "TickAction",
    "TickResult",
    # Logging
    "setup_logging",
    "get_logger",
    # Errors
    "GDIndexError",
    "ConfigurationError",
    "InitializationError",
    "InvalidStateError",
    "CacheError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
]
