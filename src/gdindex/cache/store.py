"""Key-value store contract and the in-memory implementation."""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from gdindex.errors import InvalidArgumentError
from gdindex.util.time import now_utc

# Smallest expiration the backing stores accept.
MIN_TTL_SECONDS = 60


@dataclass(slots=True)
class KVListResult:
    keys: list[str] = field(default_factory=list)
    cursor: Optional[str] = None
    list_complete: bool = True


class KVStore(ABC):
    """
    Namespaced key -> JSON value store with per-key expiration.

    Implementations raise gdindex.errors.CacheError on backend failures.
    """

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the decoded JSON value, or None if absent/expired."""

    @abstractmethod
    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store a JSON-serializable value; ttl_seconds=None never expires."""

    @abstractmethod
    def list(self, prefix: str = "", cursor: Optional[str] = None, limit: int = 1000) -> KVListResult:
        """List key names starting with prefix, one page at a time."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a key; deleting a missing key is not an error."""


class MemoryKVStore(KVStore):
    """
    Thread-safe in-process store.

    Values are stored JSON-encoded so callers observe the same copy
    semantics as with a remote store.
    """

    def __init__(self, *, clock: Callable[[], datetime] = now_utc) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._data: dict[str, tuple[str, Optional[float]]] = {}

    def get(self, key: str) -> Any:
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return None
            return json.loads(entry[0])

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        if ttl_seconds is not None and ttl_seconds < MIN_TTL_SECONDS:
            raise InvalidArgumentError(
                f"ttl_seconds must be at least {MIN_TTL_SECONDS}",
                details={"key": key, "ttl_seconds": ttl_seconds},
            )
        payload = json.dumps(value)
        expires_at = None
        if ttl_seconds is not None:
            expires_at = self._clock().timestamp() + ttl_seconds
        with self._lock:
            self._data[key] = (payload, expires_at)

    def list(self, prefix: str = "", cursor: Optional[str] = None, limit: int = 1000) -> KVListResult:
        with self._lock:
            names = sorted(k for k in list(self._data) if k.startswith(prefix) and self._live_entry(k))

        # The cursor is the last key of the previous page, so deleting listed
        # keys between calls does not shift the next page.
        if cursor:
            names = [k for k in names if k > cursor]
        page = names[:limit]
        complete = len(names) <= limit
        return KVListResult(
            keys=page,
            cursor=None if complete else page[-1],
            list_complete=complete,
        )

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def _live_entry(self, key: str) -> Optional[tuple[str, Optional[float]]]:
        entry = self._data.get(key)
        if entry is None:
            return None
        expires_at = entry[1]
        if expires_at is not None and expires_at <= self._clock().timestamp():
            del self._data[key]
            return None
        return entry
