"""
Structured cache keys.

Every persisted artifact is addressed by a CacheKey; the string form is
produced in exactly one place (CacheKey.serialize) so prefixes used for
invalidation always line up with the keys that were written.

    file:{order}:{path}
    list:{order}:{path}:{page_index}:{page_token}
    all_files:{order}:{root_id}
    search:{order}:{query}:{page_token}
    path_by_id:{order}:{node_id}
    dirid:{order}:{parent_id}:{child_name}

Variable parts have '%' and ':' percent-encoded, so a path or name that
contains a colon can never spill into the next field.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Round-robin cursor of the scheduled refresher (not drive-scoped).
REFRESH_CURSOR_KEY = "cron_next_drive_index"


class KeyKind(str, Enum):
    FILE = "file"
    LIST = "list"
    ALL_FILES = "all_files"
    SEARCH = "search"
    PATH_BY_ID = "path_by_id"
    DIR_ID = "dirid"


class TtlClass(str, Enum):
    BROWSING = "browsing"
    SNAPSHOT = "snapshot"


def _escape(part: str) -> str:
    return part.replace("%", "%25").replace(":", "%3A")


@dataclass(frozen=True)
class CacheKey:
    kind: KeyKind
    order: int
    parts: tuple[str, ...]

    @property
    def ttl_class(self) -> TtlClass:
        if self.kind is KeyKind.ALL_FILES:
            return TtlClass.SNAPSHOT
        return TtlClass.BROWSING

    def serialize(self) -> str:
        return ":".join([self.kind.value, str(self.order), *(_escape(p) for p in self.parts)])

    def __str__(self) -> str:
        return self.serialize()


def file_key(order: int, path: str) -> CacheKey:
    return CacheKey(KeyKind.FILE, order, (path,))


def list_key(order: int, path: str, page_index: int, page_token: Optional[str]) -> CacheKey:
    return CacheKey(KeyKind.LIST, order, (path, str(page_index), page_token or ""))


def all_files_key(order: int, root_id: str) -> CacheKey:
    return CacheKey(KeyKind.ALL_FILES, order, (root_id,))


def search_key(order: int, query: str, page_token: Optional[str] = None) -> CacheKey:
    return CacheKey(KeyKind.SEARCH, order, (query, page_token or ""))


def path_by_id_key(order: int, node_id: str) -> CacheKey:
    return CacheKey(KeyKind.PATH_BY_ID, order, (node_id,))


def dir_id_key(order: int, parent_id: str, name: str) -> CacheKey:
    return CacheKey(KeyKind.DIR_ID, order, (parent_id, name))


def kind_prefix(kind: KeyKind, order: int) -> str:
    return f"{kind.value}:{order}:"


def drive_prefixes(order: int) -> list[str]:
    """Prefixes covering every key written for one drive."""
    return [kind_prefix(kind, order) for kind in KeyKind]


def path_prefix(order: int, path: str) -> str:
    """
    Prefix of the keys that describe one path.

    Directory paths map to all of their listing pages (and, by prefix, the
    listings below them); file paths map to their single-file metadata.
    """
    if path.endswith("/"):
        return kind_prefix(KeyKind.LIST, order) + _escape(path)
    return kind_prefix(KeyKind.FILE, order) + _escape(path)
