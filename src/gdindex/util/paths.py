"""Helpers for '/'-rooted drive paths."""

from __future__ import annotations

from urllib.parse import unquote


def is_dir_path(path: str) -> bool:
    return path.endswith("/")


def split_segments(path: str) -> list[str]:
    """Split a path into decoded, non-empty name segments."""
    return [unquote(part) for part in path.split("/") if part]


def normalize_path(path: str) -> str:
    """
    Return the canonical form of a path.

    Segments are URL-decoded, empty segments dropped; a leading '/' is
    always present and a trailing '/' is kept only when the input had one.
    """
    segments = split_segments(path or "/")
    if not segments:
        return "/"
    canonical = "/" + "/".join(segments)
    if is_dir_path(path):
        canonical += "/"
    return canonical


def split_parent(path: str) -> tuple[str, str]:
    """Split a file path into (parent directory path, decoded name)."""
    segments = split_segments(path)
    if not segments:
        return "/", ""
    name = segments.pop()
    parent = "/" + "".join(f"{s}/" for s in segments)
    return parent, name


def child_path(prefix: str, name: str, *, folder: bool) -> str:
    """Join a directory prefix and a child name; folders get a trailing '/'."""
    if not prefix.endswith("/"):
        prefix += "/"
    path = prefix + name
    return path + "/" if folder else path


def escape_query_value(value: str) -> str:
    """Escape a literal for embedding in a Drive `q` filter string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")
