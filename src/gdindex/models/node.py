"""Data model for Drive items."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

from gdindex.util import mime
from gdindex.util.time import parse_rfc3339, to_rfc3339


@dataclass(slots=True, frozen=True)
class ShortcutTarget:
    """Where a shortcut node points."""

    id: str
    mime_type: str


@dataclass(slots=True, frozen=True)
class Node:
    """
    Immutable snapshot of a Drive file, folder or shortcut.

    Notes:
        - parents[0] is the primary parent used for path reconstruction.
        - is_shortcut is True only for nodes rewritten by the shortcut
          resolver; such nodes already carry the target's id and mime type.
    """

    id: str
    name: str
    mime_type: str
    parents: tuple[str, ...] = ()

    size: Optional[int] = None
    modified_time: Optional[datetime] = None
    created_time: Optional[datetime] = None
    file_extension: Optional[str] = None
    shortcut_target: Optional[ShortcutTarget] = None
    is_shortcut: bool = False

    @property
    def is_folder(self) -> bool:
        return mime.is_folder(self.mime_type)

    @property
    def is_raw_shortcut(self) -> bool:
        """True for an unresolved shortcut as returned by the Drive API."""
        return mime.is_shortcut(self.mime_type)

    def with_target_identity(self) -> Node:
        """Return a copy that exposes the shortcut target's id and mime type."""
        if self.shortcut_target is None:
            return self
        return replace(
            self,
            id=self.shortcut_target.id,
            mime_type=self.shortcut_target.mime_type,
            is_shortcut=True,
        )

    # ----------------------------
    # JSON (Drive API field names)
    # ----------------------------
    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "mimeType": self.mime_type,
        }
        if self.parents:
            data["parents"] = list(self.parents)
        if self.size is not None:
            data["size"] = str(self.size)
        if self.modified_time is not None:
            data["modifiedTime"] = to_rfc3339(self.modified_time)
        if self.created_time is not None:
            data["createdTime"] = to_rfc3339(self.created_time)
        if self.file_extension is not None:
            data["fileExtension"] = self.file_extension
        if self.shortcut_target is not None:
            data["shortcutDetails"] = {
                "targetId": self.shortcut_target.id,
                "targetMimeType": self.shortcut_target.mime_type,
            }
        if self.is_shortcut:
            data["isShortcut"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Node:
        """Build a Node from a Drive API `files` resource (or our own to_dict)."""
        parents = data.get("parents") or []

        details = data.get("shortcutDetails")
        target = None
        if isinstance(details, dict) and isinstance(details.get("targetId"), str):
            target = ShortcutTarget(
                id=details["targetId"],
                mime_type=str(details.get("targetMimeType") or ""),
            )

        ext = data.get("fileExtension")
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            mime_type=str(data.get("mimeType") or ""),
            parents=tuple(p for p in parents if isinstance(p, str)),
            size=_parse_size(data.get("size")),
            modified_time=_parse_time(data.get("modifiedTime")),
            created_time=_parse_time(data.get("createdTime")),
            file_extension=ext if isinstance(ext, str) else None,
            shortcut_target=target,
            is_shortcut=bool(data.get("isShortcut", False)),
        )


@dataclass(slots=True, frozen=True)
class ChildrenPage:
    """One page of a folder listing."""

    nodes: list[Node] = field(default_factory=list)
    next_page_token: Optional[str] = None


def _parse_size(value: Any) -> Optional[int]:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _parse_time(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        return parse_rfc3339(value)
    except ValueError:
        return None
