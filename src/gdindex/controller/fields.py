"""Field definitions for Google Drive API responses."""

from __future__ import annotations

NODE_FIELDS: str = (
    "parents,"
    "id,"
    "name,"
    "mimeType,"
    "modifiedTime,"
    "createdTime,"
    "fileExtension,"
    "size,"
    "shortcutDetails"
)

LIST_FIELDS: str = (
    "nextPageToken,files(id,name,mimeType,size,modifiedTime,parents,shortcutDetails)"
)

FIND_FIELDS: str = "files(id,name,mimeType,size,modifiedTime,parents,shortcutDetails)"

SHARE_DRIVE_FIELDS: str = "id,name"

LIST_ORDER_BY: str = "folder,name,modifiedTime desc"
