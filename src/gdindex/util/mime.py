from __future__ import annotations

FOLDER_MIME: str = "application/vnd.google-apps.folder"
SHORTCUT_MIME: str = "application/vnd.google-apps.shortcut"

# Reserved filename hidden from every listing (per-folder password marker).
PASSWORD_FILENAME: str = ".password"


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def is_shortcut(mime_type: str) -> bool:
    return mime_type == SHORTCUT_MIME

