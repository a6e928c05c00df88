from .log import get_logger, setup_logging
from .mime import (
    FOLDER_MIME,
    PASSWORD_FILENAME,
    SHORTCUT_MIME,
    is_folder,
    is_shortcut,
)
from .paths import (
    child_path,
    escape_query_value,
    is_dir_path,
    normalize_path,
    split_parent,
    split_segments,
)
from .time import (
    REFERENCE_UTC_OFFSET_HOURS,
    normalize_dt,
    now_utc,
    parse_rfc3339,
    reference_tz,
    to_reference_time,
    to_rfc3339,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "FOLDER_MIME",
    "SHORTCUT_MIME",
    "PASSWORD_FILENAME",
    "is_folder",
    "is_shortcut",
    "is_dir_path",
    "split_segments",
    "normalize_path",
    "split_parent",
    "child_path",
    "escape_query_value",
    "REFERENCE_UTC_OFFSET_HOURS",
    "now_utc",
    "parse_rfc3339",
    "to_rfc3339",
    "normalize_dt",
    "reference_tz",
    "to_reference_time",
]
