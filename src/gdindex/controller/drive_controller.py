"""Google Drive API controller: the storage client the index core talks to."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from googleapiclient.errors import HttpError

from gdindex.auth import AuthInfo, OAuthClient
from gdindex.errors import (
    ApiError,
    HttpErrorInfo,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    map_http_error,
)
from gdindex.models import ChildrenPage, Node
from gdindex.util.log import get_logger
from gdindex.util.mime import FOLDER_MIME, PASSWORD_FILENAME, SHORTCUT_MIME
from gdindex.util.paths import escape_query_value

from .fields import FIND_FIELDS, LIST_FIELDS, LIST_ORDER_BY, NODE_FIELDS, SHARE_DRIVE_FIELDS

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 200

logger = get_logger(__name__)


@dataclass(frozen=True)
class _RetryPolicy:
    max_attempts: int = 3
    delay_step_sec: float = 0.8


class GoogleDriveController:
    """
    Drive API controller.

    Notes:
        - Nodes are returned raw: shortcut rewriting is the caller's concern.
        - All-drives support is applied to every request so shared drives
          resolve the same way as the user's own drive.
    """

    def __init__(self, auth_info: AuthInfo) -> None:
        self._retry_policy = _RetryPolicy()
        self._service = OAuthClient(auth_info).build_drive_service(ensure_valid=True)

    @classmethod
    def from_service(cls, service: Any) -> "GoogleDriveController":
        """Create controller from a pre-built Drive service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._retry_policy = _RetryPolicy()
        obj._service = service
        return obj

    # ----------------------------
    # Public API
    # ----------------------------
    def get(self, node_id: str) -> Node:
        """Fetch one raw node. Raises NotFoundError if it does not exist."""
        req = self._service.files().get(
            fileId=node_id,
            fields=NODE_FIELDS,
            supportsAllDrives=True,
        )
        return Node.from_dict(self._execute(req.execute))

    def list_children_page(
        self,
        parent_id: str,
        *,
        page_token: Optional[str] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ChildrenPage:
        """List one page of non-trashed children, folders first, then by name."""
        kwargs: dict[str, Any] = {
            "q": _build_children_query(parent_id),
            "fields": LIST_FIELDS,
            "orderBy": LIST_ORDER_BY,
            "pageSize": page_size,
            "supportsAllDrives": True,
            "includeItemsFromAllDrives": True,
        }
        if page_token:
            kwargs["pageToken"] = page_token

        req = self._service.files().list(**kwargs)
        data = self._execute(req.execute)
        return ChildrenPage(
            nodes=[Node.from_dict(f) for f in data.get("files", []) or []],
            next_page_token=data.get("nextPageToken") or None,
        )

    def find_child(
        self,
        parent_id: str,
        name: str,
        *,
        folders_only: bool = False,
    ) -> Optional[Node]:
        """Return the first non-trashed child called `name`, or None."""
        q = f"'{parent_id}' in parents and name = '{escape_query_value(name)}' and trashed = false"
        if folders_only:
            q += f" and (mimeType = '{FOLDER_MIME}' or mimeType = '{SHORTCUT_MIME}')"

        req = self._service.files().list(
            q=q,
            fields=FIND_FIELDS,
            supportsAllDrives=True,
            includeItemsFromAllDrives=True,
        )
        data = self._execute(req.execute)
        files = data.get("files", []) or []
        if not files:
            return None
        return Node.from_dict(files[0])

    def get_share_drive(self, drive_id: str) -> Optional[dict[str, Any]]:
        """Return the shared drive resource, or None if `drive_id` is not one."""
        req = self._service.drives().get(driveId=drive_id, fields=SHARE_DRIVE_FIELDS)
        try:
            data = self._execute(req.execute)
        except NotFoundError:
            return None
        if not isinstance(data, dict) or not data.get("id"):
            return None
        return data

    # ----------------------------
    # Internals
    # ----------------------------
    def _execute(self, func: Callable[[], T]) -> T:
        policy = self._retry_policy
        for attempt in range(1, policy.max_attempts + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < policy.max_attempts:
                    delay = policy.delay_step_sec * attempt
                    logger.warning(
                        "drive_request_retry",
                        attempt=attempt,
                        delay=delay,
                        error=str(mapped),
                    )
                    time.sleep(delay)
                    continue
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        return isinstance(exc, (RateLimitError, QuotaExceededError, PermissionError))

    def _map_exception(self, exc: Exception) -> Exception:
        if isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


def _build_children_query(parent_id: str) -> str:
    return f"'{parent_id}' in parents and trashed = false and name != '{PASSWORD_FILENAME}'"


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = {}
        err = payload.get("error", {}) if isinstance(payload, dict) else {}
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
