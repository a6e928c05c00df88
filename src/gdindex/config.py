"""Index configuration and its environment loading."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from gdindex.auth import AuthInfo
from gdindex.errors import ConfigurationError
from gdindex.models import BasicAuth, DriveRoot


@dataclass(frozen=True)
class IndexConfig:
    """
    Settings shared by every drive index.

    TTLs are in seconds; refresh_hour is an hour of day in the reference
    zone (UTC + reference_utc_offset_hours).
    """

    roots: tuple[DriveRoot, ...] = field(default_factory=tuple)

    browsing_cache_ttl: int = 43200
    snapshot_cache_ttl: int = 86400
    min_cache_ttl: int = 60
    refresh_hour: int = 4
    reference_utc_offset_hours: int = 8

    files_list_page_size: int = 200
    enable_kv_cache: bool = True
    default_drive: int = 0
    write_workers: int = 4

    def __post_init__(self) -> None:
        if not 0 <= self.refresh_hour <= 23:
            raise ConfigurationError("refresh_hour must be between 0 and 23")
        if self.files_list_page_size <= 0:
            raise ConfigurationError("files_list_page_size must be positive")

    def require_roots(self) -> None:
        if not self.roots:
            raise ConfigurationError("No drive roots configured (DRIVE_ROOTS is empty)")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> IndexConfig:
        """
        Build config from environment variables.

        Required:
            DRIVE_ROOTS: JSON array of {id, name, user?, pass?, protect_file_link?}
        Optional:
            BROWSING_CACHE_TTL, SNAPSHOT_CACHE_TTL, REFRESH_HOUR,
            FILES_LIST_PAGE_SIZE, ENABLE_KV_CACHE, DEFAULT_DRIVE
        """
        env = os.environ if environ is None else environ
        raw_roots = env.get("DRIVE_ROOTS", "").strip()
        if not raw_roots:
            raise ConfigurationError("DRIVE_ROOTS environment variable is not set")

        return cls(
            roots=tuple(parse_drive_roots(raw_roots)),
            browsing_cache_ttl=_env_int(env, "BROWSING_CACHE_TTL", 43200),
            snapshot_cache_ttl=_env_int(env, "SNAPSHOT_CACHE_TTL", 86400),
            refresh_hour=_env_int(env, "REFRESH_HOUR", 4),
            files_list_page_size=_env_int(env, "FILES_LIST_PAGE_SIZE", 200),
            enable_kv_cache=env.get("ENABLE_KV_CACHE", "1").strip().lower() not in ("0", "false", "no"),
            default_drive=_env_int(env, "DEFAULT_DRIVE", 0),
        )


def parse_drive_roots(raw: str) -> list[DriveRoot]:
    """Parse the DRIVE_ROOTS JSON array. Raises ConfigurationError."""
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ConfigurationError(
            "DRIVE_ROOTS must be a valid single-line JSON array",
            cause=exc,
        ) from exc

    if not isinstance(data, list) or not data:
        raise ConfigurationError("DRIVE_ROOTS must be a non-empty JSON array")

    roots: list[DriveRoot] = []
    for order, item in enumerate(data):
        roots.append(_parse_root(order, item))
    return roots


def auth_info_from_env(environ: Optional[Mapping[str, str]] = None) -> AuthInfo:
    """Read CLIENT_ID / CLIENT_SECRET / REFRESH_TOKEN into an AuthInfo."""
    env = os.environ if environ is None else environ
    data = {
        "client_id": env.get("CLIENT_ID", ""),
        "client_secret": env.get("CLIENT_SECRET", ""),
        "refresh_token": env.get("REFRESH_TOKEN", ""),
    }
    try:
        return AuthInfo(kind="refresh_token", data=data)
    except ValueError as exc:
        raise ConfigurationError("Drive credentials are not configured", cause=exc) from exc


def cloudflare_store_from_env(environ: Optional[Mapping[str, str]] = None):
    """Return a CloudflareKVStore, or None when the KV namespace is not configured."""
    env = os.environ if environ is None else environ
    account_id = env.get("CF_ACCOUNT_ID", "").strip()
    namespace_id = env.get("CF_NAMESPACE_ID", "").strip()
    api_token = env.get("CF_API_TOKEN", "").strip()
    if not (account_id and namespace_id and api_token):
        return None

    from gdindex.cache.cloudflare import CloudflareKVStore

    return CloudflareKVStore(account_id, namespace_id, api_token)


def _parse_root(order: int, item: Any) -> DriveRoot:
    if not isinstance(item, dict):
        raise ConfigurationError(f"DRIVE_ROOTS[{order}] must be an object")

    root_id = item.get("id")
    if not isinstance(root_id, str) or not root_id.strip():
        raise ConfigurationError(f"DRIVE_ROOTS[{order}] has no 'id'")

    user = str(item.get("user") or "")
    password = str(item.get("pass") or "")
    return DriveRoot(
        order=order,
        root_id=root_id.strip(),
        name=str(item.get("name") or root_id),
        auth=BasicAuth(user=user, password=password) if (user or password) else None,
        protect_file_link=bool(item.get("protect_file_link", False)),
    )


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer", cause=exc) from exc
