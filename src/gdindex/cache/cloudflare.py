"""Cloudflare Workers KV namespace accessed through the Cloudflare REST API."""

from __future__ import annotations

import json
from typing import Any, Optional
from urllib.parse import quote

import requests

from gdindex.errors import CacheError

from .store import KVListResult, KVStore

API_BASE = "https://api.cloudflare.com/client/v4"
DEFAULT_TIMEOUT_SEC = 30.0


class CloudflareKVStore(KVStore):
    """
    KV store backed by a Workers KV namespace.

    Keys are URL-encoded into the request path; values are written as JSON
    text, matching what a Worker reading the same namespace with
    `get(key, "json")` expects.
    """

    def __init__(
        self,
        account_id: str,
        namespace_id: str,
        api_token: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self._base = f"{API_BASE}/accounts/{account_id}/storage/kv/namespaces/{namespace_id}"
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {api_token}"})
        self._timeout = timeout

    def get(self, key: str) -> Any:
        resp = self._request("GET", self._value_url(key))
        if resp.status_code == 404:
            return None
        self._raise_for_status(resp, "get", key)
        try:
            return json.loads(resp.text)
        except ValueError:
            # Values written by other tools may be plain strings.
            return resp.text

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        params = {"expiration_ttl": str(ttl_seconds)} if ttl_seconds is not None else None
        resp = self._request(
            "PUT",
            self._value_url(key),
            params=params,
            data=json.dumps(value).encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )
        self._raise_for_status(resp, "put", key)

    def list(self, prefix: str = "", cursor: Optional[str] = None, limit: int = 1000) -> KVListResult:
        params: dict[str, Any] = {"limit": limit}
        if prefix:
            params["prefix"] = prefix
        if cursor:
            params["cursor"] = cursor

        resp = self._request("GET", f"{self._base}/keys", params=params)
        self._raise_for_status(resp, "list", prefix)
        payload = resp.json()

        keys = [item["name"] for item in payload.get("result") or [] if "name" in item]
        next_cursor = (payload.get("result_info") or {}).get("cursor") or None
        return KVListResult(keys=keys, cursor=next_cursor, list_complete=next_cursor is None)

    def delete(self, key: str) -> None:
        resp = self._request("DELETE", self._value_url(key))
        if resp.status_code == 404:
            return
        self._raise_for_status(resp, "delete", key)

    # ----------------------------
    # Internals
    # ----------------------------
    def _value_url(self, key: str) -> str:
        return f"{self._base}/values/{quote(key, safe='')}"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            raise CacheError(
                f"Workers KV {method} request failed",
                details={"url": url},
                cause=exc,
            ) from exc

    def _raise_for_status(self, resp: requests.Response, op: str, key: str) -> None:
        if 200 <= resp.status_code < 300:
            return
        raise CacheError(
            f"Workers KV {op} failed with HTTP {resp.status_code}",
            details={"key": key, "status_code": resp.status_code, "body": resp.text[:500]},
        )
