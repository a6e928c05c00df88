"""OAuth client utilities for gdindex."""

from __future__ import annotations

import os
import threading
from typing import Optional, Sequence

from gdindex.errors import AuthError, InvalidArgumentError
from gdindex.util.log import get_logger

from .auth_info import AuthInfo

TOKEN_URI = "https://oauth2.googleapis.com/token"
DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive.readonly",)

logger = get_logger(__name__)


class OAuthClient:
    """
    Create and cache OAuth credentials and Drive API service objects.

    The credentials object is kept for the client's lifetime; the access
    token is only refreshed once google-auth reports it as no longer valid.
    """

    def __init__(self, auth_info: AuthInfo) -> None:
        self._auth_info = auth_info
        self._creds = None
        self._lock = threading.Lock()

    def get_credentials(self, scopes: Sequence[str] = DEFAULT_SCOPES, ensure_valid: bool = True):
        """
        Return OAuth credentials for the given scopes.

        Args:
            scopes: OAuth scopes.
            ensure_valid: If True, refresh credentials when they are not valid.

        Returns:
            google.oauth2.credentials.Credentials

        Raises:
            AuthError: on load/refresh/flow failures.
            InvalidArgumentError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")

        with self._lock:
            if self._creds is None:
                if self._auth_info.kind == "refresh_token":
                    self._creds = self._credentials_from_refresh_token(scopes)
                else:
                    self._creds = self._credentials_from_token_file(scopes, ensure_valid)

            if ensure_valid:
                self._ensure_valid(self._creds)
            return self._creds

    def get_access_token(self, scopes: Sequence[str] = DEFAULT_SCOPES) -> str:
        """Return a bearer token, refreshing only after the known expiry."""
        creds = self.get_credentials(scopes=scopes, ensure_valid=True)
        token: Optional[str] = getattr(creds, "token", None)
        if not token:
            raise AuthError("OAuth credentials did not yield an access token")
        return token

    def build_drive_service(self, scopes: Sequence[str] = DEFAULT_SCOPES, ensure_valid: bool = True):
        """
        Build a Drive API service resource.

        Returns:
            googleapiclient.discovery.Resource
        """
        try:
            from googleapiclient.discovery import build
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-api-python-client is not available",
                details={"hint": "Install google-api-python-client"},
                cause=exc,
            ) from exc

        creds = self.get_credentials(scopes=scopes, ensure_valid=ensure_valid)
        try:
            return build("drive", "v3", credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc

    # ----------------------------
    # Internals
    # ----------------------------
    def _credentials_from_refresh_token(self, scopes: Sequence[str]):
        from google.oauth2.credentials import Credentials

        return Credentials(
            token=None,
            refresh_token=self._auth_info.refresh_token,
            token_uri=TOKEN_URI,
            client_id=self._auth_info.client_id,
            client_secret=self._auth_info.client_secret,
            scopes=list(scopes),
        )

    def _credentials_from_token_file(self, scopes: Sequence[str], ensure_valid: bool):
        from google.oauth2.credentials import Credentials

        token_file = self._auth_info.token_file
        if os.path.exists(token_file):
            try:
                return Credentials.from_authorized_user_file(token_file, scopes=list(scopes))
            except Exception as exc:
                raise AuthError(
                    "Failed to load token_file",
                    details={"token_file": token_file},
                    cause=exc,
                ) from exc

        if not ensure_valid:
            raise AuthError("token_file does not exist", details={"token_file": token_file})

        return self._run_installed_app_flow(scopes)

    def _run_installed_app_flow(self, scopes: Sequence[str]):
        from google_auth_oauthlib.flow import InstalledAppFlow

        client_secrets = self._auth_info.client_secrets_file
        try:
            flow = InstalledAppFlow.from_client_secrets_file(client_secrets, scopes=list(scopes))
            creds = flow.run_local_server(port=0)
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={"client_secrets_file": client_secrets},
                cause=exc,
            ) from exc
        self._save_credentials(creds)
        return creds

    def _ensure_valid(self, creds) -> None:
        if creds.valid:
            return
        if not creds.refresh_token:
            raise AuthError("OAuth credentials are invalid and cannot be refreshed")

        from google.auth.transport.requests import Request

        try:
            creds.refresh(Request())
        except Exception as exc:
            raise AuthError("Failed to refresh OAuth credentials", cause=exc) from exc

        logger.info("access_token_refreshed", expiry=str(creds.expiry))
        if self._auth_info.kind == "oauth":
            self._save_credentials(creds)

    def _save_credentials(self, creds) -> None:
        token_file = self._auth_info.token_file
        token_dir = os.path.dirname(token_file)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)

        try:
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
