"""Authentication information for gdindex."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_REQUIRED_KEYS: dict[str, tuple[str, ...]] = {
    "refresh_token": ("client_id", "client_secret", "refresh_token"),
    "oauth": ("client_secrets_file", "token_file"),
}


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Authentication information.

    Supported kinds:
        kind = "refresh_token"
            data must include client_id, client_secret, refresh_token
            (the long-lived credential a deployed index runs with).
        kind = "oauth"
            data must include client_secrets_file, token_file
            (interactive installed-app flow, used to mint a refresh token).
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind not in _REQUIRED_KEYS:
            raise ValueError(
                f"AuthInfo.kind must be one of {sorted(_REQUIRED_KEYS)}, got {self.kind!r}"
            )

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in _REQUIRED_KEYS[self.kind]:
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @property
    def client_id(self) -> str:
        return str(self.data["client_id"])

    @property
    def client_secret(self) -> str:
        return str(self.data["client_secret"])

    @property
    def refresh_token(self) -> str:
        return str(self.data["refresh_token"])

    @property
    def client_secrets_file(self) -> str:
        """Path to OAuth client secrets JSON."""
        return str(self.data["client_secrets_file"])

    @property
    def token_file(self) -> str:
        """Path to OAuth token JSON (authorized user)."""
        return str(self.data["token_file"])
