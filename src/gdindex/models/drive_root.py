"""Configured drive roots."""

from __future__ import annotations

import base64
import binascii
import hmac
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RootType(str, Enum):
    """Structural classification of a drive's entry node."""

    USER_DRIVE = "user_drive"
    SHARE_DRIVE = "share_drive"
    SUB_FOLDER = "sub_folder"
    INVALID = "invalid"


@dataclass(slots=True, frozen=True)
class BasicAuth:
    user: str = ""
    password: str = ""


@dataclass(slots=True)
class DriveRoot:
    """
    One configured drive.

    root_id and root_type are resolved in place once by the path resolver
    (a shortcut root is replaced by its target folder id); everything else
    is fixed for the lifetime of the drive index.
    """

    order: int
    root_id: str
    name: str
    auth: Optional[BasicAuth] = None
    protect_file_link: bool = False
    root_type: RootType = RootType.INVALID

    @property
    def is_usable(self) -> bool:
        return self.root_type is not RootType.INVALID

    def authorize(self, authorization_header: Optional[str]) -> bool:
        """
        Check an HTTP `Authorization: Basic ...` header against this drive.

        Drives without credentials accept every request.
        """
        if self.auth is None or (not self.auth.user and not self.auth.password):
            return True
        if not authorization_header or not authorization_header.startswith("Basic "):
            return False

        try:
            decoded = base64.b64decode(authorization_header[6:], validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return False

        user, _, password = decoded.partition(":")
        return hmac.compare_digest(
            user.encode("utf-8"), self.auth.user.encode("utf-8")
        ) and hmac.compare_digest(password.encode("utf-8"), self.auth.password.encode("utf-8"))
