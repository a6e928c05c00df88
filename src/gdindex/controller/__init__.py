"""Storage client exports for gdindex."""

from __future__ import annotations

from .drive_controller import GoogleDriveController

__all__ = ["GoogleDriveController"]
