"""Time-of-day freshness policy for drive snapshots."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from gdindex.models import TreeSnapshot
from gdindex.util.time import REFERENCE_UTC_OFFSET_HOURS, to_reference_time


class SnapshotFreshness(str, Enum):
    """
    FRESH:    generated today (reference zone) at or after the refresh hour.
    POSTPONE: not fresh for today, but a snapshot exists and the refresh hour
              has not been reached yet; keep serving it.
    STALE:    missing, or not fresh for today and the refresh hour has passed.
    """

    FRESH = "fresh"
    POSTPONE = "postpone"
    STALE = "stale"


def is_fresh_for_today(
    generated_at: datetime,
    now: datetime,
    *,
    refresh_hour: int,
    utc_offset_hours: int = REFERENCE_UTC_OFFSET_HOURS,
) -> bool:
    generated = to_reference_time(generated_at, utc_offset_hours)
    current = to_reference_time(now, utc_offset_hours)
    return generated.date() == current.date() and generated.hour >= refresh_hour


def classify_snapshot(
    snapshot: Optional[TreeSnapshot],
    now: datetime,
    *,
    refresh_hour: int,
    utc_offset_hours: int = REFERENCE_UTC_OFFSET_HOURS,
) -> SnapshotFreshness:
    if snapshot is None:
        return SnapshotFreshness.STALE

    if is_fresh_for_today(
        snapshot.generated_at,
        now,
        refresh_hour=refresh_hour,
        utc_offset_hours=utc_offset_hours,
    ):
        return SnapshotFreshness.FRESH

    if to_reference_time(now, utc_offset_hours).hour < refresh_hour:
        return SnapshotFreshness.POSTPONE

    return SnapshotFreshness.STALE
