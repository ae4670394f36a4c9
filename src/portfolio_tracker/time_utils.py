"""Datetime normalization helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import pandas as pd


def to_utc_timestamp(value: object) -> pd.Timestamp:
    """Normalize datetime-like values to UTC pandas Timestamp."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def now_utc() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def year_fraction(start: object, end: object, days_per_year: float = 365.0) -> float:
    """Elapsed time between two instants expressed in years."""
    delta = to_utc_timestamp(end) - to_utc_timestamp(start)
    return delta.total_seconds() / (days_per_year * 86_400.0)


def days_between(start: object, end: object) -> int:
    """Whole days elapsed from start to end (negative if end precedes start)."""
    delta = to_utc_timestamp(end) - to_utc_timestamp(start)
    return int(delta.days)
