"""
Freshness classification for readings.

Pure functions over ages in seconds; no store access.
"""

from enum import Enum

from .constants import FRESH_MAX_AGE, RECENT_MAX_AGE


class FreshnessStatus(str, Enum):
    FRESH = "fresh"
    RECENT = "recent"
    STALE = "stale"


def clamp_age(now: float, timestamp: float) -> float:
    """Age of a reading at `now`. Readings from the future (clock skew) are age 0."""
    return max(0.0, now - timestamp)


def classify(age_seconds: float) -> FreshnessStatus:
    """
    fresh:  age < 60
    recent: 60 <= age < 300
    stale:  age >= 300
    Negative ages fall into `fresh`.
    """
    if age_seconds < FRESH_MAX_AGE:
        return FreshnessStatus.FRESH
    elif age_seconds < RECENT_MAX_AGE:
        return FreshnessStatus.RECENT
    return FreshnessStatus.STALE


def is_data_active(recent_count: int) -> bool:
    """True iff at least one reading arrived in the trailing hour."""
    return recent_count > 0
