"""
Live snapshot: latest reading per series inside the lookback window.

Duplicate timestamps: when several readings of one series share the newest
timestamp, the one fetched last (highest store order) wins. Callers must not
rely on which of them is reported.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ...core.errors import ValidationError
from .constants import DEFAULT_SNAPSHOT_LIMIT, SNAPSHOT_LOOKBACK_SECONDS
from .freshness import FreshnessStatus, clamp_age, classify
from .store import Reading, SeriesStore

logger = logging.getLogger("bacmon.server")


@dataclass(frozen=True)
class SeriesSnapshot:
    reading: Reading
    age_seconds: float
    freshness_status: FreshnessStatus


def latest_per_series(readings: Iterable[Reading]) -> Dict[str, Reading]:
    """Fold readings to the newest one per series key in a single pass."""
    latest: Dict[str, Reading] = {}
    for reading in readings:
        best = latest.get(reading.series_key)
        if best is None or reading.timestamp >= best.timestamp:
            latest[reading.series_key] = reading
    return latest


def build_snapshot(
    readings: Iterable[Reading],
    now: float,
    search: Optional[str] = None,
    limit: int = DEFAULT_SNAPSHOT_LIMIT
) -> List[SeriesSnapshot]:
    """
    Latest reading per series, filtered by a case-insensitive substring of the
    effective name, ordered by series key and capped at `limit`.
    """
    latest = latest_per_series(readings)
    needle = (search or "").strip().lower()

    snapshots = []
    for series_key in sorted(latest):
        if len(snapshots) >= limit:
            break
        reading = latest[series_key]
        if needle and needle not in reading.name.lower():
            continue
        age = clamp_age(now, reading.timestamp)
        snapshots.append(SeriesSnapshot(reading, age, classify(age)))
    return snapshots


def get_snapshot(
    store: SeriesStore,
    now: float,
    search: Optional[str] = None,
    limit: int = DEFAULT_SNAPSHOT_LIMIT
) -> List[SeriesSnapshot]:
    """Fetch the lookback window and build the snapshot at instant `now`."""
    if limit < 1:
        raise ValidationError("limit", "limit must be a positive integer")

    # Upper bound left open so readings stamped ahead of our clock still show up
    readings = store.readings(now - SNAPSHOT_LOOKBACK_SECONDS)
    logger.debug(f"snapshot: {len(readings)} readings in lookback window")
    return build_snapshot(readings, now, search=search, limit=limit)


def freshness_counts(snapshots: Iterable[SeriesSnapshot]) -> Dict[FreshnessStatus, int]:
    counts = Counter(s.freshness_status for s in snapshots)
    return {status: counts.get(status, 0) for status in FreshnessStatus}
