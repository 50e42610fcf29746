"""
Store health: cardinality, footprint, throughput and per-series rollups.

The total row count is the store's own estimate and may lag under heavy writes.
Everything else covers the trailing day only.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .constants import DATA_ACTIVE_WINDOW_SECONDS, HEALTH_TOP_SERIES, HEALTH_WINDOW_SECONDS
from .freshness import FreshnessStatus, clamp_age, classify, is_data_active
from .store import SeriesRollup, SeriesStore

logger = logging.getLogger("bacmon.server")


@dataclass
class HealthSnapshot:
    total_records: int
    unique_points: int
    oldest_timestamp: float
    newest_timestamp: float
    database_size: str
    table_size: str
    index_size: str
    data_rate: float
    data_active: bool
    newest_age_seconds: Optional[float]
    freshness_status: FreshnessStatus
    timestamp: float
    point_stats: List[SeriesRollup] = field(default_factory=list)


def get_health(store: SeriesStore, now: float) -> HealthSnapshot:
    """Aggregate store health at instant `now`. An empty store yields zeros."""
    window_start = now - HEALTH_WINDOW_SECONDS

    total_records = store.approximate_count()
    summary = store.window_summary(window_start, None,
                                   recent_since=now - DATA_ACTIVE_WINDOW_SECONDS)
    footprint = store.storage_footprint()
    rollups = store.series_rollups(window_start, None, limit=HEALTH_TOP_SERIES)

    if summary.newest is not None:
        newest_age = clamp_age(now, summary.newest)
        freshness = classify(newest_age)
    else:
        newest_age = None
        freshness = FreshnessStatus.STALE

    health = HealthSnapshot(
        total_records=total_records,
        unique_points=summary.unique_points,
        oldest_timestamp=summary.oldest if summary.oldest is not None else now,
        newest_timestamp=summary.newest if summary.newest is not None else now,
        database_size=footprint.database_size,
        table_size=footprint.table_size,
        index_size=footprint.index_size,
        data_rate=summary.recent_count / 60,  # records per minute over the last hour
        data_active=is_data_active(summary.recent_count),
        newest_age_seconds=newest_age,
        freshness_status=freshness,
        timestamp=now,
        point_stats=rollups,
    )
    logger.debug(f"health: {health.unique_points} points, {summary.recent_count} readings in last hour")
    return health
