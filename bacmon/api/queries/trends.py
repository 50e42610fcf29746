"""
Trend extraction for a single series over a named relative window.

Full resolution: no resampling or downsampling, so long windows over fast
series return every stored reading.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ...core.errors import ValidationError
from .constants import DEFAULT_TREND_RANGE, TREND_RANGES
from .store import SeriesStore

logger = logging.getLogger("bacmon.server")


@dataclass
class TrendSeries:
    series_key: str
    range_key: str
    start: float
    end: float
    points: List[Tuple[float, float]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.points)


def resolve_range(name: Optional[str]) -> Tuple[str, int]:
    """Map a range keyword to (key, seconds). Unknown keywords fall back to 1h."""
    if name in TREND_RANGES:
        return name, TREND_RANGES[name]
    if name:
        logger.debug(f"unknown trend range {name!r}, using {DEFAULT_TREND_RANGE}")
    return DEFAULT_TREND_RANGE, TREND_RANGES[DEFAULT_TREND_RANGE]


def get_trend(store: SeriesStore, series_key: Optional[str], range_name: Optional[str],
              now: float) -> TrendSeries:
    """Readings of `series_key` in [now - window, now], ascending by timestamp."""
    if series_key is None or not series_key.strip():
        raise ValidationError("point", "Point parameter is required")

    range_key, seconds = resolve_range(range_name)
    start = now - seconds
    readings = store.readings(start, now, series_key=series_key)

    return TrendSeries(
        series_key=series_key,
        range_key=range_key,
        start=start,
        end=now,
        points=[(r.timestamp, r.value) for r in readings],
    )
