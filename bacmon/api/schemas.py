#!/usr/bin/env python3
"""
bacmon API Schemas - Pydantic response models

Python attributes are snake_case; JSON field names are camelCase.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .queries import FreshnessStatus, HealthSnapshot, SeriesRollup, SeriesSnapshot, TrendSeries, freshness_counts
from .queries.utils import format_instant


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PointSnapshot(CamelModel):
    point_name: str
    haystack_name: str
    value: float
    units: Optional[str] = None
    quality: str
    timestamp: str
    age_seconds: float
    freshness_status: str

    @classmethod
    def from_snapshot(cls, snapshot: SeriesSnapshot) -> "PointSnapshot":
        r = snapshot.reading
        return cls(
            point_name=r.name,
            haystack_name=r.series_key,
            value=r.value,
            units=r.unit,
            quality=r.quality,
            timestamp=format_instant(r.timestamp),
            age_seconds=snapshot.age_seconds,
            freshness_status=snapshot.freshness_status.value,
        )


class SnapshotResponse(CamelModel):
    points: List[PointSnapshot]
    total: int
    fresh_count: int
    recent_count: int
    stale_count: int
    timestamp: str

    @classmethod
    def build(cls, snapshots: List[SeriesSnapshot], now: float) -> "SnapshotResponse":
        counts = freshness_counts(snapshots)
        return cls(
            points=[PointSnapshot.from_snapshot(s) for s in snapshots],
            total=len(snapshots),
            fresh_count=counts[FreshnessStatus.FRESH],
            recent_count=counts[FreshnessStatus.RECENT],
            stale_count=counts[FreshnessStatus.STALE],
            timestamp=format_instant(now),
        )


class TrendPoint(CamelModel):
    timestamp: str
    value: float


class TrendResponse(CamelModel):
    point: str
    range: str
    data: List[TrendPoint]
    count: int
    timestamp: str

    @classmethod
    def build(cls, trend: TrendSeries, now: float) -> "TrendResponse":
        return cls(
            point=trend.series_key,
            range=trend.range_key,
            data=[TrendPoint(timestamp=format_instant(ts), value=v) for ts, v in trend.points],
            count=trend.count,
            timestamp=format_instant(now),
        )


class PointStats(CamelModel):
    point_name: str
    haystack_name: str
    count: int
    first_reading: str
    last_reading: str
    avg_value: Optional[float] = None

    @classmethod
    def from_rollup(cls, rollup: SeriesRollup) -> "PointStats":
        return cls(
            point_name=rollup.name,
            haystack_name=rollup.series_key,
            count=rollup.count,
            first_reading=format_instant(rollup.first_reading),
            last_reading=format_instant(rollup.last_reading),
            avg_value=rollup.avg_value,
        )


class HealthResponse(CamelModel):
    total_records: int
    unique_points: int
    oldest_timestamp: str
    newest_timestamp: str
    database_size: str
    table_size: str
    index_size: str
    data_rate: float
    data_active: bool
    newest_age_seconds: Optional[float] = None
    freshness_status: str
    point_stats: List[PointStats]
    timestamp: str

    @classmethod
    def build(cls, health: HealthSnapshot) -> "HealthResponse":
        return cls(
            total_records=health.total_records,
            unique_points=health.unique_points,
            oldest_timestamp=format_instant(health.oldest_timestamp),
            newest_timestamp=format_instant(health.newest_timestamp),
            database_size=health.database_size,
            table_size=health.table_size,
            index_size=health.index_size,
            data_rate=health.data_rate,
            data_active=health.data_active,
            newest_age_seconds=health.newest_age_seconds,
            freshness_status=health.freshness_status.value,
            point_stats=[PointStats.from_rollup(r) for r in health.point_stats],
            timestamp=format_instant(health.timestamp),
        )
