"""
Time-series query modules

Organized by concern:
- store.py: parameterized reads against the readings table
- freshness.py: age classification
- snapshot.py: latest value per series
- trends.py: single-series trend windows
- export.py: long/wide CSV reshaping
- health.py: store-wide statistics
"""

from .store import Reading, SeriesStore, StorageFootprint, SeriesRollup, WindowSummary
from .freshness import FreshnessStatus, clamp_age, classify, is_data_active
from .snapshot import SeriesSnapshot, build_snapshot, get_snapshot, latest_per_series, freshness_counts
from .trends import TrendSeries, get_trend, resolve_range
from .export import ExportTable, export_table, long_frame, wide_frame
from .health import HealthSnapshot, get_health

__all__ = [
    # Store
    'Reading',
    'SeriesStore',
    'StorageFootprint',
    'SeriesRollup',
    'WindowSummary',

    # Freshness
    'FreshnessStatus',
    'clamp_age',
    'classify',
    'is_data_active',

    # Snapshot
    'SeriesSnapshot',
    'build_snapshot',
    'get_snapshot',
    'latest_per_series',
    'freshness_counts',

    # Trends
    'TrendSeries',
    'get_trend',
    'resolve_range',

    # Export
    'ExportTable',
    'export_table',
    'long_frame',
    'wide_frame',

    # Health
    'HealthSnapshot',
    'get_health',
]
