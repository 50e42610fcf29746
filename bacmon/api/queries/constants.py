"""
Query constants: lookback windows, freshness thresholds, export shapes.
"""

# Freshness tiers (seconds)
FRESH_MAX_AGE = 60
RECENT_MAX_AGE = 300

# Live snapshot
SNAPSHOT_LOOKBACK_SECONDS = 3600
DEFAULT_SNAPSHOT_LIMIT = 100

# Health
HEALTH_WINDOW_SECONDS = 86400
DATA_ACTIVE_WINDOW_SECONDS = 3600
HEALTH_TOP_SERIES = 20

# Trend windows, fixed enumeration
TREND_RANGES = {
    "1h": 3600,
    "6h": 6 * 3600,
    "24h": 24 * 3600,
    "7d": 7 * 86400,
    "30d": 30 * 86400,
}
DEFAULT_TREND_RANGE = "1h"

# Export
EXPORT_FORMATS = ("long", "wide")
DEFAULT_EXPORT_FORMAT = "long"
LONG_EXPORT_COLUMNS = ["timestamp", "point_name", "haystack_name", "value", "units", "quality"]
WIDE_TIMESTAMP_COLUMN = "timestamp"
