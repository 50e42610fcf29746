"""
CSV export in long (row per reading) and wide (row per timestamp) shapes.

Both shapes are built from one fetched row set, so the wide column set and the
grouped rows can never disagree about what was in range.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from ...core.errors import ValidationError
from .constants import (
    DEFAULT_EXPORT_FORMAT, EXPORT_FORMATS, LONG_EXPORT_COLUMNS, WIDE_TIMESTAMP_COLUMN
)
from .store import ORDER_TIME, ORDER_TIME_KEY, Reading, SeriesStore
from .utils import format_instant, parse_instant

logger = logging.getLogger("bacmon.server")


@dataclass
class ExportTable:
    fmt: str
    frame: pd.DataFrame
    reading_count: int
    start: float
    end: float

    @property
    def filename(self) -> str:
        return f"bacpipes_export_{self.fmt}.csv"

    def to_csv(self) -> str:
        # Missing wide cells stay empty; floats keep their shortest round-trip repr
        return self.frame.to_csv(index=False, na_rep="", lineterminator="\n")


def long_frame(readings: List[Reading]) -> pd.DataFrame:
    """One row per reading; point_name never blank (falls back to the series key)."""
    rows = [
        (format_instant(r.timestamp), r.name, r.series_key, r.value, r.unit, r.quality)
        for r in readings
    ]
    return pd.DataFrame(rows, columns=LONG_EXPORT_COLUMNS)


def wide_frame(readings: List[Reading]) -> pd.DataFrame:
    """
    Pivot readings to one row per distinct timestamp and one column per name.

    Columns are the sorted distinct effective names. A cell is filled only when a
    reading exists at exactly that timestamp; nothing is carried forward. Rows are
    keyed by the rendered instant, so timestamps closer than a microsecond share a
    row. Repeated (instant, name) pairs keep the last reading in time/fetch order.
    """
    if not readings:
        return pd.DataFrame(columns=[WIDE_TIMESTAMP_COLUMN])

    df = pd.DataFrame({
        "timestamp": [r.timestamp for r in readings],
        "name": [r.name for r in readings],
        "value": [r.value for r in readings],
    })
    df = df.sort_values("timestamp", kind="stable")
    df["instant"] = [format_instant(ts) for ts in df["timestamp"]]
    names = sorted(df["name"].unique())

    df = df.drop_duplicates(subset=["instant", "name"], keep="last")
    wide = df.pivot(index="instant", columns="name", values="value")
    # rendered instants do not sort lexically (whole seconds drop the fraction)
    wide = wide.reindex(index=df["instant"].unique(), columns=names)

    timestamps = list(wide.index)
    wide = wide.reset_index(drop=True)
    wide.columns = list(names)
    # a series may itself be named "timestamp"
    wide.insert(0, WIDE_TIMESTAMP_COLUMN, timestamps, allow_duplicates=True)
    return wide


def export_table(store: SeriesStore, start_date: Optional[str], end_date: Optional[str],
                 fmt: Optional[str] = None) -> ExportTable:
    """
    Validate the request, fetch [start, end] once and reshape it.

    Raises:
        ValidationError: missing/unparsable dates, start after end, unknown format
        StoreUnavailable: the store query failed (no partial export is produced)
    """
    start = parse_instant(start_date, "startDate")
    end = parse_instant(end_date, "endDate")
    if start > end:
        raise ValidationError("endDate", "endDate must not be earlier than startDate")

    fmt = (fmt or DEFAULT_EXPORT_FORMAT).strip().lower()
    if fmt not in EXPORT_FORMATS:
        raise ValidationError("format", f"format must be one of: {', '.join(EXPORT_FORMATS)}")

    if fmt == "long":
        readings = store.readings(start, end, order=ORDER_TIME_KEY)
        frame = long_frame(readings)
    else:
        readings = store.readings(start, end, order=ORDER_TIME)
        frame = wide_frame(readings)

    logger.debug(f"export {fmt}: {len(readings)} readings -> {len(frame)} rows")
    return ExportTable(fmt=fmt, frame=frame, reading_count=len(readings), start=start, end=end)
