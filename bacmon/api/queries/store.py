"""
Series store adapter.

The only module that talks to the readings table. Every filter is a peewee
expression, so user-supplied values always reach the driver as bound parameters.
Relative windows are resolved by callers into absolute bounds before they get here.
Driver failures surface as StoreUnavailable; nothing is retried.

Every call runs in its own connection scope: a connection the call opened is closed
(returned to the pool for pooled URLs) before the call returns, so request worker
threads never pin pool slots between requests.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional

from peewee import Case, DatabaseProxy, PeeweeException, PostgresqlDatabase, fn
from playhouse.pool import MaxConnectionsExceeded

from ...core.errors import StoreUnavailable
from ...models import SensorReading
from .utils import format_bytes

logger = logging.getLogger("bacmon.store")

ORDER_TIME = "time"
ORDER_TIME_KEY = "time_key"


@dataclass(frozen=True)
class Reading:
    """One stored reading as returned by the store."""
    timestamp: float
    series_key: str
    display_name: Optional[str]
    value: float
    unit: Optional[str] = None
    quality: str = "good"

    @property
    def name(self) -> str:
        """Effective display name: `display_name` when present, else the series key."""
        return self.display_name or self.series_key


@dataclass(frozen=True)
class WindowSummary:
    unique_points: int
    oldest: Optional[float]
    newest: Optional[float]
    recent_count: int


@dataclass(frozen=True)
class SeriesRollup:
    series_key: str
    display_name: Optional[str]
    count: int
    first_reading: float
    last_reading: float
    avg_value: Optional[float]

    @property
    def name(self) -> str:
        return self.display_name or self.series_key


@dataclass(frozen=True)
class StorageFootprint:
    database_size: str
    table_size: str
    index_size: str


@contextmanager
def _store_errors(operation: str):
    try:
        yield
    except (PeeweeException, MaxConnectionsExceeded) as e:
        logger.error(f"store query failed ({operation}): {e}")
        raise StoreUnavailable(str(e), operation=operation) from e


class SeriesStore:
    """Read-only access to `sensor_readings` over time ranges and series keys."""

    model = SensorReading

    @property
    def database(self):
        db = self.model._meta.database
        if isinstance(db, DatabaseProxy):
            db = db.obj
        return db

    @contextmanager
    def _session(self, operation: str):
        """Connection scope for one store call; keeps a caller's open connection open."""
        db = self.database
        with _store_errors(operation):
            opened = db.is_closed()
            if opened:
                db.connect()
            try:
                yield db
            finally:
                if opened and not db.is_closed():
                    db.close()

    def _is_postgres(self) -> bool:
        return isinstance(self.database, PostgresqlDatabase)

    def _in_range(self, query, start: float, end: Optional[float]):
        R = self.model
        if end is None:
            return query.where(R.timestamp >= start)
        return query.where(R.timestamp.between(start, end))

    def readings(self, start: float, end: Optional[float] = None,
                 series_key: Optional[str] = None, order: str = ORDER_TIME) -> List[Reading]:
        """
        Readings with start <= timestamp <= end (end=None leaves the upper bound open).

        Args:
            start: Inclusive lower bound, epoch seconds
            end: Inclusive upper bound, epoch seconds, or None
            series_key: Restrict to one series
            order: ORDER_TIME (timestamp, store order) or
                   ORDER_TIME_KEY (timestamp, series key, store order)
        """
        R = self.model
        query = R.select(R.timestamp, R.series_key, R.display_name, R.value, R.unit, R.quality)
        query = self._in_range(query, start, end)
        if series_key is not None:
            query = query.where(R.series_key == series_key)

        if order == ORDER_TIME_KEY:
            query = query.order_by(R.timestamp, R.series_key, R.id)
        else:
            query = query.order_by(R.timestamp, R.id)

        with self._session("readings"):
            return [Reading(*row) for row in query.tuples()]

    def window_summary(self, start: float, end: Optional[float], recent_since: float) -> WindowSummary:
        """Distinct series, oldest/newest timestamp and trailing count inside a window."""
        R = self.model
        query = R.select(
            fn.COUNT(fn.DISTINCT(R.series_key)),
            fn.MIN(R.timestamp),
            fn.MAX(R.timestamp),
            fn.SUM(Case(None, [(R.timestamp >= recent_since, 1)], 0)),
        )
        query = self._in_range(query, start, end)

        with self._session("window_summary"):
            row = query.tuples().first()

        unique_points, oldest, newest, recent_count = row or (0, None, None, 0)
        return WindowSummary(
            unique_points=int(unique_points or 0),
            oldest=oldest,
            newest=newest,
            recent_count=int(recent_count or 0),
        )

    def series_rollups(self, start: float, end: Optional[float], limit: int) -> List[SeriesRollup]:
        """Per-series count/first/last/avg for the `limit` busiest series in the window."""
        R = self.model
        count = fn.COUNT(R.id)
        query = R.select(
            R.series_key,
            fn.MAX(R.display_name),
            count,
            fn.MIN(R.timestamp),
            fn.MAX(R.timestamp),
            fn.AVG(R.value),
        )
        query = (self._in_range(query, start, end)
                 .group_by(R.series_key)
                 .order_by(count.desc(), R.series_key)
                 .limit(limit))

        with self._session("series_rollups"):
            rows = list(query.tuples())

        return [
            SeriesRollup(
                series_key=key,
                display_name=name,
                count=int(n),
                first_reading=first,
                last_reading=last,
                avg_value=float(avg) if avg is not None else None,
            )
            for key, name, n, first, last, avg in rows
        ]

    def approximate_count(self) -> int:
        """
        Store-maintained row estimate, not a live COUNT(*).

        PostgreSQL: planner statistics (n_live_tup). SQLite: highest row id.
        """
        R = self.model
        with self._session("approximate_count"):
            if self._is_postgres():
                cursor = self.database.execute_sql(
                    "SELECT n_live_tup::bigint FROM pg_stat_user_tables WHERE relname = %s",
                    (R._meta.table_name,))
                row = cursor.fetchone()
                return int(row[0]) if row and row[0] is not None else 0
            return int(R.select(fn.MAX(R.id)).scalar() or 0)

    def storage_footprint(self) -> StorageFootprint:
        table = self.model._meta.table_name
        with self._session("storage_footprint"):
            if self._is_postgres():
                cursor = self.database.execute_sql(
                    "SELECT pg_database_size(current_database()), "
                    "pg_total_relation_size(%s), pg_indexes_size(%s)",
                    (table, table))
                db_bytes, table_bytes, index_bytes = cursor.fetchone()
            else:
                page_size = self.database.execute_sql("PRAGMA page_size").fetchone()[0]
                page_count = self.database.execute_sql("PRAGMA page_count").fetchone()[0]
                db_bytes = page_size * page_count
                table_bytes, index_bytes = self._sqlite_object_sizes(table)

        return StorageFootprint(
            database_size=format_bytes(db_bytes),
            table_size=format_bytes(table_bytes),
            index_size=format_bytes(index_bytes),
        )

    def _sqlite_object_sizes(self, table: str):
        # dbstat is an optional SQLite build feature
        try:
            table_bytes = self.database.execute_sql(
                "SELECT SUM(pgsize) FROM dbstat WHERE name = ?", (table,)).fetchone()[0]
            index_bytes = self.database.execute_sql(
                "SELECT SUM(pgsize) FROM dbstat WHERE name IN "
                "(SELECT name FROM sqlite_master WHERE type = 'index' AND tbl_name = ?)",
                (table,)).fetchone()[0]
        except PeeweeException as e:
            logger.debug(f"dbstat unavailable: {e}")
            return None, None
        return table_bytes, index_bytes or 0

    def ping(self) -> bool:
        R = self.model
        with self._session("ping"):
            R.select(R.id).limit(1).execute()
        return True
