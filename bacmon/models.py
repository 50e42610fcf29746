#!/usr/bin/env python3
"""
bacmon Database Models — Peewee

Paradigm: append-only readings table
- One row per reading, written by the upstream BACnet pipeline, never by this service.
- Store order: SensorReading.id (Peewee's default INTEGER PRIMARY KEY AUTOINCREMENT).
- Time: epoch seconds stored as double precision.

Notes:
- The database is bound at runtime through a DatabaseProxy so the same models serve
  SQLite files and pooled PostgreSQL/Timescale URLs.
- Peewee keeps one connection per thread; concurrent requests never share a cursor.
  Store calls close what they open, so pooled connections go back to the pool.
"""

import logging
from pathlib import Path
from typing import Optional

from peewee import (
    Model, DatabaseProxy, SqliteDatabase, CharField, DoubleField, AutoField
)
from playhouse.db_url import connect
from playhouse.pool import PooledDatabase

logger = logging.getLogger("bacmon.models")

# Global DB handle (initialized in DatabaseManager.connect)
database = DatabaseProxy()


class BaseModel(Model):
    class Meta:
        database = database
        legacy_table_names = False


class SensorReading(BaseModel):
    """A single sensor reading (immutable once stored)."""
    id = AutoField()
    timestamp = DoubleField()
    series_key = CharField()                 # haystack tag path, e.g. "ahu1.sat"
    display_name = CharField(null=True)      # "dis" label; falls back to series_key
    value = DoubleField()
    unit = CharField(null=True)
    quality = CharField(default="good")      # vendor specific codes, opaque here

    class Meta:
        table_name = "sensor_readings"
        indexes = (
            (("timestamp",), False),                 # time-range scans
            (("series_key", "timestamp"), False),    # per-series trends
        )


MODELS = [SensorReading]


def _sqlite_url(url: str) -> Optional[Path]:
    if url.startswith("sqlite:///"):
        path = url[len("sqlite:///"):]
        if path and path != ":memory:":
            return Path(path)
    return None


class DatabaseManager:
    """DB lifecycle + minimal convenience ops."""

    def __init__(self, database_url: str = "sqlite:///./bacmon.db",
                 timeout: float = 30.0, max_connections: int = 8) -> None:
        self.database_url = database_url
        self.timeout = timeout
        self.max_connections = max_connections
        self.connected = False
        self._db = None

    def _open(self):
        sqlite_path = _sqlite_url(self.database_url)
        if sqlite_path is not None:
            sqlite_path.parent.mkdir(parents=True, exist_ok=True)
            return SqliteDatabase(
                str(sqlite_path),
                timeout=self.timeout,
                pragmas={
                    "journal_mode": "wal",
                    "synchronous": "normal",
                    "cache_size": 10000,
                    "temp_store": "memory",
                },
            )
        if "+pool://" in self.database_url:
            kwargs = {}
            if self.database_url.startswith("sqlite"):
                # pooled sqlite connections move between worker threads
                kwargs["check_same_thread"] = False
            return connect(self.database_url, max_connections=self.max_connections,
                           timeout=self.timeout, **kwargs)
        return connect(self.database_url)

    def connect(self, create_tables: bool = True) -> bool:
        """
        Bind the models to the configured database and open it.

        The models stay bound when the first connection fails, so later requests
        retry the connection and report StoreUnavailable instead of crashing.
        The startup connection is released right away; queries open their own.
        """
        self._db = self._open()
        self._db.bind(MODELS, bind_refs=False, bind_backrefs=False)
        database.initialize(self._db)
        try:
            with self._db.connection_context():
                if create_tables:
                    self._db.create_tables(MODELS, safe=True)
            self.connected = True
            logger.info(f"database initialized: {self.database_url.split('@')[-1]}")
            return True
        except Exception as e:
            logger.error(f"database init failed: {e}")
            return False

    def close(self) -> None:
        if self.connected:
            if isinstance(self._db, PooledDatabase):
                self._db.close_all()
            elif not self._db.is_closed():
                self._db.close()
            self.connected = False
            logger.info("database connection closed")
