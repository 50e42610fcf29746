"""Pytest configuration and shared fixtures"""
import pytest
from fastapi.testclient import TestClient
from peewee import SqliteDatabase

from bacmon.api.queries import SeriesStore
from bacmon.core.config import ServerConfig
from bacmon.core.server import create_app
from bacmon.models import MODELS, SensorReading

# Fixed evaluation instant: 2025-10-09T08:53:20Z
NOW = 1_760_000_000.0


@pytest.fixture
def test_db(tmp_path):
    """File-backed SQLite database (shared by TestClient worker threads)"""
    test_database = SqliteDatabase(str(tmp_path / "readings.db"))

    test_database.bind(MODELS, bind_refs=False, bind_backrefs=False)
    test_database.connect()
    test_database.create_tables(MODELS)

    yield test_database

    test_database.drop_tables(MODELS, safe=True)
    test_database.close()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def add_reading(test_db):
    """Insert a reading `age` seconds before NOW"""
    def _add(series_key, value, age=0.0, display_name=None, unit=None, quality="good", timestamp=None):
        return SensorReading.create(
            timestamp=timestamp if timestamp is not None else NOW - age,
            series_key=series_key,
            display_name=display_name,
            value=value,
            unit=unit,
            quality=quality,
        )
    return _add


@pytest.fixture
def store(test_db):
    return SeriesStore()


@pytest.fixture
def sample_readings(add_reading):
    """Three AHU points reporting every 30s for 5 minutes, plus an old chiller point"""
    for i in range(10):
        age = (9 - i) * 30  # oldest first
        add_reading("ahu1.sat", 55.0 + i * 0.5, age=age, display_name="AHU-1 Supply Air Temp", unit="°F")
        add_reading("ahu1.rat", 72.0 + i * 0.1, age=age, display_name="AHU-1 Return Air Temp", unit="°F")
        add_reading("ahu1.fan", float(i % 2), age=age, unit="bool")
    add_reading("ch1.chwst", 44.2, age=1800, display_name="Chiller-1 CHWST", unit="°F")
    return {
        "series": ["ahu1.fan", "ahu1.rat", "ahu1.sat", "ch1.chwst"],
        "latest_sat": 59.5,
    }


@pytest.fixture
def client(test_db):
    app = create_app(ServerConfig(), clock=lambda: NOW, manage_database=False)
    return TestClient(app)
