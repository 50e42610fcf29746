"""Unit tests for trend extraction"""
import pytest

from bacmon.api.queries import get_trend, resolve_range
from bacmon.core.errors import ValidationError


class TestResolveRange:
    @pytest.mark.parametrize("name,seconds", [
        ("1h", 3600), ("6h", 21600), ("24h", 86400), ("7d", 604800), ("30d", 2592000),
    ])
    def test_known_ranges(self, name, seconds):
        assert resolve_range(name) == (name, seconds)

    @pytest.mark.parametrize("name", ["99x", "", None, "1H", "2h"])
    def test_unknown_falls_back_to_one_hour(self, name):
        assert resolve_range(name) == ("1h", 3600)


class TestGetTrend:
    def test_returns_ascending_points_for_one_series(self, store, now, sample_readings):
        trend = get_trend(store, "ahu1.sat", "1h", now)

        assert trend.series_key == "ahu1.sat"
        assert trend.count == 10
        timestamps = [ts for ts, _ in trend.points]
        assert timestamps == sorted(timestamps)
        assert trend.points[-1] == (now, sample_readings["latest_sat"])

    def test_window_bounds(self, store, now, add_reading):
        add_reading("p", 1.0, age=3600)      # exactly at the lower bound
        add_reading("p", 2.0, age=3601)      # just outside
        add_reading("p", 3.0, age=7200)
        trend = get_trend(store, "p", "1h", now)
        assert [v for _, v in trend.points] == [1.0]

    def test_wider_range_includes_older_readings(self, store, now, add_reading):
        add_reading("p", 1.0, age=5 * 86400)
        add_reading("p", 2.0, age=60)
        assert get_trend(store, "p", "7d", now).count == 2
        assert get_trend(store, "p", "24h", now).count == 1

    def test_unknown_range_uses_one_hour(self, store, now, add_reading):
        add_reading("p", 1.0, age=2 * 3600)
        add_reading("p", 2.0, age=10)
        trend = get_trend(store, "p", "99x", now)
        assert trend.range_key == "1h"
        assert trend.start == now - 3600
        assert [v for _, v in trend.points] == [2.0]

    def test_duplicate_timestamps_preserved(self, store, now, add_reading):
        add_reading("p", 1.0, age=10)
        add_reading("p", 2.0, age=10)
        trend = get_trend(store, "p", "1h", now)
        assert [v for _, v in trend.points] == [1.0, 2.0]

    def test_missing_series_key_is_validation_error(self, store, now):
        for key in (None, "", "   "):
            with pytest.raises(ValidationError) as exc:
                get_trend(store, key, "1h", now)
            assert exc.value.field == "point"

    def test_unknown_series_returns_empty(self, store, now, sample_readings):
        trend = get_trend(store, "does.not.exist", "30d", now)
        assert trend.points == []
        assert trend.count == 0
