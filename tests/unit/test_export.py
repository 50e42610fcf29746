"""Unit tests for long/wide CSV export"""
import csv
import io

import pytest

from bacmon.api.queries import Reading, export_table, long_frame, wide_frame
from bacmon.api.queries.utils import format_instant, parse_instant
from bacmon.core.errors import ValidationError

T1 = 1_700_000_000.0
T2 = 1_700_000_060.0


def parse_csv(text):
    return list(csv.reader(io.StringIO(text)))


def reading(key, value, ts, name=None, unit=None, quality="good"):
    return Reading(timestamp=ts, series_key=key, display_name=name, value=value, unit=unit, quality=quality)


class TestWideFrame:
    """Pivot: row per timestamp, column per name, no imputation"""

    def test_scenario_missing_cell_left_empty(self):
        rows = [reading("A", 1.0, T1), reading("B", 2.0, T1), reading("A", 1.5, T2)]
        csv_text = wide_frame(rows).to_csv(index=False, na_rep="", lineterminator="\n")

        assert parse_csv(csv_text) == [
            ["timestamp", "A", "B"],
            [format_instant(T1), "1.0", "2.0"],
            [format_instant(T2), "1.5", ""],
        ]

    def test_columns_sorted_by_effective_name(self):
        rows = [
            reading("k3", 1.0, T1, name="Zone Temp"),
            reading("k1", 1.0, T1),
            reading("k2", 1.0, T2, name="Alpha"),
        ]
        frame = wide_frame(rows)
        assert list(frame.columns) == ["timestamp", "Alpha", "Zone Temp", "k1"]

    def test_row_count_equals_distinct_timestamps(self):
        rows = [reading("A", 1.0, T1 + i * 10) for i in range(5)] + [reading("B", 1.0, T1)]
        frame = wide_frame(rows)
        assert len(frame) == 5
        assert all(len(row) == 3 for row in parse_csv(frame.to_csv(index=False))[1:])

    def test_no_carry_forward(self):
        rows = [reading("A", 1.0, T1), reading("B", 2.0, T2)]
        frame = wide_frame(rows)
        assert frame["A"].isna().tolist() == [False, True]
        assert frame["B"].isna().tolist() == [True, False]

    def test_duplicate_timestamp_and_name_last_write_wins(self):
        rows = [reading("A", 1.0, T1), reading("A", 9.0, T1)]
        frame = wide_frame(rows)
        assert len(frame) == 1
        assert frame["A"].tolist() == [9.0]

    def test_rows_ascending_by_timestamp(self):
        rows = [reading("A", 2.0, T2), reading("A", 1.0, T1)]
        assert wide_frame(rows)["timestamp"].tolist() == [format_instant(T1), format_instant(T2)]

    def test_empty_input_header_only(self):
        assert wide_frame([]).to_csv(index=False).strip() == "timestamp"

    def test_sub_microsecond_timestamps_share_a_row(self):
        close = T1 + 3e-7
        assert format_instant(close) == format_instant(T1)
        rows = [reading("A", 1.0, T1), reading("B", 2.0, close), reading("A", 1.5, T2)]
        frame = wide_frame(rows)
        assert frame["timestamp"].tolist() == [format_instant(T1), format_instant(T2)]
        assert frame["A"].tolist() == [1.0, 1.5]
        assert frame["B"].tolist()[0] == 2.0

    def test_fractional_seconds_keep_time_order(self):
        rows = [reading("A", 2.0, T1 + 0.5), reading("A", 1.0, T1)]
        assert wide_frame(rows)["A"].tolist() == [1.0, 2.0]


class TestLongFrame:
    def test_columns_and_name_fallback(self):
        rows = [reading("ahu1.sat", 55.0, T1, name="Supply Temp", unit="°F"), reading("ahu1.fan", 1.0, T1)]
        frame = long_frame(rows)

        assert list(frame.columns) == ["timestamp", "point_name", "haystack_name", "value", "units", "quality"]
        assert frame["point_name"].tolist() == ["Supply Temp", "ahu1.fan"]

    def test_values_with_separator_are_quoted(self):
        rows = [reading("site, bldg 1", 1.0, T1, name='Room "A", north')]
        text = long_frame(rows).to_csv(index=False)
        assert '"Room ""A"", north"' in text
        assert parse_csv(text)[1][1] == 'Room "A", north'

    def test_full_precision(self):
        value = 0.1 + 0.2
        text = long_frame([reading("p", value, T1)]).to_csv(index=False)
        assert float(parse_csv(text)[1][3]) == value


class TestExportTable:
    """End-to-end against the store"""

    def test_long_row_per_reading(self, store, now, sample_readings):
        table = export_table(store, format_instant(now - 3600), format_instant(now), "long")
        rows = parse_csv(table.to_csv())
        assert len(rows) - 1 == 31
        assert table.reading_count == 31
        assert table.filename == "bacpipes_export_long.csv"

    def test_long_ordered_by_time_then_key(self, store, now, add_reading):
        add_reading("b", 1.0, age=10)
        add_reading("a", 2.0, age=10)
        add_reading("c", 3.0, age=20)
        rows = parse_csv(export_table(store, format_instant(now - 60), format_instant(now)).to_csv())
        assert [r[2] for r in rows[1:]] == ["c", "a", "b"]

    def test_long_round_trip(self, store, now, add_reading):
        originals = [
            ("p1", 1 / 3, now - 30.25, "Point One"),
            ("p2", 123456789.123456, now - 30.25, None),
            ("p1", -0.000001, now - 10, "Point One"),
        ]
        for key, value, ts, name in originals:
            add_reading(key, value, timestamp=ts, display_name=name)

        rows = parse_csv(export_table(store, format_instant(now - 60), format_instant(now), "long").to_csv())
        parsed = [(r[0], r[1], float(r[3])) for r in rows[1:]]
        expected = [(format_instant(ts), name or key, value) for key, value, ts, name in originals]
        assert parsed == expected

    def test_wide_columns_match_names_in_range(self, store, now, sample_readings):
        table = export_table(store, format_instant(now - 3600), format_instant(now), "wide")
        rows = parse_csv(table.to_csv())

        assert rows[0] == ["timestamp", "AHU-1 Return Air Temp", "AHU-1 Supply Air Temp",
                           "Chiller-1 CHWST", "ahu1.fan"]
        assert len(rows) - 1 == 11  # 10 AHU timestamps + 1 chiller timestamp
        assert all(len(r) == 5 for r in rows)
        assert table.filename == "bacpipes_export_wide.csv"

    def test_range_is_inclusive(self, store, now, add_reading):
        add_reading("p", 1.0, age=100)
        add_reading("p", 2.0, age=0)
        add_reading("p", 3.0, age=101)
        table = export_table(store, format_instant(now - 100), format_instant(now), "long")
        assert table.reading_count == 2

    def test_empty_range(self, store, now):
        table = export_table(store, format_instant(now - 60), format_instant(now), "wide")
        assert table.to_csv().strip() == "timestamp"

    @pytest.mark.parametrize("start,end,field", [
        (None, "2025-01-01T00:00:00Z", "startDate"),
        ("2025-01-01T00:00:00Z", None, "endDate"),
        ("", "2025-01-01T00:00:00Z", "startDate"),
        ("yesterday", "2025-01-01T00:00:00Z", "startDate"),
        ("2025-01-02T00:00:00Z", "2025-01-01T00:00:00Z", "endDate"),
    ])
    def test_date_validation(self, store, start, end, field):
        with pytest.raises(ValidationError) as exc:
            export_table(store, start, end, "long")
        assert exc.value.field == field

    def test_unknown_format_is_validation_error(self, store):
        with pytest.raises(ValidationError) as exc:
            export_table(store, "2025-01-01", "2025-01-02", "xml")
        assert exc.value.field == "format"


class TestInstants:
    def test_parse_zulu_and_offset(self):
        assert parse_instant("2023-11-14T22:13:20Z", "startDate") == T1
        assert parse_instant("2023-11-14T23:13:20+01:00", "startDate") == T1

    def test_naive_is_utc(self):
        assert parse_instant("2023-11-14T22:13:20", "startDate") == T1

    def test_format(self):
        assert format_instant(T1) == "2023-11-14T22:13:20Z"
        assert format_instant(T1 + 0.5) == "2023-11-14T22:13:20.500000Z"
