from __future__ import annotations

from datetime import date

from fleetlog.importers.rows import NormalizedRow
from fleetlog.importers.trips_importer import build_hours_trips, build_km_trips, is_hours_based, parse_trip_sheet

CUTOFF = date(2024, 1, 1)

def _row(d, reading=None, litres=None, distance=None, driver="N/A", n=0):
    return NormalizedRow(row_number=n, date=d, reading=reading, litres=litres, distance=distance, driver=driver)

def test_baseline_is_first_chronological_row_regardless_of_input_order():
    rows = [
        _row(date(2024, 3, 3), 1300, litres=80),
        _row(date(2024, 3, 1), 1000, litres=60, driver="Thabo"),
        _row(date(2024, 3, 2), 1100, litres=40),
    ]
    batch = build_km_trips(rows, CUTOFF)
    first = batch.records[0]
    assert first.trip_date == date(2024, 3, 1)
    assert first.total_km == 0
    assert first.liters_filled is None
    assert first.opening_km == 1000
    assert first.worker_name == "Thabo"
    assert [r.total_km for r in batch.records] == [0, 100, 200]
    assert [r.liters_filled for r in batch.records] == [None, 40, 80]
    assert not any(r.is_hours_based for r in batch.records)

def test_distance_over_ceiling_is_clamped_to_zero():
    rows = [_row(date(2024, 3, 1), 1000), _row(date(2024, 3, 2), 10000), _row(date(2024, 3, 3), 10250)]
    batch = build_km_trips(rows, CUTOFF)
    assert [r.total_km for r in batch.records] == [0, 0, 250]

def test_ceiling_is_configurable():
    rows = [_row(date(2024, 3, 1), 1000), _row(date(2024, 3, 2), 1600)]
    assert build_km_trips(rows, CUTOFF, max_distance=500).records[1].total_km == 0

def test_ordering_by_date_then_odometer():
    rows = [_row(date(2024, 3, 2), 200), _row(date(2024, 3, 1), 90), _row(date(2024, 3, 1), 100)]
    batch = build_km_trips(rows, CUTOFF)
    assert [(r.trip_date, r.opening_km) for r in batch.records] == [
        (date(2024, 3, 1), 90),
        (date(2024, 3, 1), 100),
        (date(2024, 3, 2), 200),
    ]
    assert [r.total_km for r in batch.records] == [0, 10, 100]

def test_falls_back_to_sheet_distance_when_odometer_does_not_advance():
    rows = [
        _row(date(2024, 3, 1), 1000),
        _row(date(2024, 3, 2), None, litres=55, distance=180),
        _row(date(2024, 3, 3), 900, distance=-3),
    ]
    batch = build_km_trips(rows, CUTOFF)
    assert [r.total_km for r in batch.records] == [0, 180, 0]
    assert batch.records[1].opening_km is None
    assert batch.records[1].liters_filled == 55

def test_rows_before_cutoff_are_skipped():
    rows = [
        _row(date(2023, 12, 30), 900, litres=20),
        _row(date(2024, 1, 1), 1000, litres=30),
        _row(date(2024, 1, 2), 1100),
        _row(None, 1200),
        _row(date(2024, 1, 3)),
    ]
    batch = build_km_trips(rows, CUTOFF)
    assert [r.trip_date for r in batch.records] == [date(2024, 1, 1), date(2024, 1, 2)]
    # the first in-window row is the baseline, not a delta from the dropped one
    assert batch.records[0].total_km == 0
    assert batch.records[0].liters_filled is None
    assert batch.rows_parsed == 5
    assert batch.rows_skipped == 3

def test_nothing_in_window_yields_empty_batch():
    batch = build_km_trips([_row(date(2023, 5, 1), 10)], CUTOFF)
    assert batch.records == []
    assert batch.rows_skipped == 1

def test_hours_builder_zeroes_backwards_readings():
    rows = [
        _row(date(2024, 2, 1), 5000.0, litres=10),
        _row(date(2024, 2, 2), 5007.5, litres=12),
        _row(date(2024, 2, 3), 5001.0),
        _row(date(2024, 2, 4), None, litres=9),
    ]
    batch = build_hours_trips(rows, CUTOFF)
    assert [r.total_km for r in batch.records] == [0, 7.5, 0]
    assert [r.opening_km for r in batch.records] == [5000.0, 5007.5, 5001.0]
    assert batch.records[0].liters_filled is None
    assert all(r.is_hours_based for r in batch.records)
    assert batch.rows_skipped == 1

def test_hours_based_detection():
    assert is_hours_based("Forklift 2")
    assert is_hours_based(" LXC821MP ")
    assert not is_hours_based("ABC123GP")
    assert is_hours_based("Loader-7", patterns=("loader",))

def test_parse_trip_sheet_with_title_rows():
    rows = [
        [None, None, None, None, None],
        [None, None, None, None, None],
        ["Vehicle log", None, None, None, None],
        ["Date", "Opening KM", "KM", "Litres", "Driver"],
        ["01.03.24", "1,000", None, "45", "Sipho"],
        [None, None, None, None, None],
        ["02/03/2024", "1,250", "250", None, "Sipho"],
    ]
    batch = parse_trip_sheet(rows, hours_based=False, cutoff=CUTOFF)
    assert [(r.trip_date, r.opening_km, r.total_km) for r in batch.records] == [
        (date(2024, 3, 1), 1000.0, 0),
        (date(2024, 3, 2), 1250.0, 250.0),
    ]

def test_parse_trip_sheet_hours_columns():
    rows = [
        ["Date", "Opening Hrs", "Litres", "Driver"],
        [date(2024, 4, 1), 100, None, None],
        [date(2024, 4, 2), 104, 20, "Lerato"],
    ]
    batch = parse_trip_sheet(rows, hours_based=True, cutoff=CUTOFF)
    assert [r.total_km for r in batch.records] == [0, 4]
    assert batch.records[1].worker_name == "Lerato"

def test_parse_trip_sheet_without_header():
    assert parse_trip_sheet([["foo", "bar"], [1, 2]], hours_based=False, cutoff=CUTOFF) is None

def test_parse_trip_sheet_opening_hours_only():
    rows = [
        ["Date", "Opening Hours"],
        [date(2024, 4, 1), 100],
        [date(2024, 4, 2), 103.5],
    ]
    batch = parse_trip_sheet(rows, hours_based=True, cutoff=CUTOFF)
    assert [r.total_km for r in batch.records] == [0, 3.5]
