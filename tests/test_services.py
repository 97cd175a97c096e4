from __future__ import annotations

from datetime import date, datetime

from fleetlog.importers.headers import SERVICE_ANCHORS, locate_header
from fleetlog.importers.rows import NormalizedRow
from fleetlog.importers.services_importer import (
    build_services,
    extract_service_annotations,
    infer_maintenance_flags,
    parse_service_sheet,
)

CUTOFF = date(2024, 1, 1)

def test_maintenance_flags_from_keywords():
    flags = infer_maintenance_flags("", "Replaced oil filter and brake pads")
    assert flags == {"oil_filter": True, "diesel_filter": False, "air_filter": False, "tires": False, "brakes": True}

    flags = infer_maintenance_flags("Tyre World", "Diesel filter, AIR filter, disc skim")
    assert flags["tires"] and flags["diesel_filter"] and flags["air_filter"] and flags["brakes"]
    assert not flags["oil_filter"]

def test_only_dated_paid_described_rows_qualify():
    rows = [
        NormalizedRow(row_number=2, date=date(2024, 2, 1), reading=1000, supplier="Midas", expense=850.0),
        NormalizedRow(row_number=3, date=date(2024, 2, 2), comments="wipers", expense=0.0),
        NormalizedRow(row_number=4, date=date(2024, 2, 3), supplier="Midas", expense=None),
        NormalizedRow(row_number=5, date=date(2024, 2, 4), expense=120.0),
        NormalizedRow(row_number=6, date=date(2023, 12, 31), supplier="Midas", expense=99.0),
        NormalizedRow(row_number=7, date=None, supplier="Midas", expense=99.0),
        NormalizedRow(row_number=8, date=date(2024, 2, 5), comments="new tyres", expense=4000.0),
    ]
    batch = build_services(rows, CUTOFF)
    assert [(s.service_date, s.expense_amount) for s in batch.records] == [
        (date(2024, 2, 1), 850.0),
        (date(2024, 2, 5), 4000.0),
    ]
    assert batch.records[0].odo_reading == 1000
    assert batch.records[1].supplier == ""
    assert batch.records[1].tires
    assert batch.rows_parsed == 7
    assert batch.rows_skipped == 5

SHEET = [
    ["SERVICE INTERVAL: 10 000 KM", None, None, None, None, None, None],
    ["Date", "Opening KM", "Supplier", "Comments", "Date", "Expense", "Next Service"],
    [datetime(2024, 1, 30), 41000, "Bosch", "oil service", "05.02.2024", "R 2,450.00", 51000],
    [datetime(2024, 3, 1), 48000, None, "brake pads", datetime(2024, 3, 2), 1800, None],
    [None, None, None, "notes only", None, None, None],
    ["Service interval 15,000 km", None, None, None, None, None, None],
]

def test_service_sheet_uses_last_date_column():
    batch, notes = parse_service_sheet(SHEET, cutoff=CUTOFF)
    assert [s.service_date for s in batch.records] == [date(2024, 2, 5), date(2024, 3, 2)]
    assert batch.records[0].expense_amount == 2450.0
    assert batch.records[0].oil_filter
    assert batch.records[1].brakes
    assert batch.rows_skipped == 2

def test_service_annotations():
    header = locate_header(SHEET, anchors=SERVICE_ANCHORS)
    notes = extract_service_annotations(SHEET, header)
    # the later interval note wins
    assert notes.service_interval_km == 15000.0
    assert notes.next_service_km == 51000.0
    assert notes.as_update() == {"service_interval_km": 15000.0, "next_service_km": 51000.0}

def test_service_annotations_missing():
    rows = [["Date", "Supplier", "Expense"], [date(2024, 2, 1), "Midas", 100]]
    notes = extract_service_annotations(rows, locate_header(rows, anchors=SERVICE_ANCHORS))
    assert notes.service_interval_km is None
    assert notes.next_service_km is None
    assert notes.as_update() == {}

def test_service_sheet_without_header():
    assert parse_service_sheet([["Date", "Litres"], [date(2024, 2, 1), 40]], cutoff=CUTOFF) is None
