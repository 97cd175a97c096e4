from __future__ import annotations

import datetime

import pytest

from fleetlog.importers.errors import WorkbookReadError
from fleetlog.importers.headers import SERVICE_ANCHORS, locate_header
from fleetlog.importers.rows import KM_TRIP_COLUMNS, normalize_rows
from fleetlog.importers.utils import extract_number, norm_header, parse_date, parse_number
from fleetlog.importers.workbook import read_workbook

MARCH_15 = datetime.date(2024, 3, 15)

@pytest.mark.parametrize("value", ["15.03.24", "15.03.2024", "2024-03-15", "15/03/2024", "15-03-2024", "2024/03/15", 45366, 45366.75, "15 March 2024", "Mar 15, 2024", "2024-03-15T10:00:00.000Z", "2024-03-15 10:00:00.5"])
def test_parse_date_formats(value):
    assert parse_date(value) == MARCH_15

def test_parse_date_native_values():
    assert parse_date(datetime.datetime(2024, 3, 15, 17, 45)) == MARCH_15
    assert parse_date(MARCH_15) == MARCH_15
    aware = datetime.datetime(2024, 3, 16, 1, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=2)))
    assert parse_date(aware) == MARCH_15

@pytest.mark.parametrize("value", ["not-a-date", "", "   ", None, 0, -5, "32.01.2024", "15.13.2024", "N/A", True])
def test_parse_date_rejects_garbage(value):
    assert parse_date(value) is None

def test_parse_number_cleans_text():
    assert parse_number(1250) == 1250.0
    assert parse_number("1,250.50") == 1250.5
    assert parse_number("R 1 250.00") == 1250.0
    assert parse_number("$99") == 99.0
    assert parse_number('"123456"') == 123456.0
    assert parse_number("15000 km") == 15000.0
    assert parse_number("-42") == -42.0

def test_parse_number_distinguishes_zero_from_missing():
    assert parse_number(0) == 0.0
    assert parse_number("0") == 0.0
    assert parse_number(None) is None
    assert parse_number("") is None
    assert parse_number("n/a") is None
    assert parse_number(float("nan")) is None
    assert parse_number(False) is None

def test_extract_number_from_annotation():
    assert extract_number("SERVICE INTERVAL: 15,000 KM") == 15000.0
    assert extract_number("Service interval 250 hrs") == 250.0
    assert extract_number("no digits here") is None

def test_norm_header():
    assert norm_header("  Opening\n  KM ") == "opening km"
    assert norm_header(None) == ""

def test_header_locator_skips_preamble():
    rows = [
        [None, None, None, None],
        [None, None, None, None],
        ["TRIP LOG ABC123GP", None, None, None],
        ["Date", "Opening KM", "Litres", "Driver"],
        [datetime.date(2024, 3, 1), 1000, 50, "Sipho"],
        [datetime.date(2024, 3, 2), 1200, None, None],
    ]
    header = locate_header(rows)
    assert header is not None
    assert header.header_row == 3
    assert header.data_start == 4
    assert header.get("opening km") == 1
    assert header.get("km") is None
    assert "driver" in header

    parsed = normalize_rows(rows, header, KM_TRIP_COLUMNS)
    assert [r.reading for r in parsed] == [1000.0, 1200.0]
    assert parsed[0].driver == "Sipho"
    assert parsed[1].driver == "N/A"
    assert parsed[1].litres is None
    assert parsed[0].row_number == 5

def test_header_locator_needs_corroborating_label():
    rows = [["Date", "Notes"], [datetime.date(2024, 3, 1), "x"]]
    assert locate_header(rows) is None
    assert locate_header([["Date", "Supplier"]], anchors=SERVICE_ANCHORS).header_row == 0

def test_header_locator_accepts_spelled_out_hours():
    rows = [["Forklift usage"], ["Date", "Opening Hours"], [datetime.date(2024, 4, 1), 100]]
    header = locate_header(rows)
    assert header.header_row == 1
    assert header.find(("opening hrs", "opening hours")) == 1

def test_header_index_first_and_last():
    rows = [["Date", "Opening KM", "Supplier", "Date", "Expense"]]
    header = locate_header(rows, anchors=SERVICE_ANCHORS)
    assert header.get("date") == 0
    assert header.last("date") == 3
    assert header.find(("expense",)) == 4
    assert header.find(("date",), prefer_last=True) == 3

def test_read_workbook_sheets_and_native_dates(xlsx):
    data = xlsx({
        " ABC123GP ": [
            ["Date", "Opening KM", "Litres", "Driver"],
            [datetime.date(2024, 3, 1), 1000, 50, "Sipho"],
        ],
        "EMPTY": [["only a title"]],
    })
    sheets = read_workbook(data)
    assert [s.name for s in sheets] == [" ABC123GP ", "EMPTY"]
    assert sheets[0].license_plate == "ABC123GP"
    assert isinstance(sheets[0].rows[1][0], datetime.datetime)
    assert not sheets[0].is_empty
    assert sheets[1].is_empty

@pytest.mark.parametrize("data", [b"", b"definitely not a workbook", b"PK\x03\x04broken zip"])
def test_read_workbook_rejects_garbage(data):
    with pytest.raises(WorkbookReadError):
        read_workbook(data)
