from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from fleetlog.importers.headers import HeaderIndex
from fleetlog.importers.utils import clean_text, is_blank_row, parse_date, parse_number
from fleetlog.importers.workbook import RawCellGrid

DEFAULT_LABEL = "N/A"

@dataclass
class NormalizedRow:
    row_number: int  # 1-based, as shown in the spreadsheet
    date: date | None
    reading: float | None = None
    distance: float | None = None
    litres: float | None = None
    driver: str = DEFAULT_LABEL
    supplier: str = ""
    comments: str = ""
    expense: float | None = None
    next_service: float | None = None

@dataclass(frozen=True)
class ColumnProfile:
    """Which header labels feed which row field."""

    date: tuple[str, ...] = ("date",)
    reading: tuple[str, ...] = ()
    distance: tuple[str, ...] = ()
    litres: tuple[str, ...] = ()
    driver: tuple[str, ...] = ()
    supplier: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()
    expense: tuple[str, ...] = ()
    next_service: tuple[str, ...] = ()
    # service sheets carry a trip date and an expense date; the expense one is rightmost
    date_prefer_last: bool = False

KM_TRIP_COLUMNS = ColumnProfile(
    reading=("opening km",),
    distance=("km",),
    litres=("litres", "liters"),
    driver=("driver",),
)

HOURS_TRIP_COLUMNS = ColumnProfile(
    reading=("opening hrs", "opening hours"),
    litres=("litres", "liters"),
    driver=("driver",),
)

SERVICE_COLUMNS = ColumnProfile(
    reading=("opening km",),
    supplier=("supplier",),
    comments=("comments",),
    expense=("expense",),
    next_service=("next service",),
    date_prefer_last=True,
)

def _at(row, idx: int | None):
    if idx is None or idx >= len(row):
        return None
    return row[idx]

def normalize_rows(rows: RawCellGrid, header: HeaderIndex, columns: ColumnProfile) -> list[NormalizedRow]:
    date_i = header.find(columns.date, prefer_last=columns.date_prefer_last)
    reading_i = header.find(columns.reading)
    distance_i = header.find(columns.distance)
    litres_i = header.find(columns.litres)
    driver_i = header.find(columns.driver)
    supplier_i = header.find(columns.supplier)
    comments_i = header.find(columns.comments)
    expense_i = header.find(columns.expense)
    next_service_i = header.find(columns.next_service)

    out: list[NormalizedRow] = []
    for i in range(header.data_start, len(rows)):
        r = rows[i]
        if is_blank_row(r):
            continue
        out.append(NormalizedRow(
            row_number=i + 1,
            date=parse_date(_at(r, date_i)),
            reading=parse_number(_at(r, reading_i)),
            distance=parse_number(_at(r, distance_i)),
            litres=parse_number(_at(r, litres_i)),
            driver=clean_text(_at(r, driver_i)) or DEFAULT_LABEL,
            supplier=clean_text(_at(r, supplier_i)),
            comments=clean_text(_at(r, comments_i)),
            expense=parse_number(_at(r, expense_i)),
            next_service=parse_number(_at(r, next_service_i)),
        ))
    return out
