from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date

import structlog

from fleetlog.importers.headers import TRIP_ANCHORS, locate_header
from fleetlog.importers.rows import HOURS_TRIP_COLUMNS, KM_TRIP_COLUMNS, NormalizedRow, normalize_rows
from fleetlog.importers.workbook import RawCellGrid

log = structlog.get_logger(__name__)

DEFAULT_MAX_DISTANCE_KM = 5000.0
DEFAULT_HOURS_PATTERNS = ("forklift", "lxc821mp")

@dataclass
class TripRecord:
    trip_date: date
    opening_km: float | None
    total_km: float
    liters_filled: float | None
    worker_name: str
    is_hours_based: bool = False

@dataclass
class TripBatch:
    records: list[TripRecord] = field(default_factory=list)
    rows_parsed: int = 0
    rows_skipped: int = 0

def is_hours_based(license_plate: str, patterns=DEFAULT_HOURS_PATTERNS) -> bool:
    plate = (license_plate or "").strip().lower()
    return any(p in plate for p in patterns)

def _sort_key(r: NormalizedRow):
    # rows without a reading go last within their day
    return (r.date, math.inf if r.reading is None else r.reading)

def _window(rows: list[NormalizedRow], keep, cutoff: date) -> tuple[list[NormalizedRow], int]:
    kept = sorted((r for r in rows if r.date is not None and keep(r)), key=_sort_key)
    in_window = [r for r in kept if r.date >= cutoff]
    skipped = len(rows) - len(in_window)
    if skipped:
        log.debug("trip_rows_skipped", skipped=skipped, before_cutoff=len(kept) - len(in_window), cutoff=cutoff.isoformat())
    return in_window, skipped

def _baseline(r: NormalizedRow, *, hours: bool) -> TripRecord:
    return TripRecord(
        trip_date=r.date,
        opening_km=r.reading,
        total_km=0.0,
        liters_filled=None,
        worker_name=r.driver,
        is_hours_based=hours,
    )

def build_km_trips(rows: list[NormalizedRow], cutoff: date, *, max_distance: float = DEFAULT_MAX_DISTANCE_KM) -> TripBatch:
    """Turn odometer rows of a road vehicle into trips.

    The first row on/after ``cutoff`` becomes a zero-distance baseline without
    fuel. Each later trip covers the odometer delta from the previous row, or
    the sheet's own ``km`` column when the odometer does not move forward.
    Totals outside ``[0, max_distance]`` are treated as typos and zeroed.
    """
    valid, skipped = _window(rows, lambda r: r.reading is not None or r.litres is not None, cutoff)
    batch = TripBatch(rows_parsed=len(rows), rows_skipped=skipped)
    if not valid:
        return batch

    batch.records.append(_baseline(valid[0], hours=False))
    for prev, cur in zip(valid, valid[1:]):
        total = 0.0
        if cur.reading is not None and prev.reading is not None and cur.reading > prev.reading:
            total = cur.reading - prev.reading
        elif cur.distance is not None and cur.distance > 0:
            total = cur.distance
        if total < 0 or total > max_distance:
            log.debug("trip_distance_clamped", date=cur.date.isoformat(), total=total, row=cur.row_number)
            total = 0.0
        batch.records.append(TripRecord(
            trip_date=cur.date,
            opening_km=cur.reading,
            total_km=total,
            liters_filled=cur.litres,
            worker_name=cur.driver,
        ))
    return batch

def build_hours_trips(rows: list[NormalizedRow], cutoff: date) -> TripBatch:
    valid, skipped = _window(rows, lambda r: r.reading is not None, cutoff)
    batch = TripBatch(rows_parsed=len(rows), rows_skipped=skipped)
    if not valid:
        return batch

    batch.records.append(_baseline(valid[0], hours=True))
    for prev, cur in zip(valid, valid[1:]):
        hours = cur.reading - prev.reading
        batch.records.append(TripRecord(
            trip_date=cur.date,
            opening_km=cur.reading,
            total_km=hours if hours > 0 else 0.0,
            liters_filled=cur.litres,
            worker_name=cur.driver,
            is_hours_based=True,
        ))
    return batch

def parse_trip_sheet(
    rows: RawCellGrid,
    *,
    hours_based: bool,
    cutoff: date,
    max_distance: float = DEFAULT_MAX_DISTANCE_KM,
) -> TripBatch | None:
    """Header discovery, row normalization and trip building for one sheet.

    Returns None when the sheet has no recognizable header.
    """
    header = locate_header(rows, anchors=TRIP_ANCHORS)
    if header is None:
        return None
    if hours_based:
        return build_hours_trips(normalize_rows(rows, header, HOURS_TRIP_COLUMNS), cutoff)
    return build_km_trips(normalize_rows(rows, header, KM_TRIP_COLUMNS), cutoff, max_distance=max_distance)
