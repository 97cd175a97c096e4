from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable, TypeVar

from fleetlog.importers.services_importer import ServiceRecord
from fleetlog.importers.trips_importer import TripRecord

T = TypeVar("T")

def _day(v) -> str:
    if isinstance(v, datetime):
        return v.date().isoformat()
    if isinstance(v, date):
        return v.isoformat()
    return str(v)[:10]

def _num(v) -> float | None:
    # Decimal from the db and float from the sheet must compare equal
    return None if v is None else round(float(v), 2)

def trip_key(trip_date, opening_km) -> tuple:
    return (_day(trip_date), _num(opening_km))

def service_key(service_date, odo_reading, expense_amount) -> tuple:
    return (_day(service_date), _num(odo_reading), _num(expense_amount))

def trip_record_key(r: TripRecord) -> tuple:
    return trip_key(r.trip_date, r.opening_km)

def service_record_key(r: ServiceRecord) -> tuple:
    return service_key(r.service_date, r.odo_reading, r.expense_amount)

def filter_new(records: Iterable[T], existing: set[tuple], key: Callable[[T], tuple]) -> list[T]:
    """Keep records whose key is not persisted yet, preserving order.

    Only stored keys are filtered: two same-day refuels without a reading are
    both real rows of the sheet.
    """
    return [r for r in records if key(r) not in existing]
