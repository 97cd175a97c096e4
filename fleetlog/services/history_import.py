from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleetlog.core.config import settings
from fleetlog.importers.dedup import filter_new, service_record_key, trip_record_key
from fleetlog.importers.services_importer import parse_service_sheet
from fleetlog.importers.trips_importer import is_hours_based, parse_trip_sheet
from fleetlog.importers.workbook import SheetGrid, read_workbook
from fleetlog.models.enums import ImportKind
from fleetlog.services.fleet_store import FleetStore

log = structlog.get_logger(__name__)

RECORD_NOUN = {
    ImportKind.trips: "trip",
    ImportKind.services: "service",
}

@dataclass
class ImportSummary:
    kind: ImportKind
    sheets_total: int = 0
    sheets_processed: int = 0
    sheets_skipped: int = 0
    rows_skipped: int = 0
    records_imported: int = 0
    records_duplicate: int = 0
    trucks_updated: int = 0
    failed_sheets: dict[str, str] = field(default_factory=dict)

    @property
    def message(self) -> str:
        msg = (
            f"Import complete! Processed {self.sheets_processed} sheets and imported "
            f"{self.records_imported} new {RECORD_NOUN[self.kind]} records."
        )
        extras = []
        if self.records_duplicate:
            extras.append(f"{self.records_duplicate} duplicates")
        if self.rows_skipped:
            extras.append(f"{self.rows_skipped} rows")
        if self.sheets_skipped:
            extras.append(f"{self.sheets_skipped} sheets")
        if extras:
            msg += " Skipped " + ", ".join(extras) + "."
        if self.failed_sheets:
            msg += f" Failed sheets: {', '.join(sorted(self.failed_sheets))}."
        return msg

    def as_dict(self) -> dict:
        out = asdict(self)
        out["kind"] = self.kind.value
        out["message"] = self.message
        return out

def _fail(summary: ImportSummary, plate: str, stage: str, e: SQLAlchemyError) -> None:
    err = str(getattr(e, "orig", None) or e)
    log.error(f"{stage}_failed", plate=plate, error=err)
    summary.failed_sheets[plate] = err

def _skip(summary: ImportSummary, sheet: SheetGrid, reason: str) -> None:
    log.info("sheet_skipped", sheet=sheet.name, reason=reason)
    summary.sheets_skipped += 1

def _import_trip_sheet(store: FleetStore, sheet: SheetGrid, summary: ImportSummary, *, cutoff: date) -> None:
    plate = sheet.license_plate
    hours = is_hours_based(plate, settings.hours_patterns())
    batch = parse_trip_sheet(sheet.rows, hours_based=hours, cutoff=cutoff, max_distance=settings.max_trip_distance_km)
    if batch is None:
        _skip(summary, sheet, "header_not_found")
        return

    try:
        with store.session.begin_nested():
            truck_id = store.upsert_truck(plate)
            existing = store.trip_keys(truck_id)
    except SQLAlchemyError as e:
        _fail(summary, plate, "truck_lookup", e)
        return
    summary.sheets_processed += 1
    summary.rows_skipped += batch.rows_skipped

    new = filter_new(batch.records, existing, trip_record_key)
    summary.records_duplicate += len(batch.records) - len(new)
    if not new:
        log.info("sheet_up_to_date", plate=plate, parsed=batch.rows_parsed, built=len(batch.records))
        return
    try:
        with store.session.begin_nested():
            inserted = store.insert_trips(truck_id, new)
    except SQLAlchemyError as e:
        _fail(summary, plate, "trip_insert", e)
        return
    summary.records_imported += inserted
    log.info("sheet_imported", plate=plate, hours_based=hours, parsed=batch.rows_parsed, inserted=inserted, duplicates=len(batch.records) - len(new))

def _import_service_sheet(store: FleetStore, sheet: SheetGrid, summary: ImportSummary, *, cutoff: date) -> None:
    plate = sheet.license_plate
    try:
        with store.session.begin_nested():
            truck_id = store.find_truck(plate)
    except SQLAlchemyError as e:
        _fail(summary, plate, "truck_lookup", e)
        return
    if truck_id is None:
        _skip(summary, sheet, "truck_not_found")
        return
    parsed = parse_service_sheet(sheet.rows, cutoff=cutoff)
    if parsed is None:
        _skip(summary, sheet, "header_not_found")
        return
    batch, notes = parsed

    try:
        with store.session.begin_nested():
            existing = store.service_keys(truck_id)
    except SQLAlchemyError as e:
        _fail(summary, plate, "service_lookup", e)
        return
    summary.sheets_processed += 1
    summary.rows_skipped += batch.rows_skipped

    update = notes.as_update()
    if update:
        try:
            with store.session.begin_nested():
                if store.update_truck_service_info(truck_id, **update):
                    summary.trucks_updated += 1
        except SQLAlchemyError as e:
            # the service rows below are still worth importing
            log.error("truck_update_failed", plate=plate, error=str(e))

    new = filter_new(batch.records, existing, service_record_key)
    summary.records_duplicate += len(batch.records) - len(new)
    if not new:
        return
    try:
        with store.session.begin_nested():
            inserted = store.insert_services(truck_id, new)
    except SQLAlchemyError as e:
        _fail(summary, plate, "service_insert", e)
        return
    summary.records_imported += inserted
    log.info("sheet_imported", plate=plate, parsed=batch.rows_parsed, inserted=inserted, duplicates=len(batch.records) - len(new))

SHEET_IMPORTERS = {
    ImportKind.trips: _import_trip_sheet,
    ImportKind.services: _import_service_sheet,
}

def run_import(
    session: Session,
    kind: ImportKind,
    data: bytes,
    *,
    cutoff: date | None = None,
    import_job_id: int | None = None,
) -> ImportSummary:
    """Import one workbook, one sheet per vehicle, in workbook order.

    Unreadable workbooks raise ``WorkbookReadError``. Anything that goes wrong
    inside a single sheet is logged, rolled back to that sheet's savepoint and
    reported in ``failed_sheets``; the remaining sheets are still imported.
    """
    kind = ImportKind(kind)
    cutoff = cutoff or settings.import_start_date
    sheets = read_workbook(data)
    store = FleetStore(session, import_job_id=import_job_id)
    summary = ImportSummary(kind=kind)
    import_sheet = SHEET_IMPORTERS[kind]

    log.info("import_started", kind=kind.value, sheets=len(sheets), cutoff=cutoff.isoformat())
    for sheet in sheets:
        summary.sheets_total += 1
        if sheet.is_empty:
            _skip(summary, sheet, "insufficient_rows")
            continue
        import_sheet(store, sheet, summary, cutoff=cutoff)
    log.info("import_finished", **summary.as_dict())
    return summary

def import_trips(session: Session, data: bytes, **kwargs) -> ImportSummary:
    return run_import(session, ImportKind.trips, data, **kwargs)

def import_services(session: Session, data: bytes, **kwargs) -> ImportSummary:
    return run_import(session, ImportKind.services, data, **kwargs)
