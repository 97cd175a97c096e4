from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from fleetlog.importers.headers import SERVICE_ANCHORS, HeaderIndex, locate_header
from fleetlog.importers.rows import SERVICE_COLUMNS, NormalizedRow, normalize_rows
from fleetlog.importers.utils import extract_number, parse_number
from fleetlog.importers.workbook import RawCellGrid

SERVICE_INTERVAL_MARKER = "SERVICE INTERVAL"

# flag -> keywords matched case-insensitively against supplier + comments
MAINTENANCE_KEYWORDS = {
    "oil_filter": ("oil",),
    "diesel_filter": ("diesel",),
    "air_filter": ("air",),
    "tires": ("tyre", "tire"),
    "brakes": ("brake", "skim"),
}

@dataclass
class ServiceRecord:
    service_date: date
    odo_reading: float | None
    supplier: str
    comments: str
    expense_amount: float
    oil_filter: bool = False
    diesel_filter: bool = False
    air_filter: bool = False
    tires: bool = False
    brakes: bool = False

@dataclass
class ServiceBatch:
    records: list[ServiceRecord] = field(default_factory=list)
    rows_parsed: int = 0
    rows_skipped: int = 0

@dataclass
class ServiceAnnotations:
    service_interval_km: float | None = None
    next_service_km: float | None = None

    def as_update(self) -> dict:
        return {k: v for k, v in (("service_interval_km", self.service_interval_km), ("next_service_km", self.next_service_km)) if v is not None}

def infer_maintenance_flags(supplier: str, comments: str) -> dict[str, bool]:
    text = f"{supplier or ''} {comments or ''}".lower()
    return {flag: any(k in text for k in keys) for flag, keys in MAINTENANCE_KEYWORDS.items()}

def _qualifies(r: NormalizedRow, cutoff: date) -> bool:
    if r.date is None or r.date < cutoff:
        return False
    if r.expense is None or r.expense <= 0:
        return False
    return bool(r.supplier or r.comments)

def build_services(rows: list[NormalizedRow], cutoff: date) -> ServiceBatch:
    batch = ServiceBatch(rows_parsed=len(rows))
    for r in rows:
        if not _qualifies(r, cutoff):
            batch.rows_skipped += 1
            continue
        batch.records.append(ServiceRecord(
            service_date=r.date,
            odo_reading=r.reading,
            supplier=r.supplier,
            comments=r.comments,
            expense_amount=r.expense,
            **infer_maintenance_flags(r.supplier, r.comments),
        ))
    return batch

def extract_services(rows: RawCellGrid, header: HeaderIndex, cutoff: date) -> ServiceBatch:
    return build_services(normalize_rows(rows, header, SERVICE_COLUMNS), cutoff)

def extract_service_annotations(rows: RawCellGrid, header: HeaderIndex) -> ServiceAnnotations:
    """Vehicle-level values written around the service table.

    ``SERVICE INTERVAL ...`` notes may sit anywhere in the sheet; the last one
    wins. The next-service threshold is the bottom-most positive value of the
    ``next service`` column.
    """
    out = ServiceAnnotations()
    for r in rows:
        for c in r or ():
            if isinstance(c, str) and SERVICE_INTERVAL_MARKER in c.upper():
                interval = extract_number(c)
                if interval is not None:
                    out.service_interval_km = interval

    idx = header.get("next service")
    if idx is not None:
        for r in reversed(rows[header.data_start:]):
            v = parse_number(r[idx]) if r and idx < len(r) else None
            if v is not None and v > 0:
                out.next_service_km = v
                break
    return out

def parse_service_sheet(rows: RawCellGrid, *, cutoff: date) -> tuple[ServiceBatch, ServiceAnnotations] | None:
    header = locate_header(rows, anchors=SERVICE_ANCHORS)
    if header is None:
        return None
    return extract_services(rows, header, cutoff), extract_service_annotations(rows, header)

