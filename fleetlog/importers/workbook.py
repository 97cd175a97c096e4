from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from io import BytesIO
from typing import Union
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from fleetlog.importers.errors import WorkbookReadError

CellValue = Union[str, int, float, date, datetime, None]
RawCellGrid = list[list[CellValue]]

MIN_SHEET_ROWS = 2

@dataclass(frozen=True)
class SheetGrid:
    name: str
    rows: RawCellGrid

    @property
    def license_plate(self) -> str:
        return self.name.strip()

    @property
    def is_empty(self) -> bool:
        return len(self.rows) < MIN_SHEET_ROWS

def bytes_to_filelike(data: bytes):
    return BytesIO(data)

def _cell(v) -> CellValue:
    if isinstance(v, str):
        return v if v.strip() else None
    return v

def read_workbook(data: bytes) -> list[SheetGrid]:
    if not data:
        raise WorkbookReadError("Workbook is empty")
    try:
        wb = load_workbook(filename=bytes_to_filelike(data), data_only=True)
    except (BadZipFile, InvalidFileException, KeyError, OSError, ValueError) as e:
        raise WorkbookReadError(f"Cannot read workbook: {e}") from e

    sheets: list[SheetGrid] = []
    for ws in wb.worksheets:
        rows = [[_cell(c) for c in r] for r in ws.iter_rows(values_only=True)]
        # formatted-but-empty rows at the bottom are not data
        while rows and all(c is None for c in rows[-1]):
            rows.pop()
        sheets.append(SheetGrid(name=ws.title, rows=rows))
    return sheets
