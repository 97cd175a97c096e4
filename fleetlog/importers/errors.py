from __future__ import annotations

class ImportFailure(Exception):
    """Fatal import error: the whole workbook is rejected."""

class WorkbookReadError(ImportFailure):
    pass
