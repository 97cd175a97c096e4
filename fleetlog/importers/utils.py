from __future__ import annotations

import math
import re
from datetime import datetime, date, timedelta, timezone

# 1970-01-01 as a spreadsheet serial day number
EXCEL_EPOCH_OFFSET = 25569
UNIX_EPOCH = datetime(1970, 1, 1)

TEXT_DATE_FORMATS = (
    "%d %B %Y",
    "%d %b %Y",
    "%d %B %y",
    "%d %b %y",
    "%B %d %Y",
    "%b %d %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%a %b %d %Y",
    "%Y%m%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
)

_QUOTES_AND_SEPARATORS = re.compile(r"[\"'`,\s]")
_CURRENCY_PREFIX = re.compile(r"^[+-]?[A-Za-z$€£¥₹]+")
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_EMBEDDED_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_LEADING_INT = re.compile(r"^\s*(\d+)")

def norm_header(s: str) -> str:
    s = (s or "").strip().lower()
    s = s.replace("\n", " ").replace("\t", " ")
    s = re.sub(r"\s+", " ", s)
    return s

def clean_text(v) -> str:
    if v is None:
        return ""
    return str(v).replace("\xa0", " ").strip()

def is_blank_row(row) -> bool:
    return not row or all(c is None or clean_text(c) == "" for c in row)

def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)

def _leading_int(s: str) -> int | None:
    m = _LEADING_INT.match(s)
    return int(m.group(1)) if m else None

def _safe_date(year: int | None, month: int | None, day: int | None) -> date | None:
    if year is None or month is None or day is None:
        return None
    if year < 100:
        year += 2000
    try:
        return date(year, month, day)
    except ValueError:
        return None

def _from_serial(n: float) -> date | None:
    try:
        dt = UNIX_EPOCH + timedelta(milliseconds=round((n - EXCEL_EPOCH_OFFSET) * 86400 * 1000))
    except OverflowError:
        return None
    return dt.date()

def _from_parts(s: str) -> date | None:
    if "." in s:
        parts = s.split(".")
        if len(parts) == 3:
            return _safe_date(_leading_int(parts[2]), _leading_int(parts[1]), _leading_int(parts[0]))
        # "2024-03-15T10:00:00.000Z": the dot belongs to the time part
    delimiter = "/" if "/" in s else ("-" if "-" in s else None)
    if delimiter is None:
        return None
    parts = s.split(delimiter)
    if len(parts) != 3:
        return None
    if len(parts[0].strip()) == 4:
        return _safe_date(_leading_int(parts[0]), _leading_int(parts[1]), _leading_int(parts[2]))
    return _safe_date(_leading_int(parts[2]), _leading_int(parts[1]), _leading_int(parts[0]))

def parse_date(v) -> date | None:
    """Normalize a cell value to a calendar date, or None when it is not a date.

    Accepts native dates, spreadsheet serial numbers, ``DD.MM.YY[YY]``,
    ``DD/MM/YYYY``, ``DD-MM-YYYY``, ``YYYY-MM-DD`` and a few textual forms
    (``15 March 2024``). Never raises.
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, datetime):
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc)
        return v.date()
    if isinstance(v, date):
        return v
    if _is_number(v):
        if math.isnan(v) or v <= 0:
            return None
        return _from_serial(float(v))
    s = clean_text(v)
    if not s:
        return None
    d = _from_parts(s)
    if d is not None:
        return d
    for fmt in TEXT_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            pass
    return None

def parse_number(v) -> float | None:
    """Parse a numeric cell, tolerating currency, quotes and thousands separators.

    Returns None when the value is absent or garbled, so callers can tell a
    missing reading from a real zero.
    """
    if v is None or isinstance(v, bool):
        return None
    if _is_number(v):
        f = float(v)
        return None if math.isnan(f) else f
    s = _QUOTES_AND_SEPARATORS.sub("", str(v))
    if not s:
        return None
    sign = "-" if s.startswith("-") else ""
    s = _CURRENCY_PREFIX.sub("", s)
    m = _LEADING_NUMBER.match(s)
    if not m:
        return None
    token = m.group(0)
    if sign and not token.startswith("-"):
        token = sign + token
    return float(token)

def extract_number(text) -> float | None:
    # first number embedded anywhere in free text, e.g. "SERVICE INTERVAL 15,000 KM"
    s = clean_text(text).replace(",", "").replace(" ", "")
    m = _EMBEDDED_NUMBER.search(s)
    return float(m.group(0)) if m else None
