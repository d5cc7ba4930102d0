# club_dashboard/parsing.py
"""
Lenient field parsers for spreadsheet rows.

Sheet cells arrive as numbers, numeric strings, blanks or free text. None of these
helpers raise: anything unusable comes back as None (or the given default).
"""

from __future__ import annotations

import math
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Iterable, Optional

from dateutil import parser as date_parser


def safe_float(v: Any) -> Optional[float]:
    """Convert a cell to a finite float; None for blanks, booleans, text, NaN/inf."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        n = float(v)
    elif isinstance(v, str):
        s = v.strip()
        if not s:
            return None
        try:
            n = float(s)
        except ValueError:
            return None
    else:
        return None
    return n if math.isfinite(n) else None


def safe_str(v: Any) -> str:
    """Stringify a cell for display; None becomes ''."""
    if v is None:
        return ""
    return str(v).strip()


# Two fallback defaults that differ in year, month and day. A free-text date
# that leaves any of them out comes back different under each and is rejected.
_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _parse_full_date(s: str) -> Optional[datetime]:
    """Parse free text with dateutil, only when it spells out year, month and day."""
    try:
        a, b = (date_parser.parse(s, default=d) for d in _DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if (a.year, a.month, a.day) != (b.year, b.month, b.day):
        return None
    return a


def parse_datetime(v: Any, default_tz: tzinfo = timezone.utc) -> Optional[datetime]:
    """
    Parse a sheet date cell into an aware datetime.

    Accepts ISO strings (with or without 'Z'), free-text dates dateutil understands
    as long as they name the year, month and day, and datetime objects. Partial
    dates ("12", "Sat") are rejected rather than completed from today. Naive
    values are interpreted in default_tz.
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, datetime):
        dt = v
    elif isinstance(v, str):
        s = v.strip()
        if not s:
            return None
        try:
            dt = date_parser.isoparse(s)
        except (ValueError, OverflowError):
            dt = _parse_full_date(s)
            if dt is None:
                return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=default_tz)
    return dt


def first_present(row: Dict[str, Any], keys: Iterable[str]) -> Any:
    """Return the first non-None value among candidate column names."""
    for key in keys:
        val = row.get(key)
        if val is not None:
            return val
    return None
