"""
Tolerant value converters for hire export rows.

ZERO I/O.  CSV cells arrive as strings, XLSX cells as ints, floats,
datetimes or strings; every converter accepts all of them.  Empty cells
and the literal text "null" become None.  Anything present but
unparseable raises ValueError so the importer can report the row.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

_TRUE = frozenset({"1", "true", "yes", "y"})
_FALSE = frozenset({"0", "false", "no", "n"})

_LEADING_INT = re.compile(r"^[-+]?\d+")

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%m-%d-%Y")
_DATETIME_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
)


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        text = value.strip()
        return text == "" or text.lower() == "null"
    return False


def to_text(value: Any) -> str | None:
    if _blank(value):
        return None
    return str(value).strip()


def to_int(value: Any) -> int | None:
    """Integer from a cell; "12 " and "12abc" both give 12, "abc" gives None."""
    if _blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value).strip())
    return int(match.group(0)) if match else None


def to_bool(value: Any) -> bool | None:
    """1/true/yes/y and 0/false/no/n, case-insensitive; anything else None."""
    if _blank(value):
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return None


def to_datetime(value: Any) -> datetime | None:
    """
    Naive timestamp from a cell.

    ISO-8601 text with an offset keeps its wall-clock time and drops the
    offset, so a hire reviewed at 23:30 -05:00 stays on its local day.

    Raises:
        ValueError: text that matches no supported format.
    """
    if _blank(value):
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    try:
        return datetime.fromisoformat(text).replace(tzinfo=None)
    except ValueError:
        pass
    for fmt in _DATETIME_FORMATS + _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date: {text!r}")


def to_date(value: Any) -> date | None:
    """
    Calendar date from a cell; any time part is dropped.

    Raises:
        ValueError: text that matches no supported format.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = to_datetime(value)
    return parsed.date() if parsed is not None else None
