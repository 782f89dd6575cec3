"""Utility functions for the economy calculator.

This module provides helpers for parsing user input into Python data types and
for handling dates, including adding months, counting whole months between two
dates and normalizing ``YYYY-MM`` / ``YYYY-MM-DD`` strings to the first day of
the month. Numeric helpers coerce loosely typed input (form fields, JSON
documents, provider payloads) into ``Decimal`` without ever producing NaN.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, getcontext
from typing import Any

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

ZERO = Decimal("0")

MONTH_LABELS = [
    "jan",
    "feb",
    "mar",
    "apr",
    "mai",
    "jun",
    "jul",
    "aug",
    "sep",
    "okt",
    "nov",
    "des",
]


def parse_year_month(ym: str) -> date:
    """Parse a YYYY-MM or YYYY-MM-DD string into a ``date`` (first day of month).

    Parameters
    ----------
    ym: str
        A string in the form ``"YYYY-MM"``. The day component, if present,
        will be ignored.

    Returns
    -------
    date
        A date object representing the first day of the specified month.

    Raises
    ------
    ValueError
        If the string is not a valid year-month.
    """
    try:
        parts = ym.strip()[:10].split("-")
        if len(parts) < 2:
            raise ValueError
        year = int(parts[0])
        month = int(parts[1])
        return date(year, month, 1)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid year-month string: {ym}") from exc


def parse_date(value: Any) -> date:
    """Parse an ISO date (``YYYY-MM-DD``) keeping the day component.

    ``date`` and ``datetime`` instances are accepted as-is. A bare ``YYYY-MM``
    falls back to the first day of that month.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return parse_year_month(str(value))


def first_of_month(dt: date) -> date:
    return dt.replace(day=1)


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def format_month_year(dt: date) -> str:
    """Short Norwegian month label followed by the year, e.g. ``mai 2024``."""
    return f"{MONTH_LABELS[dt.month - 1]} {dt.year}"


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "").replace(" ", "")
        return Decimal(cleaned)
    except (AttributeError, InvalidOperation) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Coerce ``value`` to a finite ``Decimal``.

    Missing, non-numeric and non-finite input (None, "", "abc", NaN, inf)
    yields ``default`` rather than propagating an error. Booleans are not
    treated as numbers.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
    if not result.is_finite():
        return default
    return result


def to_amount(value: Any) -> Decimal:
    """Coerce a monetary field to a non-negative ``Decimal``.

    Numbers are used directly; strings are stripped of everything but digits
    (``"4 500 000 kr"`` becomes 4500000). Negative or unusable input yields 0.
    """
    if isinstance(value, str):
        digits = re.sub(r"[^\d]", "", value)
        return Decimal(digits) if digits else ZERO
    amount = to_decimal(value)
    return amount if amount > 0 else ZERO


def to_int(value: Any, default: int = 0) -> int:
    """Coerce ``value`` to ``int`` by truncation, falling back to ``default``."""
    return int(to_decimal(value, Decimal(default)))
