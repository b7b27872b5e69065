"""Billing period (YYYY-MM) and calendar-day helpers."""

import calendar
import re
from datetime import date

from tenancy_engine.exceptions import InvalidPeriodError

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_period(period: str) -> tuple[int, int]:
    """Split a period identifier into ``(year, month)``.

    Raises
    ------
    InvalidPeriodError
        If the value is not a string of the form ``YYYY-MM`` with a valid month.
    """
    if not isinstance(period, str):
        raise InvalidPeriodError(f"Period must be a string, got {type(period).__name__}")
    match = _PERIOD_RE.match(period)
    if not match:
        raise InvalidPeriodError(f"Malformed period {period!r}, expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Malformed period {period!r}, month out of range")
    return year, month


def make_period(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def previous_period(period: str) -> str:
    year, month = parse_period(period)
    if month == 1:
        return make_period(year - 1, 12)
    return make_period(year, month - 1)


def next_period(period: str) -> str:
    year, month = parse_period(period)
    if month == 12:
        return make_period(year + 1, 1)
    return make_period(year, month + 1)


def format_period(period: str) -> str:
    """Human-readable period label, e.g. ``"January 2024"``."""
    year, month = parse_period(period)
    return f"{calendar.month_name[month]} {year}"


def days_between(start: date, end: date) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    return (end - start).days
