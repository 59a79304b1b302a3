"""Jalali (Solar Hijri) calendar helpers on top of ``jdatetime``.

A date's day index is its proleptic Gregorian ordinal
(``datetime.date.toordinal``), so the distance between two dates is a single
integer subtraction. ``jdatetime`` supplies the calendar itself (leap years
and conversion), for years ``MIN_YEAR`` through ``MAX_YEAR`` (1..9377).

Only :func:`to_day_index`, :func:`from_day_index` and the Gregorian bridge
raise, and only outside that year range; the validation helpers return
``False``/``None`` instead.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date as GDate

import jdatetime

from .models import CalendarDate, DayIndex

MIN_YEAR: int = jdatetime.MINYEAR
MAX_YEAR: int = jdatetime.MAXYEAR

_DATE_RE = re.compile(r"^\s*(\d+)/(\d+)/(\d+)\s*$", re.ASCII)


def _jdate(date: CalendarDate) -> jdatetime.date:
    return jdatetime.date(date.year, date.month, date.day)


def _from_jdate(value: jdatetime.date) -> CalendarDate:
    return CalendarDate(value.year, value.month, value.day)


def _days_before_month(month: int) -> int:
    # Farvardin..Shahrivar have 31 days, the rest 30 (Esfand is the exception
    # at the end of the year and never precedes another month).
    if month <= 7:
        return (month - 1) * 31
    return 186 + (month - 7) * 30


# ---------------------------------------------------------------------------
# Validity
# ---------------------------------------------------------------------------


def is_leap_year(year: int) -> bool:
    """Return whether ``year`` has a 30th of Esfand; ``False`` when out of range."""

    if year < MIN_YEAR or year > MAX_YEAR:
        return False
    return jdatetime.date(year, 1, 1).isleap()


def month_length(year: int, month: int) -> int:
    if month <= 6:
        return 31
    if month <= 11:
        return 30
    return 30 if is_leap_year(year) else 29


def is_valid_date(year: int, month: int, day: int) -> bool:
    try:
        jdatetime.date(year, month, day)
    except ValueError:
        return False
    return True


# ---------------------------------------------------------------------------
# Jalali <-> day index
# ---------------------------------------------------------------------------


def to_day_index(date: CalendarDate) -> DayIndex:
    """Return the day index (Gregorian ordinal) of a Jalali date.

    The domain is every ``(year, month, day)`` with ``MIN_YEAR <= year <=
    MAX_YEAR``. Month and day are not range-checked: out-of-range values run
    on arithmetically into the following (or preceding) days, so callers
    needing a real date must validate first. A year outside the domain raises
    ``ValueError``; :func:`parse_date_string` never yields one.
    """

    new_year = jdatetime.date(date.year, 1, 1).togregorian().toordinal()
    return new_year + _days_before_month(date.month) + date.day - 1


def from_day_index(index: DayIndex) -> CalendarDate:
    """Inverse of :func:`to_day_index`; ``ValueError`` outside the year range."""

    return _from_jdate(jdatetime.date.fromgregorian(date=GDate.fromordinal(index)))


def add_days(date: CalendarDate, days: int) -> CalendarDate:
    return from_day_index(to_day_index(date) + days)


# ---------------------------------------------------------------------------
# Gregorian bridge
# ---------------------------------------------------------------------------


def from_gregorian(value: GDate) -> CalendarDate:
    return _from_jdate(jdatetime.date.fromgregorian(date=value))


def to_gregorian(date: CalendarDate) -> GDate:
    return _jdate(date).togregorian()


def today(clock: Callable[[], GDate] | None = None) -> CalendarDate:
    """Return the current local date in the Jalali calendar.

    ``clock`` replaces the system date (it returns a Gregorian date).
    """

    if clock is None:
        return _from_jdate(jdatetime.date.today())
    return from_gregorian(clock())


# ---------------------------------------------------------------------------
# Text form
# ---------------------------------------------------------------------------


def parse_date_string(text: str) -> CalendarDate | None:
    """Parse ``YYYY/MM/DD`` (leading zeros optional) into a valid date.

    Returns ``None`` unless the text splits into exactly three digit groups
    forming a real Jalali date.
    """

    if not isinstance(text, str):
        return None
    m = _DATE_RE.match(text)
    if m is None:
        return None
    year, month, day = (int(g) for g in m.groups())
    if not is_valid_date(year, month, day):
        return None
    return CalendarDate(year, month, day)


def format_date(date: CalendarDate) -> str:
    return f"{date.year}/{date.month:02d}/{date.day:02d}"


__all__ = [
    "MAX_YEAR",
    "MIN_YEAR",
    "add_days",
    "format_date",
    "from_day_index",
    "from_gregorian",
    "is_leap_year",
    "is_valid_date",
    "month_length",
    "parse_date_string",
    "to_day_index",
    "to_gregorian",
    "today",
]
