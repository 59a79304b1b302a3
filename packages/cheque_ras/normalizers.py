"""Raw input normalization: amounts, date validity, and date-entry shaping.

Nothing here raises for malformed text. An amount that cannot be read is
``0`` (a placeholder that never contributes), and a date that cannot be read
is simply not valid.
"""

from __future__ import annotations

import re

from .jalali import format_date, parse_date_string
from .models import DateStatus

# Minimum length of a date string worth flagging as wrong ("YYYY/MM" plus one).
MIN_FLAGGABLE_DATE_LENGTH: int = 8

_MAX_DATE_DIGITS: int = 8

_DIGIT_MAP = str.maketrans(
    "۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩",
    "01234567890123456789",
)
_NON_DIGITS = re.compile(r"[^0-9]")
_GROUP_BOUNDARY = re.compile(r"\B(?=(\d{3})+(?!\d))", re.ASCII)


def normalize_digits(text: str) -> str:
    """Map Persian and Arabic-Indic digits to ASCII, leaving the rest as is."""

    return text.translate(_DIGIT_MAP)


def digits_only(raw: object) -> str:
    if raw is None:
        return ""
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    return _NON_DIGITS.sub("", normalize_digits(str(raw)))


def parse_amount(raw: object) -> int:
    """Parse an amount such as ``"12,500,000"`` into a non-negative integer.

    Every non-digit character (grouping separators, currency words, signs) is
    dropped. Empty or digit-free input yields ``0``.
    """

    digits = digits_only(raw)
    return int(digits) if digits else 0


def format_amount(value: int | str | None) -> str:
    """Group digits in threes with commas (``1234567`` -> ``"1,234,567"``)."""

    if value is None or value == "":
        return ""
    return _GROUP_BOUNDARY.sub(",", str(value))


def classify_date(raw: str) -> DateStatus:
    valid = parse_date_string(raw) is not None
    return DateStatus(
        valid=valid,
        flag_invalid=len(raw) >= MIN_FLAGGABLE_DATE_LENGTH and not valid,
    )


def shape_date_input(raw: str) -> str:
    """Reformat date entry text toward ``YYYY/MM/DD`` as digits are typed.

    Only digits are kept (at most eight); separators are inserted after the
    year and the month, so ``"1403011"`` becomes ``"1403/01/1"``.
    """

    val = digits_only(raw)[:_MAX_DATE_DIGITS]
    if len(val) > 4:
        val = val[:4] + "/" + val[4:]
    if len(val) > 7:
        val = val[:7] + "/" + val[7:]
    return val


def normalize_date_input(raw: str) -> str:
    """Clean up a finished date entry.

    Text that already reads as a valid ``Y/M/D`` date (Persian digits and
    missing leading zeros allowed) is zero-padded as is, so ``"1403/1/11"``
    stays the 11th of Farvardin. Anything else goes through
    :func:`shape_date_input`.
    """

    parsed = parse_date_string(normalize_digits(raw))
    if parsed is not None:
        return format_date(parsed)
    return shape_date_input(raw)


__all__ = [
    "MIN_FLAGGABLE_DATE_LENGTH",
    "classify_date",
    "digits_only",
    "format_amount",
    "normalize_date_input",
    "normalize_digits",
    "parse_amount",
    "shape_date_input",
]
