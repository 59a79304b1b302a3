"""Adapter mapping spreadsheet-like rows to :class:`ChequeRecord` values.

Recognized headers (case-insensitive, surrounding whitespace ignored):

- amount: ``amount``, ``مبلغ``, ``mablagh``
- date: ``date``, ``تاریخ``, ``tarikh``

The first non-empty alias wins. Rows with neither an amount nor a date are
skipped. Values stay raw text (digits normalized to ASCII) so the engine, not
the importer, decides what is valid. Native spreadsheet date cells are
Gregorian and are converted to ``YYYY/MM/DD`` Jalali text.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from datetime import date, datetime
from typing import Any

from ...jalali import format_date, from_gregorian
from ...models import ChequeRecord
from ...normalizers import normalize_digits

AMOUNT_HEADERS: tuple[str, ...] = ("amount", "مبلغ", "mablagh")
DATE_HEADERS: tuple[str, ...] = ("date", "تاریخ", "tarikh")


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        # Native date cells are Gregorian.
        return format_date(from_gregorian(value))
    return normalize_digits(str(value)).strip()


def _pick(row: Mapping[str, Any], aliases: tuple[str, ...]) -> str:
    for alias in aliases:
        text = _cell_text(row.get(alias))
        if text:
            return text
    return ""


def _normalize_keys(row: Mapping[Any, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in row.items():
        if k is None:
            continue
        key = str(k).strip().lower()
        # Keep the first column when a header is repeated.
        out.setdefault(key, v)
    return out


def has_known_headers(headers: Iterable[Any]) -> bool:
    keys = {str(h).strip().lower() for h in headers if h is not None}
    return any(a in keys for a in AMOUNT_HEADERS + DATE_HEADERS)


def to_cheques(rows: Iterable[Mapping[Any, Any]]) -> Iterator[ChequeRecord]:
    """Convert rows to cheque records in input order."""

    for row in rows:
        normalized = _normalize_keys(row)
        amount = _pick(normalized, AMOUNT_HEADERS)
        date_text = _pick(normalized, DATE_HEADERS)
        if not amount and not date_text:
            continue
        yield ChequeRecord(amount=amount, date=date_text)


__all__ = ["AMOUNT_HEADERS", "DATE_HEADERS", "has_known_headers", "to_cheques"]
