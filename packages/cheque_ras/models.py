"""Data models for ``cheque_ras``.

Records entering the package are raw strings exactly as typed, imported or
extracted (``ChequeRecord``). Everything else here is derived by the engine and
recomputed on every change; nothing is persisted.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Calendar values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True)
class CalendarDate:
    """A Jalali calendar date.

    Instances are plain value triples; they are not validated on construction.
    Use :func:`cheque_ras.jalali.is_valid_date` (or build them through
    :func:`cheque_ras.jalali.parse_date_string`) when validity matters. Field
    order makes the default ordering chronological for valid dates.
    """

    year: int
    month: int
    day: int

    def __str__(self) -> str:
        return f"{self.year}/{self.month:02d}/{self.day:02d}"


DayIndex: TypeAlias = int
"""Proleptic Gregorian ordinal of a date; differences are exact day counts."""


# ---------------------------------------------------------------------------
# Raw input records
# ---------------------------------------------------------------------------


def new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class ChequeRecord:
    """A cheque as entered: raw amount text and raw due-date text.

    ``id`` is an opaque, stable key for callers that need list identity (the
    worksheet, a UI). The engine never reads it; position in the input
    sequence is all it relies on.
    """

    amount: str = ""
    date: str = ""
    id: str = field(default_factory=new_record_id)

    @property
    def is_blank(self) -> bool:
        return not self.amount and not self.date


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DateStatus:
    """Validity of a raw date string.

    ``flag_invalid`` is only raised once the text is long enough to be a
    finished date (8 characters), so half-typed input is not reported.
    """

    valid: bool
    flag_invalid: bool


@dataclass(frozen=True, slots=True)
class NormalizedRecord:
    record: ChequeRecord
    amount: int
    date_valid: bool
    flag_invalid: bool
    day_offset: int | None = None

    @property
    def contributes(self) -> bool:
        return self.amount > 0 and self.day_offset is not None

    @property
    def days_display(self) -> str:
        return "-" if self.day_offset is None else str(self.day_offset)


@dataclass(frozen=True, slots=True)
class AggregateResult:
    """Amount-weighted summary over the contributing records.

    Attributes
    ----------
    total_amount:
        Sum of contributing amounts; always positive.
    total_value_days:
        Sum of ``amount * day_offset`` over contributing records.
    weighted_average_offset:
        ``total_value_days / total_amount`` rounded half away from zero.
    settlement_date:
        Base date moved by ``weighted_average_offset`` days (the "ras" date).
    counted_records:
        Number of contributing records.
    """

    total_amount: int
    total_value_days: int
    weighted_average_offset: int
    settlement_date: CalendarDate
    counted_records: int


@dataclass(frozen=True, slots=True)
class RasComputation:
    """Full output of one engine pass, in input order."""

    base_date: str
    base_valid: bool
    normalized: tuple[NormalizedRecord, ...]
    aggregate: AggregateResult | None = None

    @property
    def base_flag_invalid(self) -> bool:
        return not self.base_valid and len(self.base_date) >= 8


# ---------------------------------------------------------------------------
# DTO for image extraction output
# ---------------------------------------------------------------------------


class ExtractedCheque(BaseModel):
    """Validated model output for a single cheque image.

    Either field may be ``None`` when the model could not read it. ``amount``
    accepts numbers or digit strings (grouping separators allowed) and is
    stored as a non-negative integer.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    amount: int | None = None
    date: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, v: object) -> int | None:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, int):
            return abs(v)
        if isinstance(v, float):
            return abs(int(v)) if v.is_integer() else abs(round(v))
        if isinstance(v, str):
            from .normalizers import parse_amount

            parsed = parse_amount(v)
            return parsed or None
        raise ValueError(f"amount must be a number or digit string, got {type(v).__name__}")

    @field_validator("date")
    @classmethod
    def _blank_date_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v or None

    @property
    def is_empty(self) -> bool:
        return not self.amount and not self.date
