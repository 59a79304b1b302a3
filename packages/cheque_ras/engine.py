"""Weighted-average settlement ("ras") date computation.

Public API:
    - :func:`compute_ras`
    - :func:`round_half_away_from_zero`

``compute_ras`` is a pure function over a base-date string and an ordered
collection of :class:`~cheque_ras.models.ChequeRecord`. It keeps no state
between calls; callers re-run it whenever the base date or any record
changes. Malformed input never raises: it shows up as ``date_valid=False``,
``amount=0`` or an absent aggregate.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .jalali import from_day_index, parse_date_string, to_day_index
from .logging_setup import get_logger
from .models import AggregateResult, ChequeRecord, NormalizedRecord, RasComputation
from .normalizers import classify_date, parse_amount

_logger = get_logger("cheque_ras.engine")


def round_half_away_from_zero(numerator: int, denominator: int) -> int:
    """Round ``numerator / denominator`` to the nearest integer, ties away from zero.

    Computed in decimal with enough precision that a true ``.5`` is never
    confused with a nearby value (``205/2 -> 103``, ``-205/2 -> -103``).
    """

    if denominator == 0:
        raise ZeroDivisionError("denominator must be non-zero")
    with localcontext() as ctx:
        ctx.prec = max(28, len(str(abs(numerator))) + len(str(abs(denominator))) + 10)
        quotient = Decimal(numerator) / Decimal(denominator)
        return int(quotient.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_ras(base_date: str, records: Iterable[ChequeRecord]) -> RasComputation:
    """Compute per-record day offsets and the amount-weighted ras date.

    Behavior:
    - An invalid ``base_date`` leaves every ``day_offset`` as ``None`` and
      produces no aggregate, whatever the records contain.
    - A record contributes only when its amount is positive and its date is
      valid; zero-amount rows still get their offset for display.
    - The aggregate exists only when at least one record contributes. The
      weighted average offset is rounded half away from zero and the
      settlement date is the base date moved by that many days.
    """

    base = parse_date_string(base_date)
    base_index = to_day_index(base) if base is not None else None

    total_amount = 0
    total_value_days = 0
    counted = 0
    normalized: list[NormalizedRecord] = []

    for record in records:
        amount = parse_amount(record.amount)
        status = classify_date(record.date)
        day_offset: int | None = None

        if base_index is not None and status.valid:
            # classify_date succeeded, so parsing cannot fail here.
            due = parse_date_string(record.date)
            day_offset = to_day_index(due) - base_index
            if amount > 0:
                total_amount += amount
                total_value_days += amount * day_offset
                counted += 1

        normalized.append(
            NormalizedRecord(
                record=record,
                amount=amount,
                date_valid=status.valid,
                flag_invalid=status.flag_invalid,
                day_offset=day_offset,
            )
        )

    aggregate: AggregateResult | None = None
    if base_index is not None and total_amount > 0 and counted > 0:
        average = round_half_away_from_zero(total_value_days, total_amount)
        aggregate = AggregateResult(
            total_amount=total_amount,
            total_value_days=total_value_days,
            weighted_average_offset=average,
            settlement_date=from_day_index(base_index + average),
            counted_records=counted,
        )

    _logger.debug(
        "compute_ras:done base_valid=%s records=%d counted=%d total_amount=%d average_days=%s",
        base is not None,
        len(normalized),
        counted,
        total_amount,
        aggregate.weighted_average_offset if aggregate else "-",
    )

    return RasComputation(
        base_date=base_date,
        base_valid=base is not None,
        normalized=tuple(normalized),
        aggregate=aggregate,
    )


__all__ = ["compute_ras", "round_half_away_from_zero"]
