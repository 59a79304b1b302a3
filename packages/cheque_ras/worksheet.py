"""Editable cheque list plus base date, recomputed on demand.

``ChequeWorksheet`` is the stateful counterpart of :func:`compute_ras`: it
owns the record list and the base-date text that a UI edits, and hands a
consistent snapshot of both to the engine on every :meth:`compute` call.
A fresh worksheet (and one that was cleared) holds a single blank row, which
imported rows replace instead of following.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .engine import compute_ras
from .jalali import format_date, today
from .logging_setup import get_logger
from .models import ChequeRecord, RasComputation
from .normalizers import digits_only, normalize_date_input

_logger = get_logger("cheque_ras.worksheet")


class ChequeWorksheet:
    def __init__(
        self,
        base_date: str | None = None,
        records: Iterable[ChequeRecord] | None = None,
    ) -> None:
        self.base_date: str = base_date if base_date is not None else format_date(today())
        self._records: list[ChequeRecord] = list(records) if records is not None else []
        if not self._records:
            self._records.append(ChequeRecord())

    # ---- Read access -------------------------------------------------------

    @property
    def records(self) -> tuple[ChequeRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def is_placeholder_only(self) -> bool:
        return len(self._records) == 1 and self._records[0].is_blank

    def _position(self, record_id: str) -> int:
        for pos, record in enumerate(self._records):
            if record.id == record_id:
                return pos
        raise KeyError(record_id)

    # ---- Edits -------------------------------------------------------------

    def set_base_date(self, raw: str) -> str:
        self.base_date = normalize_date_input(raw)
        return self.base_date

    def add(self, amount: str = "", date: str = "") -> ChequeRecord:
        record = ChequeRecord(amount=digits_only(amount), date=normalize_date_input(date))
        self._records.append(record)
        return record

    def update(
        self,
        record_id: str,
        *,
        amount: str | None = None,
        date: str | None = None,
    ) -> ChequeRecord:
        """Replace the amount and/or date of a record, keeping its id and position.

        Amount text is reduced to its digits. Date text that is already a
        valid date is zero-padded; other text is shaped toward ``YYYY/MM/DD``
        as it would be while typing. Raises ``KeyError`` for an unknown id.
        """

        pos = self._position(record_id)
        record = self._records[pos]
        if amount is not None:
            record = replace(record, amount=digits_only(amount))
        if date is not None:
            record = replace(record, date=normalize_date_input(date))
        self._records[pos] = record
        return record

    def remove(self, record_id: str) -> None:
        del self._records[self._position(record_id)]

    def clear(self) -> None:
        self._records = [ChequeRecord()]

    def merge(self, records: Iterable[ChequeRecord]) -> int:
        """Add imported records; a lone blank row is replaced rather than kept.

        Records are taken verbatim (imports are not reshaped). Returns the
        number of records added.
        """

        incoming = list(records)
        if not incoming:
            return 0
        if self.is_placeholder_only:
            self._records = incoming
        else:
            self._records.extend(incoming)
        _logger.info("worksheet:merge added=%d total=%d", len(incoming), len(self._records))
        return len(incoming)

    # ---- Computation -------------------------------------------------------

    def compute(self) -> RasComputation:
        return compute_ras(self.base_date, tuple(self._records))


__all__ = ["ChequeWorksheet"]
