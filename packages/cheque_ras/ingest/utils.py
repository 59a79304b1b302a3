"""File loading for tabular cheque imports.

Exposes :func:`load_cheques_from_file`, which picks a reader from the file
suffix (CSV through :mod:`csv`, XLSX through ``openpyxl``) and maps rows with
the tabular adapter.
"""

from __future__ import annotations

import csv
from collections.abc import Iterator
from os import PathLike
from pathlib import Path
from typing import Any

from ..logging_setup import get_logger
from ..models import ChequeRecord
from .adapters.tabular import has_known_headers, to_cheques

CSV_SUFFIXES: frozenset[str] = frozenset({".csv"})
XLSX_SUFFIXES: frozenset[str] = frozenset({".xlsx", ".xlsm"})

_logger = get_logger("cheque_ras.ingest")


def _read_csv_rows(path: Path) -> list[dict[str, str]]:
    # utf-8-sig drops the BOM Excel writes in front of the first header.
    with path.open(encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise csv.Error(f"CSV appears to have no header row: {path}")
        if not has_known_headers(reader.fieldnames):
            raise csv.Error(
                f"CSV has no amount/date columns: {path} (headers: {', '.join(reader.fieldnames)})"
            )
        return [dict(row) for row in reader]


def _iter_xlsx_rows(path: Path) -> Iterator[dict[Any, Any]]:
    from openpyxl import load_workbook

    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        if not wb.worksheets:
            return
        rows = wb.worksheets[0].iter_rows(values_only=True)
        header = next(rows, None)
        if header is None or not has_known_headers(header):
            raise csv.Error(f"First sheet has no amount/date header row: {path}")
        for values in rows:
            yield dict(zip(header, values, strict=False))
    finally:
        wb.close()


def load_cheques_from_file(path: str | PathLike[str]) -> list[ChequeRecord]:
    """Read cheque rows from a ``.csv`` or ``.xlsx`` file.

    Only the first worksheet of a workbook is read and its first row is the
    header. Raises ``ValueError`` for other file types and ``csv.Error`` when
    no amount/date header can be found. ``FileNotFoundError`` and
    ``PermissionError`` propagate unchanged.
    """

    p = Path(path)
    suffix = p.suffix.lower()
    if suffix in CSV_SUFFIXES:
        records = list(to_cheques(_read_csv_rows(p)))
    elif suffix in XLSX_SUFFIXES:
        records = list(to_cheques(_iter_xlsx_rows(p)))
    else:
        raise ValueError(f"unsupported file type {suffix or '(none)'!r}; expected .csv or .xlsx")

    _logger.info("ingest:loaded path=%s records=%d", p.name, len(records))
    return records


__all__ = ["load_cheques_from_file"]
