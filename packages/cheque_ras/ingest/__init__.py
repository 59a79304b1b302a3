"""Tabular import of cheque rows (CSV and XLSX)."""

from .utils import load_cheques_from_file

__all__ = ["load_cheques_from_file"]
