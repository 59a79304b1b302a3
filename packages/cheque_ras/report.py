"""Rendering of a :class:`~cheque_ras.models.RasComputation` with ``rich``.

:func:`build_report` returns a renderable for a terminal console;
:func:`export_report` records the same renderable and saves it as text, HTML
or SVG. Exporting needs a result: without an aggregate there is nothing to
hand out, so it raises ``ValueError``.
"""

from __future__ import annotations

import io
from os import PathLike
from pathlib import Path

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .jalali import format_date
from .logging_setup import get_logger
from .models import AggregateResult, RasComputation
from .normalizers import format_amount

EXPORT_SUFFIXES: frozenset[str] = frozenset({".txt", ".html", ".htm", ".svg"})
_EXPORT_WIDTH = 100

_logger = get_logger("cheque_ras.report")


def _cheque_table(computation: RasComputation) -> Table:
    table = Table(title=f"Cheques ({len(computation.normalized)})", expand=True)
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Amount (rials)", justify="right")
    table.add_column("Due date", justify="center")
    table.add_column("Days", justify="right")

    for pos, item in enumerate(computation.normalized, start=1):
        table.add_row(
            str(pos),
            format_amount(item.record.amount),
            item.record.date,
            item.days_display,
            style="red" if item.flag_invalid else None,
        )
    return table


def _result_panel(aggregate: AggregateResult) -> Panel:
    grid = Table.grid(padding=(0, 3))
    grid.add_column(style="bold")
    grid.add_column(justify="right")
    grid.add_row("Total amount", f"{format_amount(aggregate.total_amount)} rials")
    grid.add_row("Weighted average days", f"{aggregate.weighted_average_offset} days")
    grid.add_row("Counted cheques", str(aggregate.counted_records))
    grid.add_row("Ras date", Text(format_date(aggregate.settlement_date), style="bold green"))
    return Panel(grid, title="Ras result", border_style="green")


def build_report(computation: RasComputation) -> RenderableType:
    base_line = Text.assemble(("Base date: ", "bold"), computation.base_date or "-")
    if computation.base_flag_invalid:
        base_line.append("  (invalid date)", style="red")

    parts: list[RenderableType] = [base_line, _cheque_table(computation)]
    if computation.aggregate is not None:
        parts.append(_result_panel(computation.aggregate))
    else:
        parts.append(
            Text(
                "Enter at least one cheque with a positive amount and a valid date "
                "to see the result.",
                style="dim",
            )
        )
    return Group(*parts)


def export_report(computation: RasComputation, path: str | PathLike[str]) -> Path:
    """Save the report to ``path`` (``.txt``, ``.html`` or ``.svg``).

    Raises ``ValueError`` when there is no aggregate result or the suffix is
    not supported. Returns the written path.
    """

    if computation.aggregate is None:
        raise ValueError("nothing to export: no cheque contributes to a result")

    p = Path(path)
    suffix = p.suffix.lower()
    if suffix not in EXPORT_SUFFIXES:
        raise ValueError(
            f"unsupported export type {suffix or '(none)'!r}; expected .txt, .html or .svg"
        )

    console = Console(record=True, file=io.StringIO(), width=_EXPORT_WIDTH)
    console.print(build_report(computation))

    if suffix == ".txt":
        p.write_text(console.export_text(), encoding="utf-8")
    elif suffix == ".svg":
        p.write_text(console.export_svg(title="Ras report"), encoding="utf-8")
    else:
        p.write_text(console.export_html(), encoding="utf-8")

    _logger.info("report:exported path=%s format=%s", p.name, suffix.lstrip("."))
    return p


__all__ = ["build_report", "export_report"]
