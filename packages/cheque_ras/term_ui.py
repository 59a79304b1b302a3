"""Tiny terminal UI helpers (prompt_toolkit-based).

Prompts for amounts and Jalali dates plus a small command loop over a
:class:`~cheque_ras.worksheet.ChequeWorksheet`. Kept apart from the engine so
the prompts are easy to drive from tests with a pipe input.
"""

from __future__ import annotations

from prompt_toolkit import PromptSession
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError, Validator
from rich.console import Console

from .jalali import parse_date_string
from .models import RasComputation
from .normalizers import digits_only, normalize_date_input, normalize_digits
from .report import build_report
from .worksheet import ChequeWorksheet

HELP_TEXT = (
    "Commands: a = add cheque, e N = edit row N, d N = delete row N, "
    "b = base date, c = clear all, q = quit"
)

_AMOUNT_CHARS = frozenset("0123456789, _")


class JalaliDateValidator(Validator):
    """Accept text that normalizes to a valid ``YYYY/MM/DD`` Jalali date.

    Separators are optional (``14030111`` is ``1403/01/11``) and so are
    leading zeros when they are typed (``1403/1/11`` is ``1403/01/11``).
    """

    def __init__(self, *, allow_empty: bool = False) -> None:
        self._allow_empty = allow_empty

    def validate(self, document: Document) -> None:
        text = document.text.strip()
        if not text and self._allow_empty:
            return
        if parse_date_string(normalize_date_input(text)) is None:
            raise ValidationError(
                message="Enter a valid Jalali date as YYYY/MM/DD",
                cursor_position=len(document.text),
            )


class AmountValidator(Validator):
    def validate(self, document: Document) -> None:
        text = normalize_digits(document.text)
        bad = [pos for pos, ch in enumerate(text) if ch not in _AMOUNT_CHARS]
        if bad:
            raise ValidationError(
                message="Amount may only contain digits and separators",
                cursor_position=bad[0],
            )


def prompt_date(
    *,
    message: str = "Due date (YYYY/MM/DD): ",
    default: str = "",
    allow_empty: bool = False,
    session: PromptSession | None = None,
) -> str:
    """Prompt for a Jalali date and return it as zero-padded ``YYYY/MM/DD``."""

    sess = session or PromptSession()
    text = sess.prompt(
        message,
        default=default,
        validator=JalaliDateValidator(allow_empty=allow_empty),
        validate_while_typing=False,
    )
    return normalize_date_input(text)


def prompt_amount(
    *,
    message: str = "Amount (rials): ",
    default: str = "",
    session: PromptSession | None = None,
) -> str:
    """Prompt for an amount and return its digits (possibly empty)."""

    sess = session or PromptSession()
    text = sess.prompt(
        message,
        default=default,
        validator=AmountValidator(),
        validate_while_typing=False,
    )
    return digits_only(text)


def _row_id(worksheet: ChequeWorksheet, arg: str) -> str | None:
    try:
        pos = int(arg) - 1
    except ValueError:
        return None
    records = worksheet.records
    if 0 <= pos < len(records):
        return records[pos].id
    return None


def run_worksheet(
    worksheet: ChequeWorksheet,
    *,
    session: PromptSession | None = None,
    console: Console | None = None,
) -> RasComputation:
    """Run the interactive edit loop until ``q``; return the final computation."""

    sess = session or PromptSession()
    out = console or Console()
    out.print(HELP_TEXT)
    out.print(build_report(worksheet.compute()))

    while True:
        raw = sess.prompt("> ").strip()
        cmd, _, arg = raw.partition(" ")
        cmd = cmd.lower()
        arg = arg.strip()

        if cmd in {"q", "quit", "exit"}:
            break
        if cmd == "a":
            amount = prompt_amount(session=sess)
            date = prompt_date(session=sess)
            if worksheet.is_placeholder_only:
                worksheet.update(worksheet.records[0].id, amount=amount, date=date)
            else:
                worksheet.add(amount=amount, date=date)
        elif cmd in {"e", "d"}:
            record_id = _row_id(worksheet, arg)
            if record_id is None:
                out.print(f"[red]No such row:[/red] {arg or '(missing)'}")
                continue
            if cmd == "d":
                worksheet.remove(record_id)
            else:
                current = worksheet.records[int(arg) - 1]
                amount = prompt_amount(session=sess, default=current.amount)
                date = prompt_date(session=sess, default=current.date)
                worksheet.update(record_id, amount=amount, date=date)
        elif cmd == "b":
            base = prompt_date(
                message="Base date (YYYY/MM/DD): ",
                default=worksheet.base_date,
                session=sess,
            )
            worksheet.set_base_date(base)
        elif cmd == "c":
            worksheet.clear()
        else:
            out.print(HELP_TEXT)
            continue

        out.print(build_report(worksheet.compute()))

    return worksheet.compute()


__all__ = [
    "AmountValidator",
    "JalaliDateValidator",
    "prompt_amount",
    "prompt_date",
    "run_worksheet",
]
