import contextlib
import io

import pytest
from prompt_toolkit import PromptSession
from prompt_toolkit.document import Document
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput
from prompt_toolkit.validation import ValidationError
from rich.console import Console

from cheque_ras.models import CalendarDate
from cheque_ras.term_ui import (
    AmountValidator,
    JalaliDateValidator,
    prompt_amount,
    prompt_date,
    run_worksheet,
)
from cheque_ras.worksheet import ChequeWorksheet


@contextlib.contextmanager
def pipe_session():
    with create_pipe_input() as pipe:
        sess = PromptSession(input=pipe, output=DummyOutput())
        yield pipe, sess


class ScriptedSession:
    """Stands in for ``PromptSession``: returns queued answers in order."""

    def __init__(self, answers):
        self._answers = list(answers)
        self.messages = []

    def prompt(self, message, **kwargs):
        self.messages.append(message)
        if not self._answers:
            raise EOFError
        return self._answers.pop(0)


def _quiet_console():
    return Console(file=io.StringIO(), width=100, color_system=None)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def test_prompt_date_shapes_bare_digits():
    with pipe_session() as (pipe, sess):
        pipe.send_text("14030111\r")
        assert prompt_date(session=sess) == "1403/01/11"


def test_prompt_date_accepts_default_with_enter():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\r")
        assert prompt_date(default="1403/02/01", session=sess) == "1403/02/01"


def test_prompt_date_retries_until_valid():
    with pipe_session() as (pipe, sess):
        # 1402 has no Esfand 30: the first Enter is rejected, then the text is
        # cleared (Ctrl-A, Ctrl-K) and a valid date entered.
        pipe.send_text("1402/12/30\r\x01\x0b1402/12/29\r")
        assert prompt_date(session=sess) == "1402/12/29"


def test_prompt_amount_returns_digits():
    with pipe_session() as (pipe, sess):
        pipe.send_text("12,500,000\r")
        assert prompt_amount(session=sess) == "12500000"


def test_prompt_amount_accepts_persian_digits():
    with pipe_session() as (pipe, sess):
        pipe.send_text("۳۰۰۰\r")
        assert prompt_amount(session=sess) == "3000"


def test_date_validator():
    v = JalaliDateValidator()
    v.validate(Document("1403/12/30"))
    with pytest.raises(ValidationError):
        v.validate(Document(""))
    with pytest.raises(ValidationError):
        v.validate(Document("1403/13/01"))
    JalaliDateValidator(allow_empty=True).validate(Document("  "))


def test_amount_validator_points_at_first_bad_character():
    AmountValidator().validate(Document("1,000 000"))
    with pytest.raises(ValidationError) as excinfo:
        AmountValidator().validate(Document("12a4"))
    assert excinfo.value.cursor_position == 2


# ---------------------------------------------------------------------------
# Command loop
# ---------------------------------------------------------------------------


def test_add_fills_placeholder_then_appends():
    ws = ChequeWorksheet(base_date="1403/01/01")
    sess = ScriptedSession(["a", "1000", "1403/01/11", "a", "3000", "14030201", "q"])

    result = run_worksheet(ws, session=sess, console=_quiet_console())

    assert len(ws) == 2
    assert [(r.amount, r.date) for r in ws.records] == [
        ("1000", "1403/01/11"),
        ("3000", "1403/02/01"),
    ]
    assert result.aggregate.settlement_date == CalendarDate(1403, 1, 27)


def test_edit_delete_base_and_clear(two_cheques):
    ws = ChequeWorksheet(base_date="1403/01/01", records=two_cheques)
    sess = ScriptedSession(
        [
            "e 2",
            "1000",
            "1403/02/01",
            "b",
            "1403/01/02",
            "d 1",
            "q",
        ]
    )

    result = run_worksheet(ws, session=sess, console=_quiet_console())

    assert ws.base_date == "1403/01/02"
    assert [(r.amount, r.date) for r in ws.records] == [("1000", "1403/02/01")]
    assert ws.records[0].id == two_cheques[1].id
    assert result.aggregate.weighted_average_offset == 30

    sess = ScriptedSession(["c", "exit"])
    run_worksheet(ws, session=sess, console=_quiet_console())
    assert ws.is_placeholder_only


def test_unknown_row_and_command_leave_worksheet_unchanged(two_cheques):
    ws = ChequeWorksheet(base_date="1403/01/01", records=two_cheques)
    console = _quiet_console()
    sess = ScriptedSession(["d 9", "e x", "zzz", "quit"])

    run_worksheet(ws, session=sess, console=console)

    assert ws.records == tuple(two_cheques)
    text = console.file.getvalue()
    assert "No such row" in text
    assert "Commands:" in text


def test_end_of_input_propagates():
    ws = ChequeWorksheet(base_date="1403/01/01")
    with pytest.raises(EOFError):
        run_worksheet(ws, session=ScriptedSession([]), console=_quiet_console())


def test_prompt_date_keeps_unpadded_month_and_day():
    with pipe_session() as (pipe, sess):
        pipe.send_text("1403/1/11\r")
        assert prompt_date(session=sess) == "1403/01/11"


def test_date_validator_checks_the_date_as_typed():
    v = JalaliDateValidator()
    v.validate(Document("1403/1/11"))
    v.validate(Document("1403/1/1"))
    with pytest.raises(ValidationError):
        v.validate(Document("1402/12/30"))
