import pytest

import cheque_ras.worksheet as worksheet_mod
from cheque_ras.models import CalendarDate, ChequeRecord
from cheque_ras.worksheet import ChequeWorksheet


def test_new_worksheet_has_one_blank_row_and_todays_base(monkeypatch):
    monkeypatch.setattr(worksheet_mod, "today", lambda: CalendarDate(1405, 7, 26))
    ws = ChequeWorksheet()

    assert ws.base_date == "1405/07/26"
    assert len(ws) == 1
    assert ws.is_placeholder_only
    assert ws.records[0].is_blank


def test_empty_record_list_gets_placeholder():
    ws = ChequeWorksheet(base_date="1403/01/01", records=[])
    assert ws.is_placeholder_only


def test_add_reduces_amount_to_digits_and_shapes_date():
    ws = ChequeWorksheet(base_date="1403/01/01")
    rec = ws.add("1,000", "14030111")

    assert rec.amount == "1000"
    assert rec.date == "1403/01/11"
    assert len(ws) == 2
    assert not ws.is_placeholder_only


def test_update_keeps_id_and_position(two_cheques):
    ws = ChequeWorksheet(base_date="1403/01/01", records=two_cheques)
    first_id = ws.records[0].id

    updated = ws.update(first_id, amount="۲,۰۰۰")
    assert updated.id == first_id
    assert ws.records[0].amount == "2000"
    assert ws.records[0].date == "1403/01/11"

    ws.update(first_id, date="1403-02-01")
    assert ws.records[0].date == "1403/02/01"
    assert ws.records[1] == two_cheques[1]


def test_update_and_remove_unknown_id_raise_key_error():
    ws = ChequeWorksheet(base_date="1403/01/01")
    with pytest.raises(KeyError):
        ws.update("missing", amount="1")
    with pytest.raises(KeyError):
        ws.remove("missing")


def test_remove_and_clear(two_cheques):
    ws = ChequeWorksheet(base_date="1403/01/01", records=two_cheques)
    ws.remove(two_cheques[0].id)
    assert ws.records == (two_cheques[1],)

    ws.clear()
    assert ws.is_placeholder_only


def test_set_base_date_shapes_input():
    ws = ChequeWorksheet(base_date="1403/01/01")
    assert ws.set_base_date("14030201") == "1403/02/01"
    assert ws.base_date == "1403/02/01"


def test_merge_replaces_lone_placeholder(two_cheques):
    ws = ChequeWorksheet(base_date="1403/01/01")
    assert ws.merge(two_cheques) == 2
    assert ws.records == tuple(two_cheques)


def test_merge_appends_after_existing_rows(two_cheques):
    ws = ChequeWorksheet(base_date="1403/01/01")
    ws.add("500", "1403/01/05")
    ws.merge(two_cheques)
    assert len(ws) == 4
    assert ws.records[-2:] == tuple(two_cheques)


def test_merge_nothing_keeps_placeholder():
    ws = ChequeWorksheet(base_date="1403/01/01")
    assert ws.merge([]) == 0
    assert ws.is_placeholder_only


def test_compute_reflects_latest_edits(two_cheques):
    ws = ChequeWorksheet(base_date="1403/01/01", records=two_cheques)
    assert ws.compute().aggregate.weighted_average_offset == 26

    ws.update(two_cheques[1].id, amount="1000")
    # (10 + 31) / 2 = 20.5
    assert ws.compute().aggregate.weighted_average_offset == 21

    ws.set_base_date("1403/13/40")
    assert ws.compute().aggregate is None


def test_records_are_a_snapshot():
    ws = ChequeWorksheet(base_date="1403/01/01", records=[ChequeRecord("1", "1403/01/02")])
    snapshot = ws.records
    ws.add("2", "1403/01/03")
    assert len(snapshot) == 1


def test_unpadded_dates_keep_their_month_and_day():
    ws = ChequeWorksheet(base_date="1403/01/01")
    rec_id = ws.records[0].id

    ws.update(rec_id, amount="1000", date="1403/1/11")
    assert ws.records[0].date == "1403/01/11"

    added = ws.add("1000", "۱۴۰۳/۲/۱")
    assert added.date == "1403/02/01"

    ws.set_base_date("1403/1/1")
    assert ws.base_date == "1403/01/01"
    assert [r.day_offset for r in ws.compute().normalized] == [10, 31]
