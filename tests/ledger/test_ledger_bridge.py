from __future__ import annotations

import json
from datetime import date, datetime, timezone

from src.worktime.worktime.attendance.model import DailyRecord
from src.worktime.worktime.core.constants import LEDGER_KEY
from src.worktime.worktime.database.json_store import JsonStore
from src.worktime.worktime.database.kv_store import InMemoryKeyValueStore
from src.worktime.worktime.ledger.bridge import AttendanceLedger, ledger_key

UTC = timezone.utc
DAY = date(2026, 3, 2)


def _rec(eid="2", day=DAY, **kwargs) -> DailyRecord:
    return DailyRecord(employee_id=eid, work_date=day, **kwargs)


def test_ledger_key_format():
    assert ledger_key("7", DAY) == "7:2026-03-02"


def test_upsert_keeps_one_entry_per_employee_and_day():
    ledger = AttendanceLedger(JsonStore(InMemoryKeyValueStore()))
    t_in = datetime(2026, 3, 2, 9, tzinfo=UTC)

    ledger.mirror(_rec(time_in=t_in, device="Desktop"))
    ledger.mirror(_rec(time_in=t_in, time_out=datetime(2026, 3, 2, 17, tzinfo=UTC), device="Desktop"))
    ledger.upsert(_rec(time_in=t_in, source="Admin"))

    assert ledger.count_entries_for("2", DAY) == 1
    entry = ledger.get("2", DAY)
    assert entry.source == "Admin"
    # upsert is a shallow merge of the full entry, so timeOut is overwritten
    assert entry.time_out is None


def test_other_views_see_writes_after_change_notification():
    kv = InMemoryKeyValueStore()
    employee_side = AttendanceLedger(JsonStore(kv))
    admin_side = AttendanceLedger(JsonStore(kv))

    assert admin_side.all_records() == []
    assert not admin_side.is_stale

    employee_side.mirror(_rec(time_in=datetime(2026, 3, 2, 9, tzinfo=UTC)))

    assert admin_side.is_stale
    assert [r.employee_id for r in admin_side.list_for_date(DAY)] == ["2"]
    assert admin_side.count_clocked_in_on(DAY) == 1


def test_closed_ledger_stops_listening():
    kv = InMemoryKeyValueStore()
    writer = AttendanceLedger(JsonStore(kv))
    reader = AttendanceLedger(JsonStore(kv))
    reader.all_records()
    reader.close()

    writer.mirror(_rec(time_in=datetime(2026, 3, 2, 9, tzinfo=UTC)))

    assert not reader.is_stale


def test_malformed_entries_are_skipped():
    kv = InMemoryKeyValueStore()
    good = {"employeeId": "3", "dateISO": "2026-03-05", "timeIn": "2026-03-05T09:00:00+00:00"}
    kv.set(LEDGER_KEY, json.dumps({"x": "junk", "y": {"dateISO": "nope"}, "3:2026-03-05": good}).encode())
    ledger = AttendanceLedger(JsonStore(kv))

    records = ledger.all_records()

    assert [(r.employee_id, r.date_iso) for r in records] == [("3", "2026-03-05")]


def test_list_for_employee_month_filters_by_month():
    ledger = AttendanceLedger(JsonStore(InMemoryKeyValueStore()))
    ledger.upsert(_rec(day=date(2026, 2, 28)))
    ledger.upsert(_rec(day=date(2026, 3, 1)))
    ledger.upsert(_rec(day=date(2026, 3, 31)))
    ledger.upsert(_rec(eid="3", day=date(2026, 3, 10)))

    days = [r.work_date.day for r in ledger.list_for_employee_month("2", date(2026, 3, 15))]

    assert days == [1, 31]
