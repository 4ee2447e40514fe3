from __future__ import annotations

import json
from datetime import date

from src.worktime.worktime.attendance.kv_daily_record_repository import KVDailyRecordRepository, daily_record_key
from src.worktime.worktime.attendance.model import DailyRecord
from src.worktime.worktime.container import build_container
from src.worktime.worktime.database.json_store import JsonStore
from src.worktime.worktime.database.kv_store import InMemoryKeyValueStore


def test_container_opens_and_closes_the_store(clock):
    kv = InMemoryKeyValueStore()
    c = build_container(kv_store=kv, clock=clock)
    assert kv.is_open

    c.close()
    assert not kv.is_open


def test_daily_record_key_format():
    assert daily_record_key("2", date(2026, 3, 2)) == "attendance_2_2026-03-02"


def test_daily_records_are_stored_under_their_own_keys():
    kv = InMemoryKeyValueStore()
    repo = KVDailyRecordRepository(JsonStore(kv))

    repo.save(DailyRecord("2", date(2026, 3, 2), device="Desktop"))
    repo.save(DailyRecord("3", date(2026, 3, 2)))

    assert kv.keys() == ["attendance_2_2026-03-02", "attendance_3_2026-03-02"]
    assert repo.get("2", date(2026, 3, 2)).device == "Desktop"


def test_malformed_or_mismatched_daily_record_reads_as_missing():
    kv = InMemoryKeyValueStore(
        {
            "attendance_2_2026-03-02": json.dumps({"date": "2026-03-01", "employeeId": "2"}).encode(),
            "attendance_2_2026-03-03": json.dumps({"employeeId": "2"}).encode(),
            "attendance_2_2026-03-04": json.dumps({"date": "2026-03-04", "timeIn": 900}).encode(),
        }
    )
    repo = KVDailyRecordRepository(JsonStore(kv))

    assert repo.get("2", date(2026, 3, 2)) is None
    assert repo.get("2", date(2026, 3, 3)) is None
    assert repo.get("2", date(2026, 3, 4)) is None
