"""Conversion between DailyRecord and the JSON shapes kept in the store.

Two shapes exist:
- the employee-side daily record (`attendance_{employeeId}_{dateISO}`), which
  carries `device` and `hours`;
- the shared ledger entry (`attendance_ledger`), which carries `id` and
  `source` instead.

Decoders raise ValueError on anything that does not look like a record; the
repositories turn that into "no data".
"""

from __future__ import annotations

from typing import Any, Optional

from ..common.datetime_utils import parse_instant, parse_iso_date, to_iso
from .model import DailyRecord

TIMESTAMP_FIELDS = {
    "timeIn": "time_in",
    "lunchOut": "lunch_out",
    "lunchIn": "lunch_in",
    "timeOut": "time_out",
}


def _timestamps_from(data: dict) -> dict:
    out = {}
    for json_name, attr in TIMESTAMP_FIELDS.items():
        value = data.get(json_name)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"{json_name} must be a string or null")
        out[attr] = parse_instant(value)
    return out


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def daily_record_to_dict(record: DailyRecord) -> dict:
    return {
        "employeeId": record.employee_id,
        "date": record.date_iso,
        "timeIn": to_iso(record.time_in),
        "lunchOut": to_iso(record.lunch_out),
        "lunchIn": to_iso(record.lunch_in),
        "timeOut": to_iso(record.time_out),
        "device": record.device,
        "source": record.source,
        "hours": record.hours,
    }


def daily_record_from_dict(data: Any, *, employee_id: Optional[str] = None) -> DailyRecord:
    if not isinstance(data, dict):
        raise ValueError("daily record must be an object")

    try:
        work_date = parse_iso_date(str(data["date"]))
        hours = float(data.get("hours") or 0)
    except (KeyError, TypeError) as e:
        raise ValueError(str(e)) from e

    return DailyRecord(
        employee_id=str(data.get("employeeId") or employee_id or ""),
        work_date=work_date,
        device=_optional_str(data.get("device")),
        source=_optional_str(data.get("source")),
        hours=hours,
        **_timestamps_from(data),
    )


def ledger_entry_to_dict(record: DailyRecord) -> dict:
    return {
        "id": record.record_id,
        "employeeId": record.employee_id,
        "source": record.source,
        "dateISO": record.date_iso,
        "timeIn": to_iso(record.time_in),
        "lunchOut": to_iso(record.lunch_out),
        "lunchIn": to_iso(record.lunch_in),
        "timeOut": to_iso(record.time_out),
    }


def ledger_entry_from_dict(data: Any) -> DailyRecord:
    if not isinstance(data, dict):
        raise ValueError("ledger entry must be an object")

    try:
        employee_id = str(data["employeeId"])
        work_date = parse_iso_date(str(data["dateISO"]))
    except (KeyError, TypeError) as e:
        raise ValueError(str(e)) from e

    return DailyRecord(
        employee_id=employee_id,
        work_date=work_date,
        source=_optional_str(data.get("source")),
        **_timestamps_from(data),
    )
