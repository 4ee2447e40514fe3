"""Guarded transitions of a DailyRecord.

Every function here is pure: it takes the current record and the instant of the
action and returns a Transition. A guard that does not hold is a no-op, not an
error: the Transition comes back with applied=False, the unchanged record and a
reason code. This keeps replays and double submissions harmless.

`correct_record` is the one path that skips the guards (administrator fixes).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, tzinfo as TzInfo
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_instant_on
from ..core.enums import ClockAction
from ..core.exceptions import ValidationError
from .calculator import worked_hours
from .codec import TIMESTAMP_FIELDS
from .model import DailyRecord

ALREADY_CLOCKED_IN = "already_clocked_in"
NOT_CLOCKED_IN = "not_clocked_in"
ALREADY_CLOCKED_OUT = "already_clocked_out"
BREAK_ALREADY_TAKEN = "break_already_taken"
NO_OPEN_BREAK = "no_open_break"
ACCOUNT_INACTIVE = "account_inactive"

CORRECTABLE_FIELDS = frozenset(TIMESTAMP_FIELDS) | {"source"}


@dataclass(frozen=True)
class Transition:
    record: DailyRecord
    applied: bool
    reason: Optional[str] = None


def new_record(employee_id: str, work_date: date, *, device: Optional[str] = None) -> DailyRecord:
    return DailyRecord(employee_id=str(employee_id), work_date=work_date, device=device)


def _rejected(record: DailyRecord, reason: str) -> Transition:
    return Transition(record=record, applied=False, reason=reason)


def clock_in(record: DailyRecord, now: datetime, *, device: Optional[str] = None) -> Transition:
    if record.time_in is not None:
        return _rejected(record, ALREADY_CLOCKED_IN)
    return Transition(record=replace(record, time_in=now, device=device or record.device), applied=True)


def start_break(record: DailyRecord, now: datetime) -> Transition:
    if record.time_in is None:
        return _rejected(record, NOT_CLOCKED_IN)
    if record.time_out is not None:
        return _rejected(record, ALREADY_CLOCKED_OUT)
    if record.lunch_out is not None:
        return _rejected(record, BREAK_ALREADY_TAKEN)
    return Transition(record=replace(record, lunch_out=now), applied=True)


def end_break(record: DailyRecord, now: datetime) -> Transition:
    if record.time_out is not None:
        return _rejected(record, ALREADY_CLOCKED_OUT)
    if record.lunch_out is None or record.lunch_in is not None:
        return _rejected(record, NO_OPEN_BREAK)
    return Transition(record=replace(record, lunch_in=now), applied=True)


def clock_out(record: DailyRecord, now: datetime) -> Transition:
    if record.time_in is None:
        return _rejected(record, NOT_CLOCKED_IN)
    if record.time_out is not None:
        return _rejected(record, ALREADY_CLOCKED_OUT)

    lunch_in = record.lunch_in
    if record.lunch_out is not None and lunch_in is None:
        # Auto-close the open break at the clock-out instant.
        lunch_in = now

    closed = replace(record, time_out=now, lunch_in=lunch_in)
    return Transition(record=replace(closed, hours=worked_hours(closed, now)), applied=True)


def refresh_device(record: DailyRecord, device: str) -> Transition:
    """Re-tag the device (viewport resize) while the day is still open."""
    if record.time_in is None:
        return _rejected(record, NOT_CLOCKED_IN)
    if record.time_out is not None:
        return _rejected(record, ALREADY_CLOCKED_OUT)
    if record.device == device:
        return Transition(record=record, applied=False, reason=None)
    return Transition(record=replace(record, device=device), applied=True)


def apply_action(action: ClockAction, record: DailyRecord, now: datetime, *, device: Optional[str] = None) -> Transition:
    action = ClockAction(action)
    if action == ClockAction.CLOCK_IN:
        return clock_in(record, now, device=device)
    if action == ClockAction.START_BREAK:
        return start_break(record, now)
    if action == ClockAction.END_BREAK:
        return end_break(record, now)
    return clock_out(record, now)


def correct_record(record: DailyRecord, patch: Mapping[str, Any], *, tz: Optional[TzInfo] = None) -> DailyRecord:
    """Administrator correction: overwrite fields directly.

    Known quirk: ordering is NOT validated, so a correction may leave timeOut
    before timeIn or lunchIn without lunchOut. Only the field names and the
    timestamp format are checked.
    """

    unknown = set(patch) - CORRECTABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown attendance field(s): {', '.join(sorted(unknown))}")

    changes: dict[str, Any] = {}
    for json_name, attr in TIMESTAMP_FIELDS.items():
        if json_name not in patch:
            continue
        changes[attr] = _coerce_instant(json_name, patch[json_name], record.work_date, tz)

    if "source" in patch:
        source = patch["source"]
        changes["source"] = None if source is None else str(source)

    return replace(record, **changes)


def _coerce_instant(name: str, value: Any, work_date: date, tz: Optional[TzInfo]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must be an ISO timestamp, HH:MM or null")
    try:
        return parse_instant_on(value, work_date, tz)
    except ValueError as e:
        raise ValidationError(f"{name} is not a valid time: {value!r}") from e
