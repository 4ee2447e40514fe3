from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import Clock, SystemClock
from ..core.constants import STANDARD_SHIFT_MINUTES
from ..core.enums import ClockAction, Role
from ..core.exceptions import AuthorizationError
from ..devices.classifier import DeviceInfo, classify_device, source_for_device
from ..ledger.bridge import AttendanceLedger
from ..users.account_status import AccountStatusRepository
from . import state_machine
from .calculator import (
    compute_break_adjusted_worked_time,
    compute_shift_regular_overtime_split,
    format_hms,
    format_hours_minutes,
    format_live_duration,
    worked_hours,
)
from .codec import TIMESTAMP_FIELDS, daily_record_to_dict
from .model import STATUS_LABELS, DailyRecord
from .repository import DailyRecordRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a clock action or correction.

    applied=False means a guard rejected the action and nothing was written.
    persisted=False means the action was applied but a write did not land.
    """

    record: DailyRecord
    applied: bool
    reason: Optional[str] = None
    persisted: bool = True


class AttendanceService:
    def __init__(
        self,
        records: DailyRecordRepository,
        ledger: AttendanceLedger,
        statuses: AccountStatusRepository,
        *,
        clock: Optional[Clock] = None,
        shift_minutes: int = STANDARD_SHIFT_MINUTES,
    ):
        self._records = records
        self._ledger = ledger
        self._statuses = statuses
        self._clock = clock or SystemClock()
        self._shift_minutes = int(shift_minutes)

    def _load_or_new(self, employee_id: str, work_date: date) -> DailyRecord:
        return self._records.get(employee_id, work_date) or state_machine.new_record(employee_id, work_date)

    def get_today(self, employee_id: str) -> DailyRecord:
        return self._load_or_new(str(employee_id), self._clock.now().date())

    def _persist(self, record: DailyRecord) -> bool:
        saved = self._records.save(record)
        mirrored = self._ledger.mirror(record)
        return saved.ok and mirrored.ok

    def _ledger_in_sync(self, record: DailyRecord) -> bool:
        entry = self._ledger.get(record.employee_id, record.work_date)
        if entry is None:
            return False
        return all(getattr(entry, attr) == getattr(record, attr) for attr in TIMESTAMP_FIELDS.values())

    def _reconcile_ledger(self, record: DailyRecord) -> bool:
        """Re-mirror a day whose earlier ledger write did not land."""
        if not record.has_any_mark() or self._ledger_in_sync(record):
            return True
        logger.warning("ledger entry for %s on %s is behind the daily record, re-mirroring", record.employee_id, record.date_iso)
        return self._ledger.mirror(record).ok

    def perform(
        self,
        employee_id: str,
        action: ClockAction,
        *,
        role: Role = Role.EMPLOYEE,
        device_info: Optional[DeviceInfo] = None,
    ) -> ActionResult:
        employee_id = str(employee_id)
        now = self._clock.now()
        record = self._load_or_new(employee_id, now.date())

        if not self._statuses.is_active(role, employee_id):
            return ActionResult(record=record, applied=False, reason=state_machine.ACCOUNT_INACTIVE)

        device = classify_device(device_info).value if action == ClockAction.CLOCK_IN else None
        transition = state_machine.apply_action(action, record, now, device=device)
        if not transition.applied:
            logger.debug("%s ignored for %s on %s: %s", action.value, employee_id, record.date_iso, transition.reason)
            return ActionResult(
                record=record,
                applied=False,
                reason=transition.reason,
                persisted=self._reconcile_ledger(record),
            )

        persisted = self._persist(transition.record)
        logger.debug("%s applied for %s on %s", action.value, employee_id, record.date_iso)
        return ActionResult(record=transition.record, applied=True, persisted=persisted)

    def clock_in(self, employee_id: str, *, role: Role = Role.EMPLOYEE, device_info: Optional[DeviceInfo] = None) -> ActionResult:
        return self.perform(employee_id, ClockAction.CLOCK_IN, role=role, device_info=device_info)

    def start_break(self, employee_id: str, *, role: Role = Role.EMPLOYEE) -> ActionResult:
        return self.perform(employee_id, ClockAction.START_BREAK, role=role)

    def end_break(self, employee_id: str, *, role: Role = Role.EMPLOYEE) -> ActionResult:
        return self.perform(employee_id, ClockAction.END_BREAK, role=role)

    def clock_out(self, employee_id: str, *, role: Role = Role.EMPLOYEE) -> ActionResult:
        return self.perform(employee_id, ClockAction.CLOCK_OUT, role=role)

    def refresh_device(self, employee_id: str, device_info: DeviceInfo) -> ActionResult:
        employee_id = str(employee_id)
        record = self.get_today(employee_id)
        transition = state_machine.refresh_device(record, classify_device(device_info).value)
        if not transition.applied:
            return ActionResult(record=record, applied=False, reason=transition.reason)
        return ActionResult(record=transition.record, applied=True, persisted=self._persist(transition.record))

    def correct_record(
        self,
        *,
        current_role: Role,
        employee_id: str,
        work_date: date,
        patch: Mapping[str, Any],
    ) -> ActionResult:
        """Administrator correction; bypasses the clock-action guards."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can correct attendance records")

        employee_id = str(employee_id)
        ledger_entry = self._ledger.get(employee_id, work_date)
        base = (
            self._records.get(employee_id, work_date)
            or ledger_entry
            or state_machine.new_record(employee_id, work_date)
        )
        if "source" not in patch and base.source is None:
            # The daily record carries only the device; keep the source the ledger shows.
            if ledger_entry is not None and ledger_entry.source:
                base = replace(base, source=ledger_entry.source)
            elif base.device:
                base = replace(base, source=source_for_device(base.device))
        corrected = state_machine.correct_record(base, patch, tz=self._clock.now().tzinfo)
        if corrected.time_in is not None and corrected.time_out is not None:
            corrected = replace(corrected, hours=worked_hours(corrected, corrected.time_out))

        saved = self._records.save(corrected)
        upserted = self._ledger.upsert(corrected)
        logger.info("attendance corrected for %s on %s: %s", employee_id, corrected.date_iso, sorted(patch))
        return ActionResult(record=corrected, applied=True, persisted=saved.ok and upserted.ok)

    def today_summary(self, employee_id: str) -> dict:
        now = self._clock.now()
        record = self._load_or_new(str(employee_id), now.date())
        return self.to_ui(record, now=now)

    def to_ui(self, record: DailyRecord, *, now=None) -> dict:
        now = now or self._clock.now()
        worked = compute_break_adjusted_worked_time(record, now)
        split = compute_shift_regular_overtime_split(record, now, shift_minutes=self._shift_minutes)
        return {
            "record": daily_record_to_dict(record),
            "status": record.status.value,
            "statusLabel": STATUS_LABELS[record.status],
            "workedTime": {
                "elapsedMs": worked.elapsed_ms,
                "breakMs": worked.break_ms,
                "workedMs": worked.worked_ms,
                "elapsed": format_hms(worked.elapsed_ms),
                "worked": format_live_duration(worked.worked_ms),
                "break": format_live_duration(worked.break_ms),
            },
            "shift": {
                "totalMinutes": split.total_minutes,
                "regularMinutes": split.regular_minutes,
                "overtimeMinutes": split.overtime_minutes,
                "progressPct": round(split.progress_pct, 1),
                "regular": format_hours_minutes(split.regular_minutes * 60_000),
                "overtime": format_hours_minutes(split.overtime_minutes * 60_000),
            },
        }
