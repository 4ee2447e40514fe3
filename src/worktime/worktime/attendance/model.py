from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class DailyRecord:
    """Domain entity: attendance of one employee on one calendar date.

    Timestamps are set in the order time_in -> lunch_out -> lunch_in -> time_out
    by the guarded clock actions; only an administrator correction may break
    that order.
    """

    employee_id: str
    work_date: date
    time_in: Optional[datetime] = None
    lunch_out: Optional[datetime] = None
    lunch_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    device: Optional[str] = None
    source: Optional[str] = None
    hours: float = 0.0

    @property
    def date_iso(self) -> str:
        return self.work_date.strftime("%Y-%m-%d")

    @property
    def record_id(self) -> str:
        return f"{self.employee_id}_{self.date_iso}"

    @property
    def status(self) -> AttendanceStatus:
        return status_of(self)

    def has_any_mark(self) -> bool:
        return any(v is not None for v in (self.time_in, self.lunch_out, self.lunch_in, self.time_out))


def status_of(record: Optional[DailyRecord]) -> AttendanceStatus:
    if record is None or record.time_in is None:
        return AttendanceStatus.NOT_STARTED
    if record.time_out is not None:
        return AttendanceStatus.COMPLETED
    if record.lunch_out is not None and record.lunch_in is None:
        return AttendanceStatus.ON_BREAK
    return AttendanceStatus.IN_PROGRESS


STATUS_LABELS = {
    AttendanceStatus.NOT_STARTED: "Not Started",
    AttendanceStatus.IN_PROGRESS: "Clocked In",
    AttendanceStatus.ON_BREAK: "On Break",
    AttendanceStatus.COMPLETED: "Clocked Out",
}
