from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from ..attendance.calculator import compute_break_adjusted_worked_time, format_hours_minutes
from ..attendance.model import STATUS_LABELS
from ..common.datetime_utils import Clock, SystemClock
from ..core.constants import MONTHLY_TARGET_HOURS
from ..ledger.bridge import AttendanceLedger
from .aggregator import MonthlyOverview, aggregate_month


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    overview: MonthlyOverview

    def to_dict(self) -> dict:
        return {"rows": self.rows, "overview": asdict(self.overview)}


def _fmt_time(value) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


class MonthlyReportService:
    def __init__(
        self,
        ledger: AttendanceLedger,
        *,
        clock: Optional[Clock] = None,
        target_hours: float = MONTHLY_TARGET_HOURS,
    ):
        self._ledger = ledger
        self._clock = clock or SystemClock()
        self._target_hours = float(target_hours)

    def build_monthly_report(self, *, employee_id: str, month: date) -> ReportData:
        now = self._clock.now()
        records = self._ledger.list_for_employee_month(str(employee_id), month)

        rows = []
        for r in records:
            end = r.time_out or now
            worked = compute_break_adjusted_worked_time(r, end)
            rows.append(
                {
                    "id": r.record_id,
                    "employeeId": r.employee_id,
                    "dateISO": r.date_iso,
                    "source": r.source or "-",
                    "timeIn": _fmt_time(r.time_in),
                    "lunchOut": _fmt_time(r.lunch_out),
                    "lunchIn": _fmt_time(r.lunch_in),
                    "timeOut": _fmt_time(r.time_out),
                    "status": STATUS_LABELS[r.status],
                    "worked": format_hours_minutes(worked.worked_ms),
                }
            )

        overview = aggregate_month(records, now=now, target_hours=self._target_hours)
        return ReportData(rows=rows, overview=overview)
