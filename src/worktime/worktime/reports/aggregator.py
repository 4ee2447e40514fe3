from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..attendance.calculator import MS_PER_MINUTE, compute_break_adjusted_worked_time
from ..attendance.model import DailyRecord
from ..core.constants import MONTHLY_TARGET_HOURS


@dataclass(frozen=True)
class MonthlyOverview:
    present_days: int
    incomplete_days: int
    absent_days: int
    total_work_minutes: int
    avg_minutes_per_work_day: float
    target_progress_pct: float


def dedupe_by_date(records: Iterable[DailyRecord]) -> list[DailyRecord]:
    """First occurrence of each date wins."""
    seen = set()
    out = []
    for r in records:
        if r.work_date in seen:
            continue
        seen.add(r.work_date)
        out.append(r)
    return out


def aggregate_month(
    records: Iterable[DailyRecord],
    *,
    now: Optional[datetime] = None,
    target_hours: float = MONTHLY_TARGET_HOURS,
) -> MonthlyOverview:
    """Fold one employee's records for one month.

    absent_days only counts records that exist with nothing filled in; a day
    without any record is not counted at all.

    A record without time_out contributes worked time only when it is the
    record of `now`'s date (the day still running); earlier open days count 0.
    """

    present = incomplete = absent = 0
    total_ms = 0

    for r in dedupe_by_date(records):
        has_in_and_out = r.time_in is not None and r.time_out is not None
        if has_in_and_out:
            present += 1
        elif r.has_any_mark():
            incomplete += 1
        else:
            absent += 1

        if r.time_out is not None:
            total_ms += compute_break_adjusted_worked_time(r, r.time_out).worked_ms
        elif now is not None and r.time_in is not None and r.work_date == now.date():
            total_ms += compute_break_adjusted_worked_time(r, now).worked_ms

    total_minutes = total_ms // MS_PER_MINUTE
    work_days = present + incomplete
    avg = round(total_minutes / work_days, 2) if work_days else 0.0
    progress = min(100.0, total_minutes / 60 / target_hours * 100) if target_hours > 0 else 0.0

    return MonthlyOverview(
        present_days=present,
        incomplete_days=incomplete,
        absent_days=absent,
        total_work_minutes=total_minutes,
        avg_minutes_per_work_day=avg,
        target_progress_pct=round(progress, 1),
    )
