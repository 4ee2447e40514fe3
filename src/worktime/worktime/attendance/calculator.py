"""Work-time arithmetic over a DailyRecord.

Two worked-time definitions live side by side and are deliberately kept apart:

- break-adjusted worked time: attendance span minus the break window. Used for
  the live "worked" timer, the per-day `hours` stamp and monthly totals.
- shift split: attendance span *without* subtracting breaks, split into regular
  and overtime minutes against the standard shift.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import ms_between
from ..core.constants import STANDARD_SHIFT_MINUTES
from .model import DailyRecord

MS_PER_MINUTE = 60_000


@dataclass(frozen=True)
class WorkedTime:
    elapsed_ms: Optional[int]
    break_ms: int
    worked_ms: int


@dataclass(frozen=True)
class ShiftSplit:
    total_minutes: int
    regular_minutes: int
    overtime_minutes: int
    progress_pct: float


def compute_elapsed_ms(record: DailyRecord, now: datetime) -> Optional[int]:
    if record.time_in is None:
        return None
    end = record.time_out or now
    return max(0, ms_between(record.time_in, end))


def compute_break_ms(record: DailyRecord, now: datetime) -> int:
    if record.lunch_out is None:
        return 0
    if record.lunch_in is not None:
        return max(0, ms_between(record.lunch_out, record.lunch_in))
    # Break still running, or running until clock-out.
    return max(0, ms_between(record.lunch_out, record.time_out or now))


def compute_break_adjusted_worked_time(record: DailyRecord, now: datetime) -> WorkedTime:
    elapsed = compute_elapsed_ms(record, now)
    break_ms = compute_break_ms(record, now)
    if elapsed is None:
        return WorkedTime(elapsed_ms=None, break_ms=break_ms, worked_ms=0)
    return WorkedTime(elapsed_ms=elapsed, break_ms=break_ms, worked_ms=max(0, elapsed - break_ms))


def compute_shift_regular_overtime_split(
    record: DailyRecord,
    now: datetime,
    *,
    shift_minutes: int = STANDARD_SHIFT_MINUTES,
) -> ShiftSplit:
    if record.time_in is None:
        return ShiftSplit(total_minutes=0, regular_minutes=0, overtime_minutes=0, progress_pct=0.0)

    end = record.time_out or now
    total = max(0, ms_between(record.time_in, end) // MS_PER_MINUTE)
    regular = min(total, shift_minutes)
    overtime = max(0, total - shift_minutes)
    progress = min(100.0, regular / shift_minutes * 100) if shift_minutes > 0 else 0.0
    return ShiftSplit(
        total_minutes=total,
        regular_minutes=regular,
        overtime_minutes=overtime,
        progress_pct=progress,
    )


def worked_hours(record: DailyRecord, now: datetime) -> float:
    """Break-adjusted hours rounded to 2 decimals (the per-day `hours` stamp)."""
    return round(compute_break_adjusted_worked_time(record, now).worked_ms / 3_600_000, 2)


def format_hours_minutes(ms: Optional[int]) -> str:
    """'7h 05m'."""
    total_minutes = max(0, int(ms or 0)) // MS_PER_MINUTE
    return f"{total_minutes // 60}h {total_minutes % 60:02d}m"


def format_hms(ms: Optional[int]) -> str:
    """'07:05:09', or '--:--:--' when there is nothing to show."""
    if ms is None:
        return "--:--:--"
    total = max(0, int(ms)) // 1000
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"


def format_live_duration(ms: Optional[int]) -> str:
    """'1h 02m 03s' or '2m 03s' for sub-hour timers."""
    total = max(0, int(ms or 0)) // 1000
    h, m, s = total // 3600, (total % 3600) // 60, total % 60
    if h > 0:
        return f"{h}h {m:02d}m {s:02d}s"
    return f"{m}m {s:02d}s"
