from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Optional, Protocol


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_month(value: str) -> date:
    """Parse YYYY-MM string into the first day of that month."""
    return datetime.strptime(value, "%Y-%m").date()


def now_local() -> datetime:
    """Current local time, timezone-aware.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().astimezone()


def to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def parse_instant(value: Optional[str], tzinfo=None) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; a trailing 'Z' is accepted.

    Naive values take `tzinfo` when given, else the local zone.
    """
    if value is None:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        return parsed
    return parsed.replace(tzinfo=tzinfo) if tzinfo is not None else parsed.astimezone()


def parse_instant_on(value: str, work_date: date, tzinfo=None) -> datetime:
    """Parse either a full ISO instant or a bare HH:MM[:SS] on work_date."""
    value = value.strip()
    if "T" in value or len(value) > 8:
        return parse_instant(value, tzinfo)

    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    t: time = datetime.strptime(value, fmt).time()
    combined = datetime.combine(work_date, t)
    return combined.replace(tzinfo=tzinfo) if tzinfo is not None else combined.astimezone()


def month_bounds(any_day: date) -> tuple[date, date]:
    """[startOfMonth, endOfMonth] for the month containing any_day."""
    first = any_day.replace(day=1)
    last_day = calendar.monthrange(first.year, first.month)[1]
    return first, first.replace(day=last_day)


def ms_between(start: datetime, end: datetime) -> int:
    return int((end - start) / timedelta(milliseconds=1))


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Wall clock of the running process."""

    def now(self) -> datetime:
        return now_local()


@dataclass
class FixedClock:
    """Clock that only moves when told to (tests, demos)."""

    current: datetime
    step: timedelta = field(default_factory=timedelta)

    def now(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current

    def set(self, value: datetime) -> None:
        self.current = value
