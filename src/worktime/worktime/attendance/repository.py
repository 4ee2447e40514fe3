from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ..database.json_store import StoreResult
from .model import DailyRecord


class DailyRecordRepository(Protocol):
    """Per-employee, per-day persistence of a single attendance record."""

    def get(self, employee_id: str, work_date: date) -> Optional[DailyRecord]:
        raise NotImplementedError

    def save(self, record: DailyRecord) -> StoreResult:
        raise NotImplementedError
