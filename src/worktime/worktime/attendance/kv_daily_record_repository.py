from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..core.constants import DAILY_RECORD_KEY_PREFIX
from ..database.json_store import JsonStore, StoreResult
from .codec import daily_record_from_dict, daily_record_to_dict
from .model import DailyRecord
from .repository import DailyRecordRepository

logger = logging.getLogger(__name__)


def daily_record_key(employee_id: str, work_date: date) -> str:
    return f"{DAILY_RECORD_KEY_PREFIX}{employee_id}_{work_date.strftime('%Y-%m-%d')}"


class KVDailyRecordRepository(DailyRecordRepository):
    def __init__(self, store: JsonStore):
        self._store = store

    def get(self, employee_id: str, work_date: date) -> Optional[DailyRecord]:
        key = daily_record_key(employee_id, work_date)
        data = self._store.read(key, lambda: None)
        if data is None:
            return None
        try:
            record = daily_record_from_dict(data, employee_id=employee_id)
        except ValueError as e:
            logger.warning("malformed daily record under key=%s: %s", key, e)
            return None

        if record.work_date != work_date:
            logger.warning("daily record under key=%s is for %s, ignoring", key, record.date_iso)
            return None
        return record

    def save(self, record: DailyRecord) -> StoreResult:
        return self._store.write(daily_record_key(record.employee_id, record.work_date), daily_record_to_dict(record))
