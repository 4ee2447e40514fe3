from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.codec import ledger_entry_from_dict, ledger_entry_to_dict
from ..attendance.model import DailyRecord
from ..common.datetime_utils import month_bounds
from ..core.constants import LEDGER_KEY
from ..database.json_store import JsonStore, StoreResult
from ..devices.classifier import source_for_device

logger = logging.getLogger(__name__)


def ledger_key(employee_id: str, work_date: date) -> str:
    return f"{employee_id}:{work_date.strftime('%Y-%m-%d')}"


class AttendanceLedger:
    """Shared attendance ledger read by both employee and administrator views.

    The ledger is a mapping keyed by "{employeeId}:{dateISO}", not an append
    log: an upsert shallow-merges into the existing entry and keeps no history.
    Writers always read-modify-write against the store; readers use a cached
    snapshot that is dropped whenever the store reports the ledger key changed.
    """

    def __init__(self, store: JsonStore):
        self._store = store
        self._snapshot: Optional[dict] = None
        self._unsubscribe = store.subscribe(LEDGER_KEY, self._on_change)

    def _on_change(self, key: str) -> None:
        self._snapshot = None

    def close(self) -> None:
        self._unsubscribe()

    @property
    def is_stale(self) -> bool:
        return self._snapshot is None

    def _read_raw(self) -> dict:
        return self._store.read(LEDGER_KEY, dict)

    def _entries(self) -> dict:
        if self._snapshot is None:
            self._snapshot = self._read_raw()
        return self._snapshot

    def mirror(self, record: DailyRecord) -> StoreResult:
        """Employee-side upsert: the device label becomes the ledger source."""
        entry = ledger_entry_to_dict(record)
        entry["source"] = record.source or source_for_device(record.device)
        return self._upsert(record, entry)

    def upsert(self, record: DailyRecord) -> StoreResult:
        """Administrator-side upsert: fields are taken as given."""
        return self._upsert(record, ledger_entry_to_dict(record))

    def _upsert(self, record: DailyRecord, entry: dict) -> StoreResult:
        entries = self._read_raw()
        key = ledger_key(record.employee_id, record.work_date)

        existing = entries.get(key)
        entries[key] = {**existing, **entry} if isinstance(existing, dict) else entry

        result = self._store.write(LEDGER_KEY, entries)
        if result.ok:
            self._snapshot = entries
        logger.debug("ledger upsert key=%s ok=%s", key, result.ok)
        return result

    def _decode(self, key: str, data) -> Optional[DailyRecord]:
        try:
            return ledger_entry_from_dict(data)
        except ValueError as e:
            logger.warning("skipping malformed ledger entry %s: %s", key, e)
            return None

    def all_records(self) -> list[DailyRecord]:
        out = []
        for key, data in self._entries().items():
            record = self._decode(key, data)
            if record is not None:
                out.append(record)
        out.sort(key=lambda r: (r.work_date, r.employee_id))
        return out

    def get(self, employee_id: str, work_date: date) -> Optional[DailyRecord]:
        key = ledger_key(str(employee_id), work_date)
        data = self._entries().get(key)
        if data is None:
            return None
        return self._decode(key, data)

    def list_for_employee_month(self, employee_id: str, month: date) -> list[DailyRecord]:
        start, end = month_bounds(month)
        return [
            r
            for r in self.all_records()
            if r.employee_id == str(employee_id) and start <= r.work_date <= end
        ]

    def list_for_date(self, work_date: date) -> list[DailyRecord]:
        return [r for r in self.all_records() if r.work_date == work_date]

    def count_clocked_in_on(self, work_date: date) -> int:
        return sum(1 for r in self.list_for_date(work_date) if r.time_in is not None)

    def count_entries_for(self, employee_id: str, work_date: date) -> int:
        """Number of raw entries for (employee, date); the upsert keeps it at most 1."""
        target = (str(employee_id), work_date.strftime("%Y-%m-%d"))
        return sum(
            1
            for data in self._entries().values()
            if isinstance(data, dict) and (str(data.get("employeeId")), data.get("dateISO")) == target
        )
