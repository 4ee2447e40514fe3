from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .attendance.kv_daily_record_repository import KVDailyRecordRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, SystemClock
from .core.constants import MONTHLY_TARGET_HOURS, STANDARD_SHIFT_MINUTES
from .core.enums import StorageFailurePolicy
from .database.connection import DBConfig, DatabaseConnection
from .database.json_store import JsonStore
from .database.kv_store import InMemoryKeyValueStore, KeyValueStore
from .database.mysql_kv_store import MySQLKeyValueStore
from .ledger.bridge import AttendanceLedger
from .reports.service import MonthlyReportService
from .users.account_status import AccountStatusRepository
from .users.json_account_repository import JsonAccountRepository
from .users.repository import AccountRepository
from .users.service import AccountService, AuthService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    clock: Clock
    kv_store: KeyValueStore
    store: JsonStore

    records_repo: KVDailyRecordRepository
    ledger: AttendanceLedger
    account_statuses: AccountStatusRepository
    accounts_repo: AccountRepository

    auth_service: AuthService
    account_service: AccountService
    attendance_service: AttendanceService
    report_service: MonthlyReportService

    def close(self) -> None:
        self.ledger.close()
        self.kv_store.close()


def build_kv_store(*, backend: str, db_config: Optional[dict] = None) -> KeyValueStore:
    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
        return MySQLKeyValueStore(conn)
    if backend != "memory":
        logger.warning("unknown STORE_BACKEND=%r, falling back to memory", backend)
    return InMemoryKeyValueStore()


def build_container(
    *,
    kv_store: Optional[KeyValueStore] = None,
    accounts: Optional[AccountRepository] = None,
    clock: Optional[Clock] = None,
    store_backend: str = "memory",
    db_config: Optional[dict] = None,
    failure_policy: StorageFailurePolicy = StorageFailurePolicy.SWALLOW,
    shift_minutes: int = STANDARD_SHIFT_MINUTES,
    target_hours: float = MONTHLY_TARGET_HOURS,
) -> Container:
    clock = clock or SystemClock()
    kv_store = kv_store or build_kv_store(backend=store_backend, db_config=db_config)
    kv_store.open()

    store = JsonStore(kv_store, policy=failure_policy)
    records_repo = KVDailyRecordRepository(store)
    ledger = AttendanceLedger(store)
    account_statuses = AccountStatusRepository(store)
    accounts_repo = accounts or JsonAccountRepository([])

    auth_service = AuthService(accounts_repo, account_statuses)
    account_service = AccountService(accounts_repo, account_statuses)
    attendance_service = AttendanceService(
        records_repo,
        ledger,
        account_statuses,
        clock=clock,
        shift_minutes=shift_minutes,
    )
    report_service = MonthlyReportService(ledger, clock=clock, target_hours=target_hours)

    return Container(
        clock=clock,
        kv_store=kv_store,
        store=store,
        records_repo=records_repo,
        ledger=ledger,
        account_statuses=account_statuses,
        accounts_repo=accounts_repo,
        auth_service=auth_service,
        account_service=account_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )
