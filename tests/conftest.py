from __future__ import annotations

import os
from datetime import datetime, timezone

import pytest

from src.worktime.worktime.common.datetime_utils import FixedClock
from src.worktime.worktime.container import build_container
from src.worktime.worktime.core.enums import Role, StorageFailurePolicy
from src.worktime.worktime.database.kv_store import InMemoryKeyValueStore
from src.worktime.worktime.users.json_account_repository import JsonAccountRepository
from src.worktime.worktime.users.model import Account

os.environ.setdefault("APP_ENV", "testing")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def accounts():
    from werkzeug.security import generate_password_hash

    return JsonAccountRepository(
        [
            Account(1, "admin@worktime.local", "Admin", Role.ADMIN, generate_password_hash("admin123")),
            Account(2, "ana@worktime.local", "Ana", Role.EMPLOYEE, generate_password_hash("pw")),
            Account(3, "ben@worktime.local", "Ben", Role.EMPLOYEE, generate_password_hash("pw")),
        ]
    )


@pytest.fixture
def container(kv, clock, accounts):
    c = build_container(kv_store=kv, clock=clock, accounts=accounts, failure_policy=StorageFailurePolicy.SWALLOW)
    yield c
    c.close()
