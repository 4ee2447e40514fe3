from __future__ import annotations

from ..core.constants import ACCOUNT_STATUS_KEY
from ..core.enums import AccountStatus, Role
from ..database.json_store import JsonStore, StoreResult


def status_key(role: Role, account_id) -> str:
    return f"{Role(role).value}:{account_id}"


class AccountStatusRepository:
    """Active/Inactive flags keyed by "user:{id}" / "admin:{id}".

    A missing entry means Active.
    """

    def __init__(self, store: JsonStore):
        self._store = store

    def status_map(self) -> dict[str, AccountStatus]:
        out = {}
        for key, value in self._store.read(ACCOUNT_STATUS_KEY, dict).items():
            try:
                out[str(key)] = AccountStatus(value)
            except ValueError:
                continue
        return out

    def get_status(self, role: Role, account_id) -> AccountStatus:
        return self.status_map().get(status_key(role, account_id), AccountStatus.ACTIVE)

    def is_active(self, role: Role, account_id) -> bool:
        return self.get_status(role, account_id) == AccountStatus.ACTIVE

    def set_status(self, role: Role, account_id, status: AccountStatus) -> StoreResult:
        raw = {k: v.value for k, v in self.status_map().items()}
        raw[status_key(role, account_id)] = AccountStatus(status).value
        return self._store.write(ACCOUNT_STATUS_KEY, raw)
