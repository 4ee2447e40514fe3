from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..common.validators import require_email
from ..core.enums import AccountStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .account_status import AccountStatusRepository
from .repository import AccountRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    role: Role


class AuthService:
    """Use case: authenticate user (login) for the demo identity provider."""

    def __init__(self, accounts: AccountRepository, statuses: AccountStatusRepository):
        self._accounts = accounts
        self._statuses = statuses

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_email(email)
        account = self._accounts.get_by_email(email)
        if not account:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except Exception:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        if not self._statuses.is_active(account.role, account.account_id):
            raise AuthenticationError("This account is deactivated.")

        return SessionUser(user_id=account.account_id, name=account.name, role=account.role)


class AccountService:
    """Use case: account activation and the admin user list."""

    def __init__(self, accounts: AccountRepository, statuses: AccountStatusRepository):
        self._accounts = accounts
        self._statuses = statuses

    def list_admin_view(self) -> list[dict]:
        statuses = self._statuses.status_map()
        return [
            {
                "id": a.account_id,
                "name": a.name,
                "email": a.email,
                "role": a.role.value,
                "status": statuses.get(f"{a.role.value}:{a.account_id}", AccountStatus.ACTIVE).value,
            }
            for a in self._accounts.list_all()
        ]

    def active_employee_stats(self) -> dict:
        employees = [a for a in self._accounts.list_all() if a.role == Role.EMPLOYEE]
        active = sum(1 for a in employees if self._statuses.is_active(Role.EMPLOYEE, a.account_id))
        return {"total": len(employees), "active": active}

    def toggle_status(self, *, current_role: Role, role: Role, account_id: int) -> AccountStatus:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to change account status")

        if not self._accounts.get_by_id(role, account_id):
            raise ValidationError("Account does not exist")

        current = self._statuses.get_status(role, account_id)
        new_status = AccountStatus.INACTIVE if current == AccountStatus.ACTIVE else AccountStatus.ACTIVE
        self._statuses.set_status(role, account_id, new_status)
        logger.info("account %s:%s set to %s", role.value, account_id, new_status.value)
        return new_status
