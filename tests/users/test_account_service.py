from __future__ import annotations

import json

import pytest

from src.worktime.worktime.core.enums import AccountStatus, Role
from src.worktime.worktime.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from src.worktime.worktime.users.json_account_repository import JsonAccountRepository


def test_authenticate_ok(container):
    user = container.auth_service.authenticate("ANA@worktime.local ", "pw")

    assert user.user_id == 2
    assert user.role == Role.EMPLOYEE


@pytest.mark.parametrize("email, password", [("ana@worktime.local", "wrong"), ("nobody@worktime.local", "pw")])
def test_authenticate_rejects_bad_credentials(container, email, password):
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate(email, password)


def test_authenticate_requires_email(container):
    with pytest.raises(ValidationError):
        container.auth_service.authenticate("  ", "pw")


def test_deactivated_account_cannot_sign_in(container):
    container.account_statuses.set_status(Role.EMPLOYEE, 3, AccountStatus.INACTIVE)

    with pytest.raises(AuthenticationError, match="deactivated"):
        container.auth_service.authenticate("ben@worktime.local", "pw")


def test_toggle_status_flips_between_active_and_inactive(container):
    svc = container.account_service

    assert svc.toggle_status(current_role=Role.ADMIN, role=Role.EMPLOYEE, account_id=3) == AccountStatus.INACTIVE
    assert svc.active_employee_stats() == {"total": 2, "active": 1}
    assert svc.toggle_status(current_role=Role.ADMIN, role=Role.EMPLOYEE, account_id=3) == AccountStatus.ACTIVE


def test_toggle_status_is_admin_only(container):
    with pytest.raises(AuthorizationError):
        container.account_service.toggle_status(current_role=Role.EMPLOYEE, role=Role.EMPLOYEE, account_id=3)


def test_toggle_status_unknown_account(container):
    with pytest.raises(ValidationError):
        container.account_service.toggle_status(current_role=Role.ADMIN, role=Role.EMPLOYEE, account_id=99)


def test_admin_view_lists_statuses(container):
    container.account_statuses.set_status(Role.EMPLOYEE, 2, AccountStatus.INACTIVE)

    rows = {r["id"]: r for r in container.account_service.list_admin_view()}

    assert rows[1]["role"] == "admin"
    assert rows[1]["status"] == "Active"
    assert rows[2]["status"] == "Inactive"


def test_accounts_file_hashes_plain_passwords_and_skips_bad_entries(tmp_path):
    path = tmp_path / "accounts.json"
    path.write_text(
        json.dumps(
            [
                {"id": 5, "email": "Cy@Example.com", "name": "Cy", "role": "user", "password": "secret"},
                {"email": "missing-id@example.com"},
                {"id": 6, "email": "x@example.com", "role": "superuser", "password": "x"},
            ]
        ),
        encoding="utf-8",
    )

    repo = JsonAccountRepository.from_file(path)

    accounts = repo.list_all()
    assert [a.account_id for a in accounts] == [5]
    assert accounts[0].password_hash != "secret"
    assert repo.get_by_email("cy@example.com").name == "Cy"
    assert repo.get_by_id(Role.EMPLOYEE, 5) is not None
    assert repo.get_by_id(Role.ADMIN, 5) is None


def test_missing_accounts_file_gives_empty_repository(tmp_path):
    assert JsonAccountRepository.from_file(tmp_path / "nope.json").list_all() == []
