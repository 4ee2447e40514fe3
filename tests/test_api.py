from __future__ import annotations

import pytest

from src.worktime.worktime.container import build_container
from src.worktime.worktime.core.enums import StorageFailurePolicy
from src.worktime.worktime.database.kv_store import InMemoryKeyValueStore
from src.worktime.worktime.main import create_app


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, email, password):
    return client.post("/login", json={"email": email, "password": password})


def test_login_and_me(client):
    res = _login(client, "ana@worktime.local", "pw")
    assert res.status_code == 200
    assert res.get_json()["user"]["role"] == "user"

    me = client.get("/api/me").get_json()
    assert me["id"] == 2
    assert me["status"] == "Active"


def test_bad_login(client):
    res = _login(client, "ana@worktime.local", "nope")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_attendance_requires_login(client):
    assert client.post("/api/attendance/clock-in").status_code == 401


def test_employee_day_flow(client, clock):
    _login(client, "ana@worktime.local", "pw")

    res = client.post(
        "/api/attendance/clock-in",
        json={"viewportWidth": 390, "hasTouch": True},
        headers={"User-Agent": "test"},
    )
    body = res.get_json()
    assert body["applied"] is True
    assert body["record"]["device"] == "Mobile"

    again = client.post("/api/attendance/clock-in").get_json()
    assert again["applied"] is False
    assert again["reason"] == "already_clocked_in"

    clock.advance(hours=3)
    assert client.post("/api/attendance/break/start").get_json()["applied"] is True
    clock.advance(hours=1)
    assert client.post("/api/attendance/break/end").get_json()["applied"] is True
    clock.advance(hours=5)
    out = client.post("/api/attendance/clock-out").get_json()
    assert out["record"]["hours"] == 8.0

    today = client.get("/api/attendance/today").get_json()
    assert today["statusLabel"] == "Clocked Out"

    month = client.get("/api/attendance/month?month=2026-03").get_json()
    assert month["overview"]["present_days"] == 1
    assert month["rows"][0]["source"] == "Mobile"


def test_bad_month_is_rejected(client):
    _login(client, "ana@worktime.local", "pw")

    assert client.get("/api/attendance/month?month=March").status_code == 400


def test_admin_routes_are_forbidden_for_employees(client):
    _login(client, "ana@worktime.local", "pw")

    assert client.get("/api/admin/users").status_code == 403
    assert client.patch("/api/admin/attendance/2/2026-03-02", json={"timeIn": "08:00"}).status_code == 403


def test_admin_sees_employee_clock_in_and_corrects_it(client, container):
    container.attendance_service.clock_in("2")
    _login(client, "admin@worktime.local", "admin123")

    listed = client.get("/api/admin/attendance?date=2026-03-02").get_json()
    assert [r["employeeId"] for r in listed["records"]] == ["2"]

    dash = client.get("/api/admin/dashboard").get_json()
    assert dash["todayAttendance"] == 1
    assert dash["users"] == {"total": 2, "active": 2}

    res = client.patch("/api/admin/attendance/2/2026-03-02", json={"timeIn": "08:30", "timeOut": "17:30"})
    assert res.status_code == 200
    assert res.get_json()["record"]["hours"] == 9.0

    month = client.get("/api/admin/attendance?employee_id=2&month=2026-03").get_json()
    assert month["records"][0]["timeIn"].startswith("2026-03-02T08:30")
    assert month["overview"]["total_work_minutes"] == 540


def test_correction_with_unknown_field_is_rejected(client):
    _login(client, "admin@worktime.local", "admin123")

    res = client.patch("/api/admin/attendance/2/2026-03-02", json={"overtime": 5})

    assert res.status_code == 400


def test_admin_toggle_blocks_employee_login(client):
    _login(client, "admin@worktime.local", "admin123")

    res = client.post("/api/admin/users/user/3/toggle")
    assert res.get_json()["status"] == "Inactive"

    client.post("/logout")
    assert _login(client, "ben@worktime.local", "pw").status_code == 401


class UnreadableStore(InMemoryKeyValueStore):
    def get(self, key):
        raise OSError("connection lost")


def test_storage_outage_answers_503_on_every_route(clock, accounts, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    c = build_container(
        kv_store=UnreadableStore(), clock=clock, accounts=accounts, failure_policy=StorageFailurePolicy.RAISE
    )
    client = create_app(c).test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = 2
        sess["role"] = "user"

    responses = [
        client.post("/api/attendance/clock-in"),
        client.get("/api/attendance/today"),
        client.post("/api/attendance/device", json={"viewportWidth": 390}),
        client.get("/api/attendance/month"),
        client.get("/api/me"),
    ]

    assert [r.status_code for r in responses] == [503] * 5
    assert responses[1].get_json()["success"] is False
