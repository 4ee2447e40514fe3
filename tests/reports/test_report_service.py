from __future__ import annotations

from datetime import date


def test_monthly_report_rows_and_overview(container, clock):
    svc = container.attendance_service
    svc.clock_in("2")
    clock.advance(hours=8)
    svc.clock_out("2")

    report = container.report_service.build_monthly_report(employee_id="2", month=date(2026, 3, 1))
    data = report.to_dict()

    assert len(data["rows"]) == 1
    row = data["rows"][0]
    assert row["dateISO"] == "2026-03-02"
    assert row["timeIn"] == "09:00"
    assert row["timeOut"] == "17:00"
    assert row["status"] == "Clocked Out"
    assert row["worked"] == "8h 00m"
    assert row["source"] == "Desktop"
    assert data["overview"]["present_days"] == 1
    assert data["overview"]["total_work_minutes"] == 480


def test_other_month_is_empty(container):
    container.attendance_service.clock_in("2")

    report = container.report_service.build_monthly_report(employee_id="2", month=date(2026, 2, 1))

    assert report.rows == []
