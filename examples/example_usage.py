"""Example: drive the attendance services directly (no Flask).

Goal: show that controllers are a thin layer; the state machine, ledger and
reports all live in services backed by an injectable key-value store.
"""

from datetime import datetime, timezone

from src.worktime.worktime.common.datetime_utils import FixedClock
from src.worktime.worktime.container import build_container
from src.worktime.worktime.core.enums import Role
from src.worktime.worktime.devices.classifier import DeviceInfo


def main():
    clock = FixedClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))
    container = build_container(clock=clock)
    attendance = container.attendance_service

    attendance.clock_in("2", device_info=DeviceInfo(viewport_width=390, has_touch=True))
    clock.advance(hours=3)
    attendance.start_break("2")
    clock.advance(hours=1)
    attendance.clock_out("2")  # closes the open break at the same instant

    print(attendance.today_summary("2"))
    print(container.report_service.build_monthly_report(employee_id="2", month=clock.now().date()).to_dict())

    attendance.correct_record(
        current_role=Role.ADMIN,
        employee_id="2",
        work_date=clock.now().date(),
        patch={"lunchIn": "12:30"},
    )
    print(container.ledger.get("2", clock.now().date()))
    container.close()


if __name__ == "__main__":
    main()
