from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_month
from ..common.web import current_employee_id, current_role, device_info_from_request, login_required
from ..core.enums import ClockAction
from ..container import Container
from .codec import daily_record_to_dict
from .service import ActionResult


@dataclass(frozen=True)
class ActionRoute:
    rule: str
    endpoint: str
    action: ClockAction
    message: str


ACTION_ROUTES = (
    ActionRoute("/api/attendance/clock-in", "clock_in", ClockAction.CLOCK_IN, "Clocked in"),
    ActionRoute("/api/attendance/break/start", "start_break", ClockAction.START_BREAK, "Break started"),
    ActionRoute("/api/attendance/break/end", "end_break", ClockAction.END_BREAK, "Break ended"),
    ActionRoute("/api/attendance/clock-out", "clock_out", ClockAction.CLOCK_OUT, "Clocked out"),
)


def result_json(result: ActionResult, *, message: str) -> dict:
    return {
        "success": result.applied,
        "applied": result.applied,
        "reason": result.reason,
        "persisted": result.persisted,
        "message": message if result.applied else "Action not available right now",
        "record": daily_record_to_dict(result.record),
    }


def register(app: Flask, container: Container) -> None:
    def _make_action_view(route: ActionRoute):
        @login_required
        def view():
            result = container.attendance_service.perform(
                current_employee_id(),
                route.action,
                role=current_role(),
                device_info=device_info_from_request(),
            )
            return jsonify(result_json(result, message=route.message)), 200
        return view

    for route in ACTION_ROUTES:
        app.add_url_rule(route.rule, endpoint=route.endpoint, view_func=_make_action_view(route), methods=["POST"])

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        return jsonify(container.attendance_service.today_summary(current_employee_id())), 200

    @app.route("/api/attendance/device", methods=["POST"], endpoint="attendance_device")
    @login_required
    def attendance_device():
        result = container.attendance_service.refresh_device(current_employee_id(), device_info_from_request())
        return jsonify(result_json(result, message="Device updated")), 200

    @app.route("/api/attendance/month", methods=["GET"], endpoint="attendance_month")
    @login_required
    def attendance_month():
        try:
            month_s = request.args.get("month")
            month = parse_month(month_s) if month_s else container.clock.now().date().replace(day=1)
        except ValueError:
            return jsonify({"success": False, "message": "month must be YYYY-MM"}), 400

        data = container.report_service.build_monthly_report(employee_id=current_employee_id(), month=month)
        return jsonify({"month": month.strftime("%Y-%m"), **data.to_dict()}), 200
