from __future__ import annotations

from flask import Flask, jsonify, request

from ..attendance.codec import ledger_entry_to_dict
from ..attendance.controller import result_json
from ..common.datetime_utils import parse_iso_date, parse_month
from ..common.validators import require_object
from ..common.web import admin_required, current_role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        """Ledger query: ?employee_id=&month=YYYY-MM, or ?date=YYYY-MM-DD."""

        ledger = container.ledger
        try:
            date_s = request.args.get("date")
            if date_s:
                records = ledger.list_for_date(parse_iso_date(date_s))
                return jsonify({"records": [ledger_entry_to_dict(r) for r in records]}), 200

            employee_id = request.args.get("employee_id")
            if not employee_id:
                return jsonify({"success": False, "message": "employee_id or date is required"}), 400

            month_s = request.args.get("month")
            month = parse_month(month_s) if month_s else container.clock.now().date().replace(day=1)
        except ValueError:
            return jsonify({"success": False, "message": "Invalid date or month"}), 400

        data = container.report_service.build_monthly_report(employee_id=employee_id, month=month)
        records = ledger.list_for_employee_month(employee_id, month)
        return jsonify(
            {
                "employeeId": employee_id,
                "month": month.strftime("%Y-%m"),
                "records": [ledger_entry_to_dict(r) for r in records],
                **data.to_dict(),
            }
        ), 200

    @app.route(
        "/api/admin/attendance/<employee_id>/<date_iso>",
        methods=["PATCH", "POST"],
        endpoint="admin_correct_attendance",
    )
    @admin_required
    def admin_correct_attendance(employee_id: str, date_iso: str):
        try:
            patch = require_object(request.get_json(silent=True), "Correction body")
            result = container.attendance_service.correct_record(
                current_role=current_role(),
                employee_id=employee_id,
                work_date=parse_iso_date(date_iso),
                patch=patch,
            )
        except ValueError:
            return jsonify({"success": False, "message": "date must be YYYY-MM-DD"}), 400
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403

        return jsonify(result_json(result, message="Attendance record updated")), 200
