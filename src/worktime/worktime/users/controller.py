from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, current_role, login_required
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, StorageError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        email = data.get("email", "")
        password = data.get("password", "")
        remember = data.get("remember_me")

        try:
            s_user = container.auth_service.authenticate(email, password)
        except (AuthenticationError, ValidationError) as e:
            return jsonify({"success": False, "message": str(e)}), 401
        except StorageError:
            raise
        except Exception as e:
            logger.exception("login failed")
            if bool(app.config.get("DEBUG", False)):
                return jsonify({"success": False, "message": f"Login error: {e}"}), 500
            return jsonify({"success": False, "message": "Login error"}), 500

        session.permanent = bool(remember)
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value

        return jsonify({"success": True, "user": {"id": s_user.user_id, "name": s_user.name, "role": s_user.role.value}}), 200

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True}), 200

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        role = current_role()
        return jsonify(
            {
                "id": session["user_id"],
                "name": session.get("name"),
                "role": role.value,
                "status": container.account_statuses.get_status(role, session["user_id"]).value,
            }
        ), 200

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def admin_users():
        return jsonify({"users": container.account_service.list_admin_view()}), 200

    @app.route("/api/admin/users/<role>/<int:account_id>/toggle", methods=["POST"], endpoint="admin_toggle_user")
    @admin_required
    def admin_toggle_user(role: str, account_id: int):
        try:
            target_role = Role(role)
        except ValueError:
            return jsonify({"success": False, "message": "Unknown role"}), 400

        try:
            status = container.account_service.toggle_status(
                current_role=current_role(),
                role=target_role,
                account_id=account_id,
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403

        return jsonify({"success": True, "status": status.value}), 200

    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @admin_required
    def admin_dashboard():
        today = container.clock.now().date()
        admin_id = str(session["user_id"])
        return jsonify(
            {
                "date": today.strftime("%Y-%m-%d"),
                "users": container.account_service.active_employee_stats(),
                "todayAttendance": container.ledger.count_clocked_in_on(today),
                "me": container.attendance_service.today_summary(admin_id),
            }
        ), 200
