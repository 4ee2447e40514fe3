from __future__ import annotations

from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..devices.classifier import DeviceInfo


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please sign in to continue"}), 401

        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "message": "Forbidden"}), 403

        return view(*args, **kwargs)

    return wrapper


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        return Role.EMPLOYEE


def current_employee_id() -> str:
    return str(session["user_id"])


def device_info_from_request() -> DeviceInfo:
    data = request.get_json(silent=True) or {}
    width = data.get("viewportWidth")
    try:
        width = int(width) if width is not None else None
    except (TypeError, ValueError):
        width = None
    return DeviceInfo(
        viewport_width=width,
        user_agent=request.headers.get("User-Agent", ""),
        has_touch=bool(data.get("hasTouch", False)),
    )
