from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_email(value: str) -> str:
    """Normalised (trimmed, lower-cased) sign-in email."""
    email = require_non_empty(value or "", "Email").lower()
    if "@" not in email:
        raise ValidationError("Email is not valid")
    return email


def require_object(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise ValidationError(f"{what} must be a JSON object")
    return value
