from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role used for authorization and for account-status keys."""

    ADMIN = "admin"
    EMPLOYEE = "user"


class AttendanceStatus(str, Enum):
    """Derived status of a daily record (never persisted)."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_BREAK = "ON_BREAK"
    COMPLETED = "COMPLETED"


class AccountStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Device(str, Enum):
    DESKTOP = "Desktop"
    TABLET = "Tablet"
    MOBILE = "Mobile"


class ClockAction(str, Enum):
    CLOCK_IN = "clock_in"
    START_BREAK = "start_break"
    END_BREAK = "end_break"
    CLOCK_OUT = "clock_out"


class StorageFailurePolicy(str, Enum):
    """What to do when the key-value store fails."""

    SWALLOW = "swallow"
    RAISE = "raise"
