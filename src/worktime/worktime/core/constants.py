"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

STANDARD_SHIFT_MINUTES = 540
MONTHLY_TARGET_HOURS = 160

MOBILE_MAX_WIDTH = 768
TABLET_MAX_WIDTH = 1024

LEDGER_KEY = "attendance_ledger"
ACCOUNT_STATUS_KEY = "account_status"
DAILY_RECORD_KEY_PREFIX = "attendance_"

DEFAULT_SESSION_DAYS = 7
