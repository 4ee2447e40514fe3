import os
from pathlib import Path

SECRET_KEY = "test-secret"

STORE_BACKEND = "memory"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "worktime_test"),
}

ACCOUNTS_FILE = str(Path(__file__).resolve().parents[1] / "data" / "accounts.json")

STORAGE_FAILURE_POLICY = "raise"

STANDARD_SHIFT_MINUTES = 540
MONTHLY_TARGET_HOURS = 160

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
