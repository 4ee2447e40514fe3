import os
from pathlib import Path

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# 'memory' keeps everything in-process; 'mysql' shares the store across processes
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "worktime_db"),
}

ACCOUNTS_FILE = os.getenv("ACCOUNTS_FILE", str(Path(__file__).resolve().parents[1] / "data" / "accounts.json"))

# 'swallow' logs storage failures and keeps going, 'raise' surfaces them
STORAGE_FAILURE_POLICY = os.getenv("STORAGE_FAILURE_POLICY", "swallow")

STANDARD_SHIFT_MINUTES = int(os.getenv("STANDARD_SHIFT_MINUTES", "540"))
MONTHLY_TARGET_HOURS = float(os.getenv("MONTHLY_TARGET_HOURS", "160"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, the kv_store table is created on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
