from __future__ import annotations

import atexit
import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .container import Container, build_container
from .core.enums import StorageFailurePolicy
from .core.exceptions import StorageError
from .database.bootstrap import ensure_database_exists
from .database.connection import DBConfig, DatabaseConnection
from .users.json_account_repository import JsonAccountRepository
from .attendance.controller import register as register_attendance
from .ledger.controller import register as register_ledger
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        store_backend = getattr(settings, "STORE_BACKEND", "memory")
        db_config = getattr(settings, "DB_CONFIG", {})
        logger.info("settings=%s store=%s", settings_module, store_backend)

        if store_backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            ensure_database_exists(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))

        container = build_container(
            accounts=JsonAccountRepository.from_file(getattr(settings, "ACCOUNTS_FILE")),
            store_backend=store_backend,
            db_config=db_config,
            failure_policy=StorageFailurePolicy(getattr(settings, "STORAGE_FAILURE_POLICY", "swallow")),
            shift_minutes=int(getattr(settings, "STANDARD_SHIFT_MINUTES", 540)),
            target_hours=float(getattr(settings, "MONTHLY_TARGET_HOURS", 160)),
        )
        atexit.register(container.close)

    poll_changes = getattr(container.kv_store, "poll_changes", None)
    if poll_changes is not None:
        @app.before_request
        def _refresh_from_other_writers():
            # Writers in other processes only become visible through polling.
            poll_changes()

    @app.errorhandler(StorageError)
    def _storage_unavailable(e: StorageError):
        logger.error("storage unavailable: %s", e)
        return jsonify({"success": False, "message": "Attendance storage is unavailable"}), 503

    app.extensions["worktime"] = container

    register_users(app, container)
    register_attendance(app, container)
    register_ledger(app, container)

    return app
