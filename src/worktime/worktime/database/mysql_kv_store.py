from __future__ import annotations

import logging
from typing import Optional

from .connection import DatabaseConnection
from .kv_store import ChangeCallback, ChangeChannel, Unsubscribe
from .mysql_base import db_cursor, fetch_blob, fetch_versions

logger = logging.getLogger(__name__)


class MySQLKeyValueStore:
    """Key-value store backed by the `kv_store` table.

    Writers in this process notify local subscribers directly. Writers in other
    processes are picked up by `poll_changes()`, which compares `updated_at`
    for every subscribed key and publishes the ones that moved.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, channel: Optional[ChangeChannel] = None):
        self._conn_factory = conn_factory
        self._channel = channel or ChangeChannel()
        self._seen: dict[str, object] = {}

    def open(self) -> None:
        from .bootstrap import ensure_kv_table

        ensure_kv_table(self._conn_factory)

    def close(self) -> None:
        self._channel.clear()
        self._seen.clear()

    def get(self, key: str) -> Optional[bytes]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT v FROM kv_store WHERE k=%s", (key,))
            return fetch_blob(cur, "v")

    def set(self, key: str, value: bytes) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO kv_store(k, v) VALUES(%s, %s)
                ON DUPLICATE KEY UPDATE v=VALUES(v), updated_at=CURRENT_TIMESTAMP(6)
                """,
                (key, bytes(value)),
            )
        self._channel.publish(key)

    def subscribe(self, key: str, callback: ChangeCallback) -> Unsubscribe:
        self._seen.setdefault(key, None)
        return self._channel.subscribe(key, callback)

    def poll_changes(self) -> list[str]:
        keys = list(self._seen)
        if not keys:
            return []

        placeholders = ",".join(["%s"] * len(keys))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT k, updated_at FROM kv_store WHERE k IN ({placeholders})", tuple(keys))
            versions = fetch_versions(cur)

        changed = [k for k, version in versions.items() if self._seen.get(k) != version]
        self._seen.update({k: versions[k] for k in changed})

        for key in changed:
            logger.debug("kv_store key changed elsewhere: %s", key)
            self._channel.publish(key)
        return changed
