"""Unit-of-work helpers for the MySQL backend.

Each call opens its own connection: the store does a handful of single-row
statements per request, so pooling is left to the server.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[tuple[Any, Any]]:
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetch_blob(cur, column: str) -> Optional[bytes]:
    row = cur.fetchone()
    if not row or row[column] is None:
        return None
    return bytes(row[column])


def fetch_versions(cur) -> dict[str, Any]:
    """{key: updated_at} from a `SELECT k, updated_at` result."""
    return {row["k"]: row["updated_at"] for row in cur.fetchall() or []}
