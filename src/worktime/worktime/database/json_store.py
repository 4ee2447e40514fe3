from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..core.enums import StorageFailurePolicy
from ..core.exceptions import StorageError
from .kv_store import ChangeCallback, KeyValueStore, Unsubscribe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a best-effort write. Callers may ignore it."""

    ok: bool
    key: str
    error: Optional[str] = None


class JsonStore:
    """JSON documents on top of a byte key-value store.

    Reads never raise on bad data: a missing key, a storage error, a JSON parse
    failure or a shape mismatch all give back `default`. Write failures are
    handled by the configured policy: SWALLOW logs and returns a failed
    StoreResult, RAISE raises StorageError.
    """

    def __init__(self, store: KeyValueStore, *, policy: StorageFailurePolicy = StorageFailurePolicy.SWALLOW):
        self._store = store
        self._policy = StorageFailurePolicy(policy)

    def read(self, key: str, default: Callable[[], Any], *, expect: type = dict) -> Any:
        try:
            raw = self._store.get(key)
        except Exception as e:
            if self._policy == StorageFailurePolicy.RAISE:
                raise StorageError(f"read failed for {key}") from e
            logger.warning("storage read failed for key=%s: %s", key, e)
            return default()

        if raw is None:
            return default()

        try:
            parsed = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            logger.warning("malformed JSON under key=%s, treating as absent", key)
            return default()

        if not isinstance(parsed, expect):
            logger.warning("unexpected shape under key=%s (%s), treating as absent", key, type(parsed).__name__)
            return default()
        return parsed

    def write(self, key: str, value: Any) -> StoreResult:
        try:
            payload = json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
            self._store.set(key, payload)
        except Exception as e:
            if self._policy == StorageFailurePolicy.RAISE:
                raise StorageError(f"write failed for {key}") from e
            logger.error("storage write failed for key=%s: %s", key, e)
            return StoreResult(ok=False, key=key, error=str(e))
        return StoreResult(ok=True, key=key)

    def subscribe(self, key: str, callback: ChangeCallback) -> Unsubscribe:
        return self._store.subscribe(key, callback)
