from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str], None]
Unsubscribe = Callable[[], None]


class KeyValueStore(Protocol):
    """Durable byte mapping shared by the employee and administrator views.

    Note (DIP): services depend on this interface, never on a concrete backend.
    """

    def open(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def set(self, key: str, value: bytes) -> None:
        raise NotImplementedError

    def subscribe(self, key: str, callback: ChangeCallback) -> Unsubscribe:
        raise NotImplementedError


class ChangeChannel:
    """Publish/subscribe channel for "key changed" notifications.

    Subscribers receive the key that changed and are expected to re-read it.
    """

    def __init__(self):
        self._subscribers: dict[str, list[ChangeCallback]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, key: str, callback: ChangeCallback) -> Unsubscribe:
        with self._lock:
            self._subscribers[key].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(key, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def publish(self, key: str) -> None:
        with self._lock:
            callbacks = list(self._subscribers.get(key, []))

        for callback in callbacks:
            try:
                callback(key)
            except Exception:
                # An observer must not undo a write that already landed.
                logger.exception("change subscriber failed for key=%s", key)

    def clear(self) -> None:
        with self._lock:
            self._subscribers.clear()


class InMemoryKeyValueStore:
    """Process-local store used by tests, demos and the 'memory' backend."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None, *, channel: Optional[ChangeChannel] = None):
        self._data: dict[str, bytes] = dict(initial or {})
        self._channel = channel or ChangeChannel()
        self._lock = threading.Lock()
        self.is_open = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self._channel.clear()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)
        self._channel.publish(key)

    def subscribe(self, key: str, callback: ChangeCallback) -> Unsubscribe:
        return self._channel.subscribe(key, callback)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)
