from __future__ import annotations

import pytest

from src.worktime.worktime.core.enums import StorageFailurePolicy
from src.worktime.worktime.core.exceptions import StorageError
from src.worktime.worktime.database.json_store import JsonStore
from src.worktime.worktime.database.kv_store import InMemoryKeyValueStore


class BrokenStore(InMemoryKeyValueStore):
    def get(self, key):
        raise OSError("unavailable")

    def set(self, key, value):
        raise OSError("unavailable")


def test_missing_key_gives_default():
    store = JsonStore(InMemoryKeyValueStore())

    assert store.read("nothing", dict) == {}


@pytest.mark.parametrize("raw", [b"{not json", b"\xff\xfe", b"[1, 2, 3]", b"\"text\""])
def test_malformed_payload_is_treated_as_absent(raw):
    store = JsonStore(InMemoryKeyValueStore({"k": raw}))

    assert store.read("k", dict) == {}


def test_write_then_read():
    store = JsonStore(InMemoryKeyValueStore())

    result = store.write("k", {"a": 1, "name": "Ana"})

    assert result.ok
    assert store.read("k", dict) == {"a": 1, "name": "Ana"}


def test_swallow_policy_reports_failure():
    store = JsonStore(BrokenStore(), policy=StorageFailurePolicy.SWALLOW)

    result = store.write("k", {"a": 1})

    assert not result.ok
    assert result.key == "k"
    assert "unavailable" in result.error
    assert store.read("k", dict) == {}


def test_raise_policy_raises_storage_error():
    store = JsonStore(BrokenStore(), policy="raise")

    with pytest.raises(StorageError):
        store.write("k", {"a": 1})
    with pytest.raises(StorageError):
        store.read("k", dict)


def test_subscribers_hear_about_writes_to_their_key_only():
    kv = InMemoryKeyValueStore()
    store = JsonStore(kv)
    seen = []
    unsubscribe = store.subscribe("watched", seen.append)

    store.write("watched", {})
    store.write("other", {})
    unsubscribe()
    store.write("watched", {})

    assert seen == ["watched"]


def test_failing_subscriber_does_not_break_the_write():
    kv = InMemoryKeyValueStore()

    def boom(key):
        raise RuntimeError("observer bug")

    kv.subscribe("k", boom)
    JsonStore(kv).write("k", {"a": 1})

    assert kv.get("k") == b'{"a":1}'
