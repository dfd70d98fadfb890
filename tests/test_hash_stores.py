"""Tests for the hash store adapters."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import redis

from slack_inbox.core.config import StoreSettings
from slack_inbox.core.interfaces import StoreError
from slack_inbox.storage import (
    InMemoryHashStore,
    RedisHashStore,
    SqliteHashStore,
    create_store,
)


def test_sqlite_store_roundtrip(tmp_path: Path) -> None:
    settings = StoreSettings(db_path=tmp_path / "nested" / "inbox.db")
    with SqliteHashStore(settings) as store:
        assert store.hget("inbox:sent", "U1") is None

        store.hset("inbox:sent", {"U1": [{"description": "ünïcødé ✓"}], "U2": []})
        store.hset("inbox:sent", {"U1": [{"description": "replaced"}]})

        assert store.hget("inbox:sent", "U1") == [{"description": "replaced"}]
        assert store.hmget("inbox:sent", "U1", "U2", "U3") == {
            "U1": [{"description": "replaced"}],
            "U2": [],
        }
        assert store.hkeys("inbox:sent") == ["U1", "U2"]
        assert store.hkeys("inbox:received") == []

    with SqliteHashStore(settings) as reopened:
        assert reopened.hget("inbox:sent", "U2") == []


def test_key_prefix_separates_environments(tmp_path: Path) -> None:
    db_path = tmp_path / "inbox.db"
    with SqliteHashStore(StoreSettings(db_path=db_path, key_prefix="prod")) as prod:
        prod.hset("inbox:sent", {"U1": ["prod"]})
    with SqliteHashStore(StoreSettings(db_path=db_path, key_prefix="dev")) as dev:
        assert dev.hget("inbox:sent", "U1") is None


def test_memory_store_returns_copies() -> None:
    store = InMemoryHashStore()
    value = [{"description": "original"}]
    store.hset("inbox:received", {"U1": value})

    value[0]["description"] = "mutated"
    loaded = store.hget("inbox:received", "U1")
    loaded[0]["description"] = "also mutated"

    assert store.hget("inbox:received", "U1") == [{"description": "original"}]
    assert store.hmget("inbox:received") == {}


def test_unserialisable_value_raises_store_error() -> None:
    with pytest.raises(StoreError):
        InMemoryHashStore().hset("inbox:sent", {"U1": object()})


def test_redis_store_uses_single_hash_per_namespace() -> None:
    client = MagicMock()
    client.hmget.return_value = [json.dumps(["a"]), None]
    store = RedisHashStore(StoreSettings(key_prefix="prod"), client=client)

    store.hset("inbox:received", {"U1": ["a"], "U2": []})
    result = store.hmget("inbox:received", "U1", "U2")

    client.hset.assert_called_once_with(
        "prod:inbox:received", mapping={"U1": '["a"]', "U2": "[]"}
    )
    client.hmget.assert_called_once_with("prod:inbox:received", ["U1", "U2"])
    assert result == {"U1": ["a"]}


def test_redis_errors_are_wrapped() -> None:
    client = MagicMock()
    client.hget.side_effect = redis.ConnectionError("down")
    store = RedisHashStore(StoreSettings(), client=client)

    with pytest.raises(StoreError):
        store.hget("inbox:sent", "U1")


def test_create_store_selects_backend(tmp_path: Path) -> None:
    memory = create_store(StoreSettings(backend="memory"))
    sqlite_store = create_store(
        StoreSettings(backend="sqlite", db_path=tmp_path / "x.db")
    )

    assert isinstance(memory, InMemoryHashStore)
    assert isinstance(sqlite_store, SqliteHashStore)
    sqlite_store.close()
