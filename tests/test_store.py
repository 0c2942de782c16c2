from unittest.mock import MagicMock

import pytest
import redis

from src.todos.errors import TodoException, TodoExceptionCode
from src.todos.repositories import StoreRepository
from src.todos.settings import get_settings
from src.todos.store import (
    InMemoryRecordStore,
    RecordDecodeError,
    RecordNotFoundError,
    RedisRecordStore,
    StoreTransportError,
    get_record_store,
    get_redis_client,
)

OWNER = "test@test.test"
TODO_ID = "279f4a4e-48dc-4569-83df-8b30ce488599"


def mock_client() -> MagicMock:
    return MagicMock(spec=redis.Redis)


class TestRedisRecordStore:
    def test_uses_one_hash_per_owner(self):
        client = mock_client()
        RedisRecordStore(client).set_field(OWNER, TODO_ID, "{}")
        client.hset.assert_called_once_with("todo-test@test.test", TODO_ID, "{}")

    def test_get_field(self):
        client = mock_client()
        client.hget.return_value = b'{"id": "x"}'
        assert RedisRecordStore(client).get_field(OWNER, TODO_ID) == '{"id": "x"}'
        client.hget.assert_called_once_with("todo-test@test.test", TODO_ID)

    def test_get_missing_field(self):
        client = mock_client()
        client.hget.return_value = None
        with pytest.raises(RecordNotFoundError):
            RedisRecordStore(client).get_field(OWNER, TODO_ID)

    def test_get_all_fields(self):
        client = mock_client()
        client.hgetall.return_value = {TODO_ID: "{}"}
        assert RedisRecordStore(client).get_all_fields(OWNER) == {TODO_ID: "{}"}

    def test_get_all_fields_empty(self):
        client = mock_client()
        client.hgetall.return_value = {}
        assert RedisRecordStore(client).get_all_fields(OWNER) == {}

    def test_delete_field(self):
        client = mock_client()
        client.hdel.return_value = 0
        RedisRecordStore(client).delete_field(OWNER, TODO_ID)
        client.hdel.assert_called_once_with("todo-test@test.test", TODO_ID)

    def test_undecodable_values(self):
        client = mock_client()
        error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        client.hget.side_effect = error
        client.hgetall.side_effect = error
        store = RedisRecordStore(client)

        with pytest.raises(RecordDecodeError):
            store.get_field(OWNER, TODO_ID)
        with pytest.raises(RecordDecodeError):
            store.get_all_fields(OWNER)

    def test_undecodable_bytes(self):
        client = mock_client()
        client.hget.return_value = b"\xff\xfe"
        client.hgetall.return_value = {TODO_ID.encode(): b"\xff\xfe"}
        store = RedisRecordStore(client)

        with pytest.raises(RecordDecodeError):
            store.get_field(OWNER, TODO_ID)
        with pytest.raises(RecordDecodeError):
            store.get_all_fields(OWNER)

    def test_undecodable_listing_is_a_retrieval_error(self):
        client = mock_client()
        client.hgetall.side_effect = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

        with pytest.raises(TodoException) as exc:
            StoreRepository(RedisRecordStore(client)).get_all(OWNER)
        assert exc.value.code == TodoExceptionCode.ERROR_WHILE_RETRIEVING
        assert isinstance(exc.value.cause, RecordDecodeError)

    @pytest.mark.parametrize(
        "error", [redis.exceptions.ConnectionError("refused"), redis.exceptions.TimeoutError("timed out")]
    )
    def test_transport_errors(self, error):
        client = mock_client()
        for method in (client.hset, client.hget, client.hgetall, client.hdel):
            method.side_effect = error
        store = RedisRecordStore(client)

        with pytest.raises(StoreTransportError):
            store.set_field(OWNER, TODO_ID, "{}")
        with pytest.raises(StoreTransportError):
            store.get_field(OWNER, TODO_ID)
        with pytest.raises(StoreTransportError):
            store.get_all_fields(OWNER)
        with pytest.raises(StoreTransportError):
            store.delete_field(OWNER, TODO_ID)


class TestInMemoryRecordStore:
    def test_set_get_delete(self):
        store = InMemoryRecordStore()
        store.set_field(OWNER, TODO_ID, "a")
        store.set_field(OWNER, TODO_ID, "b")
        assert store.get_field(OWNER, TODO_ID) == "b"

        store.delete_field(OWNER, TODO_ID)
        store.delete_field(OWNER, TODO_ID)
        with pytest.raises(RecordNotFoundError):
            store.get_field(OWNER, TODO_ID)

    def test_owners_are_partitioned(self):
        store = InMemoryRecordStore()
        store.set_field(OWNER, TODO_ID, "mine")
        store.set_field("other@test.test", TODO_ID, "theirs")
        assert store.get_all_fields(OWNER) == {TODO_ID: "mine"}
        assert store.get_all_fields("nobody@test.test") == {}

    def test_get_all_fields_returns_a_copy(self):
        store = InMemoryRecordStore()
        store.set_field(OWNER, TODO_ID, "a")
        store.get_all_fields(OWNER).clear()
        assert store.get_field(OWNER, TODO_ID) == "a"


class TestFactories:
    def test_redis_client_from_settings(self, monkeypatch):
        monkeypatch.setenv("REDIS_HOST", "redis.internal")
        monkeypatch.setenv("REDIS_PORT", "6380")
        client = get_redis_client(get_settings())
        kwargs = client.connection_pool.connection_kwargs
        assert kwargs["host"] == "redis.internal"
        assert kwargs["port"] == 6380

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "memory")
        assert isinstance(get_record_store(get_settings()), InMemoryRecordStore)

    def test_redis_backend(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "redis")
        assert isinstance(get_record_store(get_settings()), RedisRecordStore)
