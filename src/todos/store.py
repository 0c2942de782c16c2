from __future__ import annotations

from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict

import redis

from .settings import Settings

OWNER_KEY_TEMPLATE = "todo-{owner}"


class StoreError(Exception):
    """Base class for record store failures."""


class RecordNotFoundError(StoreError):
    """Raised when an owner/id pair is absent from the store."""


class StoreTransportError(StoreError):
    """Raised when the store cannot be reached or a call is timed out or cancelled."""


class RecordDecodeError(StoreError):
    """Raised when a stored value is not valid UTF-8 text."""


# PUBLIC_INTERFACE
class RecordStore(ABC):
    """
    Per-owner field map. Each owner owns one collection; each field of the
    collection is a record id mapped to the record's serialized value.
    """

    @abstractmethod
    def set_field(self, owner: str, field: str, value: str) -> None:
        """Insert or overwrite a field."""

    @abstractmethod
    def get_field(self, owner: str, field: str) -> str:
        """Return a field value. Raise RecordNotFoundError if it is absent."""

    @abstractmethod
    def get_all_fields(self, owner: str) -> Dict[str, str]:
        """Return every field of the owner's collection; empty when there are none."""

    @abstractmethod
    def delete_field(self, owner: str, field: str) -> None:
        """Remove a field. Removing an absent field is not an error."""


class RedisRecordStore(RecordStore):
    """
    Record store backed by one Redis hash per owner.

    Any ``redis.exceptions.RedisError`` (connection refused, socket timeout,
    ...) is re-raised as StoreTransportError; a value that is not valid UTF-8
    is re-raised as RecordDecodeError.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @staticmethod
    def owner_key(owner: str) -> str:
        return OWNER_KEY_TEMPLATE.format(owner=owner)

    def set_field(self, owner: str, field: str, value: str) -> None:
        try:
            self._client.hset(self.owner_key(owner), field, value)
        except redis.exceptions.RedisError as exc:
            raise StoreTransportError(str(exc)) from exc

    def get_field(self, owner: str, field: str) -> str:
        try:
            value = self._client.hget(self.owner_key(owner), field)
        except UnicodeDecodeError as exc:
            raise RecordDecodeError(str(exc)) from exc
        except redis.exceptions.RedisError as exc:
            raise StoreTransportError(str(exc)) from exc
        if value is None:
            raise RecordNotFoundError(f"{field} not found for {owner}")
        return _as_text(value)

    def get_all_fields(self, owner: str) -> Dict[str, str]:
        try:
            result = self._client.hgetall(self.owner_key(owner))
        except UnicodeDecodeError as exc:
            raise RecordDecodeError(str(exc)) from exc
        except redis.exceptions.RedisError as exc:
            raise StoreTransportError(str(exc)) from exc
        return {_as_text(k): _as_text(v) for k, v in result.items()}

    def delete_field(self, owner: str, field: str) -> None:
        try:
            self._client.hdel(self.owner_key(owner), field)
        except redis.exceptions.RedisError as exc:
            raise StoreTransportError(str(exc)) from exc


def _as_text(value) -> str:
    # Clients created without decode_responses hand back bytes.
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RecordDecodeError(str(exc)) from exc
    return value


class InMemoryRecordStore(RecordStore):
    """
    Thread-safe in-memory record store suitable for testing and local runs.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._collections: Dict[str, Dict[str, str]] = {}

    def set_field(self, owner: str, field: str, value: str) -> None:
        with self._lock:
            self._collections.setdefault(owner, {})[field] = value

    def get_field(self, owner: str, field: str) -> str:
        with self._lock:
            try:
                return self._collections[owner][field]
            except KeyError:
                raise RecordNotFoundError(f"{field} not found for {owner}") from None

    def get_all_fields(self, owner: str) -> Dict[str, str]:
        with self._lock:
            return dict(self._collections.get(owner, {}))

    def delete_field(self, owner: str, field: str) -> None:
        with self._lock:
            collection = self._collections.get(owner)
            if collection is not None:
                collection.pop(field, None)


# PUBLIC_INTERFACE
def get_redis_client(settings: Settings) -> redis.Redis:
    """
    Build a Redis client from settings. No connection is opened until the
    first command is sent.
    """
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        db=0,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_timeout,
        decode_responses=True,
    )


# PUBLIC_INTERFACE
def get_record_store(settings: Settings) -> RecordStore:
    """
    Factory to return the configured record store based on settings.
    - redis: RedisRecordStore on a client built from REDIS_HOST/REDIS_PORT
    - memory: InMemoryRecordStore
    """
    if settings.store_backend == "memory":
        return InMemoryRecordStore()
    return RedisRecordStore(get_redis_client(settings))
