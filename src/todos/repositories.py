from __future__ import annotations

import logging
import re
import uuid
from abc import ABC, abstractmethod
from typing import List

from pydantic import ValidationError

from .errors import TodoException, TodoExceptionCode
from .models import Todo
from .store import RecordStore, StoreError

logger = logging.getLogger(__name__)

_HEX_UUID = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
# Canonical, brace-wrapped, urn:uuid: prefixed, or 32 bare hex digits.
_UUID_PATTERN = re.compile(
    rf"{_HEX_UUID}|\{{{_HEX_UUID}\}}|(?i:urn:uuid:){_HEX_UUID}|[0-9a-fA-F]{{32}}"
)


# PUBLIC_INTERFACE
def validate_id(todo_id: str) -> None:
    """
    Check that ``todo_id`` is a well-formed UUID (any version).

    Raises:
        TodoException(INVALID_ID) when it is not.
    """
    if not isinstance(todo_id, str) or not _UUID_PATTERN.fullmatch(todo_id):
        raise TodoException(TodoExceptionCode.INVALID_ID)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for owner-scoped todo storage."""

    @abstractmethod
    def create(self, owner: str, todo: Todo) -> Todo:
        """Assign a new id to ``todo``, store it and return it."""

    @abstractmethod
    def get_all(self, owner: str) -> List[Todo]:
        """Return every todo of ``owner`` in no particular order."""

    @abstractmethod
    def get_by_id(self, owner: str, todo_id: str) -> Todo:
        """Return one todo of ``owner``."""

    @abstractmethod
    def delete(self, owner: str, todo_id: str) -> None:
        """Delete one todo of ``owner``; absent ids are not an error."""

    @abstractmethod
    def update(self, owner: str, todo_id: str, todo: Todo) -> Todo:
        """Overwrite the todo stored at ``todo_id`` and return it with that id."""


class StoreRepository(Repository):
    """
    Repository keeping each todo as a JSON document inside the owner's
    collection of a RecordStore.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def create(self, owner: str, todo: Todo) -> Todo:
        created = todo.model_copy(update={"id": str(uuid.uuid4())})
        try:
            self._store.set_field(owner, created.id, created.model_dump_json())
        except StoreError as exc:
            logger.warning("Could not create todo for %s: %s", owner, exc)
            raise TodoException(TodoExceptionCode.ERROR_WHILE_CREATING, exc) from exc
        return created

    def get_all(self, owner: str) -> List[Todo]:
        try:
            fields = self._store.get_all_fields(owner)
            return [Todo.model_validate_json(value) for value in fields.values()]
        except (StoreError, ValidationError) as exc:
            logger.warning("Could not list todos for %s: %s", owner, exc)
            raise TodoException(TodoExceptionCode.ERROR_WHILE_RETRIEVING, exc) from exc

    def get_by_id(self, owner: str, todo_id: str) -> Todo:
        validate_id(todo_id)
        try:
            return Todo.model_validate_json(self._store.get_field(owner, todo_id))
        except (StoreError, ValidationError) as exc:
            logger.warning("Could not read todo %s for %s: %s", todo_id, owner, exc)
            raise TodoException(TodoExceptionCode.ERROR_WHILE_RETRIEVING, exc) from exc

    def delete(self, owner: str, todo_id: str) -> None:
        validate_id(todo_id)
        try:
            self._store.delete_field(owner, todo_id)
        except StoreError as exc:
            logger.warning("Could not delete todo %s for %s: %s", todo_id, owner, exc)
            raise TodoException(TodoExceptionCode.ERROR_WHILE_DELETING, exc) from exc

    def update(self, owner: str, todo_id: str, todo: Todo) -> Todo:
        validate_id(todo_id)
        # Stored documents always carry the field's id, whatever the caller sent.
        updated = todo.model_copy(update={"id": todo_id})
        try:
            self._store.set_field(owner, todo_id, updated.model_dump_json())
        except StoreError as exc:
            logger.warning("Could not update todo %s for %s: %s", todo_id, owner, exc)
            raise TodoException(TodoExceptionCode.ERROR_WHILE_UPDATING, exc) from exc
        return updated
