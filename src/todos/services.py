from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Tuple

from .errors import TodoException, TodoExceptionCode
from .models import Todo
from .repositories import Repository
from .schemas import CreateTodo, UpdateTodo

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
# strptime alone accepts unpadded fields such as "2024-1-1 0:0:0".
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")


def _parse_date(value: str) -> datetime:
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        raise ValueError(f"{value!r} does not match {DATE_FORMAT}")
    return datetime.strptime(value, DATE_FORMAT)


# PUBLIC_INTERFACE
def validate_dates(start_date: str, due_date: str) -> Tuple[datetime, datetime]:
    """
    Parse both dates and check their order.

    The start date is checked first, so an unparsable start date is reported
    even when the due date is invalid too. Equal dates are allowed.

    Returns:
        The parsed (start_date, due_date) pair.

    Raises:
        TodoException with INVALID_START_DATE, INVALID_DUE_DATE or
        START_DATE_AFTER_DUE_DATE.
    """
    try:
        parsed_start = _parse_date(start_date)
    except ValueError:
        raise TodoException(TodoExceptionCode.INVALID_START_DATE) from None

    try:
        parsed_due = _parse_date(due_date)
    except ValueError:
        raise TodoException(TodoExceptionCode.INVALID_DUE_DATE) from None

    if parsed_start > parsed_due:
        raise TodoException(TodoExceptionCode.START_DATE_AFTER_DUE_DATE)

    return parsed_start, parsed_due


# PUBLIC_INTERFACE
class Service(ABC):
    """Business-rule boundary for owner-scoped todos."""

    @abstractmethod
    def create(self, owner: str, data: CreateTodo) -> Todo:
        """Validate ``data`` and create a new, not completed, todo."""

    @abstractmethod
    def get_all(self, owner: str) -> List[Todo]:
        """Return every todo of ``owner``."""

    @abstractmethod
    def get_by_id(self, owner: str, todo_id: str) -> Todo:
        """Return one todo of ``owner``."""

    @abstractmethod
    def delete(self, owner: str, todo_id: str) -> None:
        """Delete one todo of ``owner``."""

    @abstractmethod
    def update(self, owner: str, todo_id: str, data: UpdateTodo) -> Todo:
        """Replace the content of a todo that is not completed."""


class TodosService(Service):
    """
    Service enforcing the date rules and the completed-todo immutability rule
    before delegating to a Repository.
    """

    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    def create(self, owner: str, data: CreateTodo) -> Todo:
        start_date, due_date = validate_dates(data.start_date, data.due_date)
        todo = Todo(
            name=data.name,
            description=data.description,
            start_date=start_date,
            due_date=due_date,
            completed=False,
        )
        return self._repository.create(owner, todo)

    def get_all(self, owner: str) -> List[Todo]:
        return self._repository.get_all(owner)

    def get_by_id(self, owner: str, todo_id: str) -> Todo:
        return self._repository.get_by_id(owner, todo_id)

    def delete(self, owner: str, todo_id: str) -> None:
        # Completed todos may still be removed; only edits are refused.
        self._repository.delete(owner, todo_id)

    def update(self, owner: str, todo_id: str, data: UpdateTodo) -> Todo:
        start_date, due_date = validate_dates(data.start_date, data.due_date)

        existing = self._repository.get_by_id(owner, todo_id)
        if existing.completed:
            logger.info("Refusing to update completed todo %s for %s", todo_id, owner)
            raise TodoException(TodoExceptionCode.TODO_IS_COMPLETED)

        # Content is replaced as a whole; completed falls back to False.
        todo = Todo(
            name=data.name,
            description=data.description,
            start_date=start_date,
            due_date=due_date,
        )
        return self._repository.update(owner, todo_id, todo)
