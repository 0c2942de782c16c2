from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class TodoExceptionCode(str, Enum):
    INVALID_ID = "invalid_id"
    INVALID_START_DATE = "invalid_start_date"
    INVALID_DUE_DATE = "invalid_due_date"
    START_DATE_AFTER_DUE_DATE = "start_date_after_due_date"
    TODO_IS_COMPLETED = "todo_is_completed"
    ERROR_WHILE_CREATING = "error_while_creating"
    ERROR_WHILE_RETRIEVING = "error_while_retrieving"
    ERROR_WHILE_UPDATING = "error_while_updating"
    ERROR_WHILE_DELETING = "error_while_deleting"


todo_exception_description: Dict[TodoExceptionCode, str] = {
    TodoExceptionCode.INVALID_ID: "invalid id",
    TodoExceptionCode.INVALID_START_DATE: "start date can not be parsed",
    TodoExceptionCode.INVALID_DUE_DATE: "due date can not be parsed",
    TodoExceptionCode.START_DATE_AFTER_DUE_DATE: "start date must be before the due date",
    TodoExceptionCode.TODO_IS_COMPLETED: "the todo cannot be modified if it's completed",
    TodoExceptionCode.ERROR_WHILE_CREATING: "error while creating",
    TodoExceptionCode.ERROR_WHILE_RETRIEVING: "error while retrieving",
    TodoExceptionCode.ERROR_WHILE_UPDATING: "error while updating",
    TodoExceptionCode.ERROR_WHILE_DELETING: "error while deleting",
}

# Caller mistakes; surfaced as client errors by the HTTP layer.
CLIENT_ERROR_CODES = frozenset(
    {
        TodoExceptionCode.INVALID_ID,
        TodoExceptionCode.INVALID_START_DATE,
        TodoExceptionCode.INVALID_DUE_DATE,
        TodoExceptionCode.START_DATE_AFTER_DUE_DATE,
    }
)

CONFLICT_ERROR_CODES = frozenset({TodoExceptionCode.TODO_IS_COMPLETED})


# PUBLIC_INTERFACE
class TodoException(Exception):
    """
    Single error type raised by the repository and service layers.

    The ``code`` identifies the failure kind; ``cause`` keeps the lower level
    exception (store or decoding error) when there is one.
    """

    def __init__(self, code: TodoExceptionCode, cause: Optional[BaseException] = None) -> None:
        self.code = code
        self.message = todo_exception_description.get(code, "unexpected error")
        self.cause = cause
        super().__init__(self.message)

    @property
    def is_client_error(self) -> bool:
        return self.code in CLIENT_ERROR_CODES

    @property
    def is_conflict(self) -> bool:
        return self.code in CONFLICT_ERROR_CODES

    def to_json(self) -> Dict[str, Any]:
        """Return the HTTP response body for this error."""
        return {"error": self.message}
