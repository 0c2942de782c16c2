from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .models import Todo

DATE_EXAMPLE = "2025-02-01 09:00:00"


# PUBLIC_INTERFACE
class CreateTodo(BaseModel):
    """
    Schema for creating a new Todo item.

    Dates are plain strings here; their format and ordering are business rules
    checked by the service, not by the schema.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Buy groceries",
                "description": "Milk, eggs, bread",
                "start_date": DATE_EXAMPLE,
                "due_date": "2025-02-01 18:00:00",
            }
        }
    )

    name: str = Field(..., description="Short name of the todo item")
    description: str = Field(..., description="Detailed description")
    start_date: str = Field(..., description="Start date formatted as YYYY-MM-DD HH:MM:SS")
    due_date: str = Field(..., description="Due date formatted as YYYY-MM-DD HH:MM:SS")


# PUBLIC_INTERFACE
class UpdateTodo(CreateTodo):
    """
    Schema for replacing the content of an existing Todo item.
    All fields are required; the todo is rewritten as a whole.
    """


# PUBLIC_INTERFACE
class TodoResponse(BaseModel):
    """Envelope returned for a single Todo item."""

    data: Todo = Field(..., description="The todo item")


# PUBLIC_INTERFACE
class TodoListResponse(BaseModel):
    """Envelope returned when listing an owner's todos."""

    data: List[Todo] = Field(..., description="Every todo of the owner, in no particular order")


class ErrorResponse(BaseModel):
    """Body returned with any non-2xx status."""

    error: str = Field(..., description="Human readable error message")
