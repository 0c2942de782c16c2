from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# PUBLIC_INTERFACE
class Todo(BaseModel):
    """
    Domain model of a todo as stored in an owner's collection.

    Fields:
    - id: UUID string assigned by the repository on creation
    - name: Short name of the task
    - description: Free-text description
    - due_date: When the task is due
    - start_date: When the task starts; never after due_date
    - completed: Completion flag; a completed todo can no longer be edited

    Instances serialize to one JSON document per store field through
    ``model_dump_json`` / ``model_validate_json``.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    due_date: datetime = Field(default_factory=lambda: datetime.min)
    start_date: datetime = Field(default_factory=lambda: datetime.min)
    completed: bool = False
