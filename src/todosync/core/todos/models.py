"""
Todo models.

Defines the Pydantic model for todo items as they are exchanged with the
remote API and stored locally, plus the record type that carries storage
timestamps.

Example:
    >>> from todosync.core.todos.models import Todo
    >>> todo = Todo.model_validate(
    ...     {"userId": 1, "id": 42, "title": "Learn Python", "completed": False}
    ... )
    >>> todo.user_id
    1
    >>> todo.status
    <CompletionStatus.PENDING: 'pending'>
    >>> todo.pretty()
    'Todo({ "userId": 1, "id": 42, "title": "Learn Python", "completed": "pending" })'
"""

import json
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from todosync.core.exceptions import TodoValidationError

TITLE_MAX_LENGTH = 255


class CompletionStatus(str, Enum):
    """Stored representation of a todo's completion flag."""

    COMPLETED = "completed"
    PENDING = "pending"

    @classmethod
    def from_bool(cls, completed: bool) -> "CompletionStatus":
        return cls.COMPLETED if completed else cls.PENDING

    def to_bool(self) -> bool:
        return self is CompletionStatus.COMPLETED


class Todo(BaseModel):
    """
    A todo item.

    Todos are only ever replaced as a whole (update-or-insert); they are never
    patched field by field, so the model is frozen.

    Attributes:
        user_id: Owning user (positive integer, ``userId`` on the wire)
        id: Unique identifier (positive integer)
        title: Non-empty title of at most 255 characters
        completed: Whether the todo is done
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: int = Field(alias="userId", gt=0, description="Owning user id")
    id: int = Field(gt=0, description="Todo id")
    title: str = Field(
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Todo title (1-255 characters)",
    )
    completed: bool = Field(default=False, description="Whether the todo is done")

    @property
    def status(self) -> CompletionStatus:
        """Completion flag as stored in the database."""
        return CompletionStatus.from_bool(self.completed)

    def to_api(self) -> dict[str, object]:
        """Serialize using the remote API's field names."""
        return self.model_dump(by_alias=True)

    def pretty(self) -> str:
        """Single-line representation for console output."""
        return (
            f'Todo({{ "userId": {self.user_id}, "id": {self.id}, '
            f'"title": {json.dumps(self.title, ensure_ascii=False)}, '
            f'"completed": "{self.status.value}" }})'
        )


class StoredTodo(BaseModel):
    """A todo together with the timestamps kept by the store."""

    model_config = ConfigDict(frozen=True)

    todo: Todo
    created_at: datetime | None = None
    updated_at: datetime | None = None


def validate_title(title: object) -> str:
    """
    Check a todo title.

    Raises:
        TodoValidationError: If the title is not a string of 1-255 characters
    """
    if not isinstance(title, str):
        raise TodoValidationError("Title must be a string", field="title")
    if len(title) == 0:
        raise TodoValidationError("Title must not be empty", field="title")
    if len(title) > TITLE_MAX_LENGTH:
        raise TodoValidationError(
            f"Title must be at most {TITLE_MAX_LENGTH} characters (got {len(title)})",
            field="title",
        )
    return title


def validate_positive_id(value: object, field: str = "id") -> int:
    """
    Check that a value is a positive integer id.

    Booleans are rejected even though they are ints in Python.

    Raises:
        TodoValidationError: If the value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TodoValidationError(f"{field} must be an integer", field=field)
    if value <= 0:
        raise TodoValidationError(f"{field} must be a positive integer (got {value})", field=field)
    return value


def describe_validation_error(error: PydanticValidationError) -> str:
    """Collapse a pydantic ValidationError into one readable line."""
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ())) or "value"
        parts.append(f"{location}: {detail.get('msg', 'invalid')}")
    return "; ".join(parts)


__all__ = [
    "TITLE_MAX_LENGTH",
    "CompletionStatus",
    "Todo",
    "StoredTodo",
    "validate_title",
    "validate_positive_id",
    "describe_validation_error",
]
