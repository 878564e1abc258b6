from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .clock import as_utc
from .enums import TaskStatus
from .errors import TaskValidationError

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


@dataclass(frozen=True)
class TaskInput:
    title: str
    description: Optional[str]
    due_date: Optional[datetime]
    status: TaskStatus = TaskStatus.PENDING


def validate_task_input(data: TaskInput, now: datetime) -> TaskInput:
    """Check the field rules shared by create and update.

    Every violation is collected before raising so callers get the full list.
    Returns the input with ``due_date`` normalized to UTC.
    """
    errors: dict[str, list[str]] = {}

    title = data.title or ""
    if not title.strip():
        errors.setdefault("title", []).append("Title is required")
    elif len(title) > TITLE_MAX_LENGTH:
        errors.setdefault("title", []).append(
            f"Title cannot exceed {TITLE_MAX_LENGTH} characters"
        )

    if data.description is not None and len(data.description) > DESCRIPTION_MAX_LENGTH:
        errors.setdefault("description", []).append(
            f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"
        )

    due_date = None
    if data.due_date is None:
        errors.setdefault("dueDate", []).append("Due date is required")
    else:
        try:
            due_date = as_utc(data.due_date)
        except OverflowError:
            # Offset pushes the value past the representable range.
            errors.setdefault("dueDate", []).append("Due date is invalid")
        else:
            if due_date <= as_utc(now):
                errors.setdefault("dueDate", []).append("Due date must be in the future")

    if not isinstance(data.status, TaskStatus):
        errors.setdefault("status", []).append(f"Invalid task status: {data.status!r}")

    if errors:
        raise TaskValidationError(errors)

    return TaskInput(
        title=title,
        description=data.description,
        due_date=due_date,
        status=data.status,
    )
