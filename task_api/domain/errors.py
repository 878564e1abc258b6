from __future__ import annotations


class TaskError(Exception):
    """Base class for errors raised by the task service."""


class TaskNotFoundError(TaskError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with ID {task_id} not found")
        self.task_id = task_id


class TaskValidationError(TaskError):
    """Field-level rule violations, keyed by wire field name."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__("One or more validation errors occurred.")
        self.errors = errors


class TaskServiceFault(TaskError):
    """Unexpected failure; the message is safe to show to clients."""
