from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from task_api.domain.clock import utcnow
from task_api.domain.entities import TaskEntity, TaskStats
from task_api.domain.errors import TaskError, TaskNotFoundError, TaskServiceFault
from task_api.domain.filters import TaskFilters
from task_api.domain.validation import TaskInput, validate_task_input
from task_api.infra.repository import TaskRepository

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, repo: TaskRepository, clock: Callable[[], datetime] = utcnow) -> None:
        self._repo = repo
        self._clock = clock

    def list_tasks(self, filters: Optional[TaskFilters] = None) -> list[TaskEntity]:
        with self._guard("retrieving tasks"):
            return self._repo.list_tasks(filters or TaskFilters())

    def get_task(self, task_id: int) -> TaskEntity:
        with self._guard("retrieving the task"):
            task = self._repo.get_task(task_id)
            if task is None:
                raise TaskNotFoundError(task_id)
            return task

    def create_task(self, data: TaskInput) -> TaskEntity:
        with self._guard("creating the task"):
            now = self._clock()
            valid = validate_task_input(data, now)
            task = self._repo.create_task(valid, created_at=now)
            logger.info("Created task id=%s status=%s", task.id, task.status.label)
            return task

    def update_task(self, task_id: int, data: TaskInput) -> TaskEntity:
        with self._guard("updating the task"):
            if self._repo.get_task(task_id) is None:
                raise TaskNotFoundError(task_id)

            now = self._clock()
            valid = validate_task_input(data, now)
            task = self._repo.update_task(task_id, valid, updated_at=now)
            if task is None:
                # Removed between the existence check and the write.
                raise TaskNotFoundError(task_id)
            logger.info("Updated task id=%s status=%s", task.id, task.status.label)
            return task

    def delete_task(self, task_id: int) -> None:
        with self._guard("deleting the task"):
            if not self._repo.delete_task(task_id):
                raise TaskNotFoundError(task_id)
            logger.info("Deleted task id=%s", task_id)

    def get_stats(self) -> TaskStats:
        with self._guard("retrieving task statistics"):
            return self._repo.get_stats(self._clock())

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        """Let domain errors through and turn anything else into a fault."""
        try:
            yield
        except TaskError:
            raise
        except Exception as exc:
            logger.exception("Error occurred while %s", action)
            raise TaskServiceFault(f"An error occurred while {action}") from exc
