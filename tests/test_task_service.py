from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from task_api.domain.entities import TaskEntity, TaskStats
from task_api.domain.enums import TaskStatus
from task_api.domain.errors import TaskNotFoundError, TaskServiceFault, TaskValidationError
from task_api.domain.filters import TaskFilters
from task_api.domain.validation import TaskInput
from task_api.services.task_service import TaskService

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeRepo:
    def __init__(self) -> None:
        self.tasks: list[TaskEntity] = []
        self._id = 1
        self.stats_now: datetime | None = None

    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        tasks = [t for t in self.tasks if filters.status is None or t.status == filters.status]
        return sorted(tasks, key=lambda t: (t.due_date, t.id))

    def get_task(self, task_id: int) -> TaskEntity | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    def create_task(self, data: TaskInput, created_at: datetime) -> TaskEntity:
        task = TaskEntity(
            id=self._id,
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            status=data.status,
            created_at=created_at,
            updated_at=None,
        )
        self.tasks.append(task)
        self._id += 1
        return task

    def update_task(self, task_id: int, data: TaskInput, updated_at: datetime) -> TaskEntity | None:
        task = self.get_task(task_id)
        if not task:
            return None
        updated = replace(
            task,
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            status=data.status,
            updated_at=updated_at,
        )
        self.tasks = [updated if t.id == task_id else t for t in self.tasks]
        return updated

    def delete_task(self, task_id: int) -> bool:
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        return len(self.tasks) != before

    def get_stats(self, now: datetime) -> TaskStats:
        self.stats_now = now
        return TaskStats(total=len(self.tasks), pending=len(self.tasks), in_progress=0,
                         completed=0, cancelled=0, overdue=0)


class BrokenRepo(FakeRepo):
    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        raise ConnectionError("database is gone")


def _input(**overrides) -> TaskInput:
    values = {
        "title": "Write report",
        "description": "Quarterly numbers",
        "due_date": NOW + timedelta(days=7),
        "status": TaskStatus.PENDING,
    }
    values.update(overrides)
    return TaskInput(**values)


@pytest.fixture()
def repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture()
def service(repo: FakeRepo) -> TaskService:
    return TaskService(repo, clock=lambda: NOW)


def test_create_assigns_id_and_timestamps(service: TaskService) -> None:
    first = service.create_task(_input())
    second = service.create_task(_input(title="Another"))

    assert first.id != second.id
    assert first.created_at == NOW
    assert first.updated_at is None
    assert first.status is TaskStatus.PENDING


def test_get_after_create_returns_same_record(service: TaskService) -> None:
    created = service.create_task(_input())
    assert service.get_task(created.id) == created


@pytest.mark.parametrize("title", ["", "   "])
def test_create_rejects_empty_title(service: TaskService, repo: FakeRepo, title: str) -> None:
    with pytest.raises(TaskValidationError) as exc_info:
        service.create_task(_input(title=title))

    assert exc_info.value.errors == {"title": ["Title is required"]}
    assert repo.tasks == []


@pytest.mark.parametrize("due_date", [NOW - timedelta(days=1), NOW])
def test_create_rejects_due_date_not_in_future(service: TaskService, repo: FakeRepo, due_date) -> None:
    with pytest.raises(TaskValidationError) as exc_info:
        service.create_task(_input(due_date=due_date))

    assert exc_info.value.errors == {"dueDate": ["Due date must be in the future"]}
    assert repo.tasks == []


def test_create_collects_every_field_error(service: TaskService) -> None:
    with pytest.raises(TaskValidationError) as exc_info:
        service.create_task(_input(title="x" * 201, description="y" * 1001, due_date=None))

    errors = exc_info.value.errors
    assert errors["title"] == ["Title cannot exceed 200 characters"]
    assert errors["description"] == ["Description cannot exceed 1000 characters"]
    assert errors["dueDate"] == ["Due date is required"]


def test_create_accepts_boundary_lengths(service: TaskService) -> None:
    task = service.create_task(_input(title="x" * 200, description="y" * 1000))
    assert len(task.title) == 200


def test_naive_due_date_is_treated_as_utc(service: TaskService) -> None:
    naive = (NOW + timedelta(hours=1)).replace(tzinfo=None)
    task = service.create_task(_input(due_date=naive))
    assert task.due_date == NOW + timedelta(hours=1)


def test_update_missing_task_is_not_found_even_with_invalid_payload(service: TaskService) -> None:
    with pytest.raises(TaskNotFoundError) as exc_info:
        service.update_task(42, _input(title="", due_date=NOW - timedelta(days=3)))
    assert str(exc_info.value) == "Task with ID 42 not found"


def test_update_replaces_fields_and_sets_updated_at(repo: FakeRepo) -> None:
    clock = iter([NOW, NOW + timedelta(minutes=5)])
    service = TaskService(repo, clock=lambda: next(clock))
    created = service.create_task(_input())

    updated = service.update_task(
        created.id,
        _input(title="B", description=None, due_date=NOW + timedelta(days=10),
               status=TaskStatus.IN_PROGRESS),
    )

    assert updated.id == created.id
    assert updated.title == "B"
    assert updated.description is None
    assert updated.status is TaskStatus.IN_PROGRESS
    assert updated.created_at == created.created_at
    assert updated.updated_at == NOW + timedelta(minutes=5)


def test_update_rejects_past_due_date_without_writing(service: TaskService) -> None:
    created = service.create_task(_input())

    with pytest.raises(TaskValidationError):
        service.update_task(created.id, _input(title="Changed", due_date=NOW - timedelta(days=1)))

    assert service.get_task(created.id).title == "Write report"


def test_delete_then_get_is_not_found(service: TaskService) -> None:
    created = service.create_task(_input())
    service.delete_task(created.id)

    with pytest.raises(TaskNotFoundError):
        service.get_task(created.id)
    with pytest.raises(TaskNotFoundError):
        service.delete_task(created.id)


def test_list_filters_by_status(service: TaskService) -> None:
    service.create_task(_input(title="late", due_date=NOW + timedelta(days=9)))
    service.create_task(_input(title="soon", due_date=NOW + timedelta(days=2),
                               status=TaskStatus.IN_PROGRESS))
    service.create_task(_input(title="mid", due_date=NOW + timedelta(days=5)))

    everything = service.list_tasks()
    pending = service.list_tasks(TaskFilters(status=TaskStatus.PENDING))

    assert [t.title for t in everything] == ["soon", "mid", "late"]
    assert pending == [t for t in everything if t.status is TaskStatus.PENDING]


def test_stats_are_computed_against_the_clock(service: TaskService, repo: FakeRepo) -> None:
    service.create_task(_input())
    stats = service.get_stats()

    assert stats.total == 1
    assert repo.stats_now == NOW


def test_unexpected_errors_become_faults(caplog: pytest.LogCaptureFixture) -> None:
    service = TaskService(BrokenRepo(), clock=lambda: NOW)

    with caplog.at_level(logging.ERROR, logger="task_api.services.task_service"):
        with pytest.raises(TaskServiceFault) as exc_info:
            service.list_tasks()

    assert str(exc_info.value) == "An error occurred while retrieving tasks"
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert "Error occurred while retrieving tasks" in caplog.text


def test_due_date_overflowing_utc_is_rejected(service: TaskService, repo: FakeRepo) -> None:
    edge = datetime(9999, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5)))

    with pytest.raises(TaskValidationError) as exc_info:
        service.create_task(_input(due_date=edge))

    assert exc_info.value.errors == {"dueDate": ["Due date is invalid"]}
    assert repo.tasks == []
