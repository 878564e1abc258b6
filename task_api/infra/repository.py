from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from task_api.domain.clock import as_naive_utc, as_utc
from task_api.domain.entities import TaskEntity, TaskStats
from task_api.domain.enums import TaskStatus
from task_api.domain.filters import TaskFilters
from task_api.domain.validation import TaskInput

from .db import SessionLocal
from .models import TaskModel

STATUS_COMPLETED = TaskStatus.COMPLETED.value


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        description=model.description,
        due_date=as_utc(model.due_date),
        status=TaskStatus(model.status),
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at) if model.updated_at else None,
    )


def _apply_filters(stmt, filters: TaskFilters) -> object:
    if filters.status is not None:
        stmt = stmt.where(TaskModel.status == filters.status.value)
    return stmt


class TaskRepository:
    def __init__(self, session_factory: sessionmaker = SessionLocal) -> None:
        self._session_factory = session_factory

    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        with self._session_factory() as session:
            stmt = select(TaskModel)
            stmt = _apply_filters(stmt, filters)
            stmt = stmt.order_by(TaskModel.due_date.asc(), TaskModel.id.asc())
            return [_to_entity(task) for task in session.scalars(stmt)]

    def get_task(self, task_id: int) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            return _to_entity(task) if task else None

    def create_task(self, data: TaskInput, created_at: datetime) -> TaskEntity:
        with self._session_factory() as session:
            task = TaskModel(
                title=data.title,
                description=data.description,
                due_date=as_naive_utc(data.due_date),
                status=data.status.value,
                created_at=as_naive_utc(created_at),
                updated_at=None,
            )
            session.add(task)
            session.commit()
            session.refresh(task)
            return _to_entity(task)

    def update_task(
        self, task_id: int, data: TaskInput, updated_at: datetime
    ) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None

            task.title = data.title
            task.description = data.description
            task.due_date = as_naive_utc(data.due_date)
            task.status = data.status.value
            task.updated_at = as_naive_utc(updated_at)
            session.commit()
            session.refresh(task)
            return _to_entity(task)

    def delete_task(self, task_id: int) -> bool:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return False
            session.delete(task)
            session.commit()
            return True

    def count_tasks(self) -> int:
        with self._session_factory() as session:
            return session.scalar(select(func.count()).select_from(TaskModel)) or 0

    def get_stats(self, now: datetime) -> TaskStats:
        with self._session_factory() as session:
            rows = session.execute(
                select(TaskModel.status, func.count()).group_by(TaskModel.status)
            ).all()
            per_status = {status: count for status, count in rows}
            # Cancelled tasks past their due date count as overdue.
            overdue = session.scalar(
                select(func.count())
                .select_from(TaskModel)
                .where(
                    TaskModel.due_date < as_naive_utc(now),
                    TaskModel.status != STATUS_COMPLETED,
                )
            ) or 0

        return TaskStats(
            total=sum(per_status.values()),
            pending=per_status.get(TaskStatus.PENDING.value, 0),
            in_progress=per_status.get(TaskStatus.IN_PROGRESS.value, 0),
            completed=per_status.get(TaskStatus.COMPLETED.value, 0),
            cancelled=per_status.get(TaskStatus.CANCELLED.value, 0),
            overdue=overdue,
        )
