from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel, to_pascal

from task_api.domain.entities import TaskEntity, TaskStats
from task_api.domain.enums import TaskStatus
from task_api.domain.validation import TaskInput


class _TaskWrite(BaseModel):
    # Length and due-date rules are checked by validate_task_input.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = Field(default=None, description="Task title (1-200 characters)")
    description: Optional[str] = Field(default=None, description="Up to 1000 characters")
    due_date: Optional[datetime] = Field(default=None, description="Must be in the future")
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, value: object) -> TaskStatus:
        return TaskStatus.parse(value)

    def to_input(self) -> TaskInput:
        return TaskInput(
            title=self.title or "",
            description=self.description,
            due_date=self.due_date,
            status=self.status,
        )


class TaskCreate(_TaskWrite):
    """Request body for creating a task."""

    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Defaults to Pending")


class TaskUpdate(_TaskWrite):
    """Request body for replacing a task; every field is supplied."""

    status: TaskStatus = Field(..., description="0=Pending, 1=InProgress, 2=Completed, 3=Cancelled")


class TaskResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    description: Optional[str] = None
    due_date: datetime
    status: TaskStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, task: TaskEntity) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            due_date=task.due_date,
            status=task.status,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TaskStatisticsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    total: int
    pending: int
    in_progress: int
    completed: int
    cancelled: int
    overdue: int

    @classmethod
    def from_stats(cls, stats: TaskStats) -> "TaskStatisticsResponse":
        return cls(
            total=stats.total,
            pending=stats.pending,
            in_progress=stats.in_progress,
            completed=stats.completed,
            cancelled=stats.cancelled,
            overdue=stats.overdue,
        )


class HealthResponse(BaseModel):
    status: str = "healthy"
