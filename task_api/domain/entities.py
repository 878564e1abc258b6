from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import TaskStatus


@dataclass(frozen=True)
class TaskEntity:
    id: int
    title: str
    description: Optional[str]
    due_date: datetime
    status: TaskStatus
    created_at: datetime
    updated_at: Optional[datetime]


@dataclass(frozen=True)
class TaskStats:
    total: int
    pending: int
    in_progress: int
    completed: int
    cancelled: int
    overdue: int
