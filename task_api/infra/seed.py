from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import sessionmaker

from task_api.domain.clock import as_naive_utc, utcnow
from task_api.domain.enums import TaskStatus

from .db import SessionLocal
from .models import TaskModel
from .repository import TaskRepository

logger = logging.getLogger(__name__)

# (title, description, due in days, status, created days ago, updated days ago)
SAMPLE_TASKS = [
    (
        "Complete project documentation",
        "Write comprehensive documentation for the task management API",
        7,
        TaskStatus.PENDING,
        2,
        None,
    ),
    (
        "Implement user authentication",
        "Add JWT-based authentication to the API",
        14,
        TaskStatus.IN_PROGRESS,
        5,
        None,
    ),
    (
        "Write unit tests",
        "Create comprehensive unit tests for all endpoints",
        10,
        TaskStatus.PENDING,
        1,
        None,
    ),
    (
        "Code review",
        "Review and refactor existing code for better maintainability",
        3,
        TaskStatus.COMPLETED,
        7,
        1,
    ),
]


def seed_tasks(session_factory: sessionmaker = SessionLocal, now: datetime | None = None) -> int:
    """Insert the sample tasks into an empty table. Returns how many were added."""
    base = as_naive_utc(now or utcnow())
    existing = TaskRepository(session_factory).count_tasks()
    if existing:
        logger.info("Skipping sample data, %s tasks already stored", existing)
        return 0

    with session_factory() as session:
        for title, description, due_in, status, created_ago, updated_ago in SAMPLE_TASKS:
            session.add(
                TaskModel(
                    title=title,
                    description=description,
                    due_date=base + timedelta(days=due_in),
                    status=status.value,
                    created_at=base - timedelta(days=created_ago),
                    updated_at=base - timedelta(days=updated_ago) if updated_ago else None,
                )
            )
        session.commit()

    logger.info("Inserted %s sample tasks", len(SAMPLE_TASKS))
    return len(SAMPLE_TASKS)
