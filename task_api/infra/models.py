from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String

from task_api.domain.clock import as_naive_utc, utcnow

from .db import Base


def naive_utcnow():
    return as_naive_utc(utcnow())


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=True)
    due_date = Column(DateTime, nullable=False, index=True)
    status = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime, nullable=False, default=naive_utcnow)
    updated_at = Column(DateTime, nullable=True)
