from __future__ import annotations

import os

# Settings are read at import time; keep the module-level engine in memory.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from task_api.infra import models  # noqa: F401
from task_api.infra.db import Base, make_session_factory
from task_api.infra.repository import TaskRepository
from task_api.main import create_app


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture()
def repo(session_factory) -> TaskRepository:
    return TaskRepository(session_factory)


@pytest.fixture()
def client(session_factory):
    app = create_app(session_factory=session_factory)
    with TestClient(app) as test_client:
        yield test_client
