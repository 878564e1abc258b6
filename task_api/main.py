from __future__ import annotations

import logging
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from task_api.api.errors import register_error_handlers
from task_api.api.routes import health_router, router
from task_api.config import APP_VERSION, SETTINGS, Settings
from task_api.infra.db import SessionLocal, init_db
from task_api.infra.logging import setup_logging
from task_api.infra.repository import TaskRepository
from task_api.infra.seed import seed_tasks
from task_api.services.task_service import TaskService

logger = logging.getLogger(__name__)


def create_app(
    session_factory: sessionmaker | None = None,
    settings: Settings = SETTINGS,
    service: TaskService | None = None,
) -> FastAPI:
    session_factory = session_factory or SessionLocal

    app = FastAPI(title="Task API", version=APP_VERSION)
    app.state.session_factory = session_factory
    app.state.task_service = service or TaskService(TaskRepository(session_factory))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    app.include_router(health_router)
    return app


def main() -> None:
    setup_logging()
    try:
        init_db()
        if SETTINGS.seed_data:
            seed_tasks()
    except SQLAlchemyError:
        logger.exception("Database is not reachable at startup")
        sys.exit(1)

    uvicorn.run(create_app(), host=SETTINGS.host, port=SETTINGS.port, log_config=None)


if __name__ == "__main__":
    main()
