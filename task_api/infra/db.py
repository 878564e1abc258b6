from __future__ import annotations

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from task_api.config import SETTINGS

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Requests are served from a thread pool.
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, autocommit=False, expire_on_commit=False)


engine = make_engine(SETTINGS.database_url)
SessionLocal = make_session_factory(engine)


def ping(bind: Engine) -> None:
    with bind.connect() as connection:
        connection.execute(text("SELECT 1"))


def init_db(bind: Engine | None = None, create_schema: bool = SETTINGS.create_schema) -> None:
    bind = bind or engine
    ping(bind)
    if create_schema:
        from . import models  # noqa: F401  registers TaskModel on Base

        Base.metadata.create_all(bind)
        logger.info("Schema ready on %s", bind.url.render_as_string(hide_password=True))
