from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from task_api.config import PROJECT_ROOT, SETTINGS, Settings

# One line per request; only shown when debugging.
_ACCESS_LOGGER = "uvicorn.access"
# Server lifecycle messages follow the application level.
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error")


def setup_logging(settings: Settings = SETTINGS) -> None:
    """Route application and uvicorn records to the same file and console handlers.

    Run the server with ``log_config=None`` so uvicorn keeps these handlers
    instead of installing its own.
    """
    log_dir = PROJECT_ROOT / settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "task_api.log"

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    level = logging.getLevelName(settings.log_level.upper())
    logging.basicConfig(
        level=level,
        handlers=[file_handler, console_handler],
    )

    for name in _SERVER_LOGGERS:
        logging.getLogger(name).setLevel(level)
    access_level = logging.DEBUG if level == logging.DEBUG else logging.WARNING
    logging.getLogger(_ACCESS_LOGGER).setLevel(access_level)
