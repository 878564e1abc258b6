from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from task_api.domain.enums import TaskStatus
from task_api.domain.errors import TaskValidationError
from task_api.domain.filters import TaskFilters
from task_api.services.task_service import TaskService

from .schemas import (
    HealthResponse,
    TaskCreate,
    TaskResponse,
    TaskStatisticsResponse,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])
health_router = APIRouter(tags=["health"])

# Ids are 32-bit signed integers.
TaskId = Annotated[int, Path(ge=-2_147_483_648, le=2_147_483_647)]


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def _parse_status_filter(raw: Optional[str]) -> Optional[TaskStatus]:
    if raw is None or not raw.strip():
        return None
    try:
        return TaskStatus.parse(raw)
    except ValueError as exc:
        raise TaskValidationError({"status": [str(exc)]}) from exc


@router.get("", response_model=list[TaskResponse])
def list_tasks(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    service: TaskService = Depends(get_task_service),
) -> list[TaskResponse]:
    filters = TaskFilters(status=_parse_status_filter(status_filter))
    return [TaskResponse.from_entity(task) for task in service.list_tasks(filters)]


# Registered before "/{task_id}" so the literal segment wins.
@router.get("/statistics", response_model=TaskStatisticsResponse)
def get_statistics(service: TaskService = Depends(get_task_service)) -> TaskStatisticsResponse:
    return TaskStatisticsResponse.from_stats(service.get_stats())


@router.get("/{task_id}", response_model=TaskResponse, name="get_task")
def get_task(task_id: TaskId, service: TaskService = Depends(get_task_service)) -> TaskResponse:
    return TaskResponse.from_entity(service.get_task(task_id))


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    request: Request,
    response: Response,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    task = service.create_task(payload.to_input())
    response.headers["Location"] = str(request.url_for("get_task", task_id=task.id))
    return TaskResponse.from_entity(task)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: TaskId,
    payload: TaskUpdate,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return TaskResponse.from_entity(service.update_task(task_id, payload.to_input()))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: TaskId, service: TaskService = Depends(get_task_service)) -> Response:
    service.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@health_router.get("/health", response_model=HealthResponse)
def health(request: Request):
    try:
        with request.app.state.session_factory() as session:
            session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable"},
        )
    return HealthResponse()
