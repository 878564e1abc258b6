from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from task_api.domain.errors import TaskNotFoundError, TaskServiceFault, TaskValidationError

VALIDATION_TITLE = "One or more validation errors occurred."

# Python parameter names that differ from the wire field name.
_WIRE_NAMES = {"task_id": "id"}


def validation_body(errors: dict[str, list[str]]) -> dict:
    return {
        "title": VALIDATION_TITLE,
        "status": status.HTTP_400_BAD_REQUEST,
        "errors": errors,
    }


def _request_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[-1]) if len(loc) > 1 else str(loc[0] if loc else "body")
        field = _WIRE_NAMES.get(field, field)
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskValidationError)
    async def _task_validation(request: Request, exc: TaskValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content=validation_body(exc.errors))

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content=validation_body(_request_errors(exc)))

    @app.exception_handler(TaskNotFoundError)
    async def _not_found(request: Request, exc: TaskNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(TaskServiceFault)
    async def _fault(request: Request, exc: TaskServiceFault) -> JSONResponse:
        # Already logged with the original traceback by the service.
        return JSONResponse(status_code=500, content={"detail": str(exc)})
