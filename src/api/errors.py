"""Translate exceptions into the API's error response shapes.

- validation failures -> 400 ``{"message": "Validation error", "errors": {...}}``
- missing rows -> 404 ``{"detail": "<Entity> not found"}``
- disallowed task transitions -> 409
- anything else -> 500 ``{"detail": "Internal server error"}``
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.logging import get_logger
from src.storage.base import field_errors
from src.storage.errors import NotFoundError, TaskTransitionError, ValidationError

logger = get_logger(__name__)


def validation_response(errors: dict[str, list[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation error", "errors": errors},
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return validation_response(field_errors(exc.errors()))


async def storage_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return validation_response(exc.errors)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def transition_handler(request: Request, exc: TaskTransitionError) -> JSONResponse:
    logger.warning(
        "task_transition_rejected",
        task_id=exc.task_id,
        current=exc.current,
        target=exc.target,
    )
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_error",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers above to ``app``."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, storage_validation_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(TaskTransitionError, transition_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
