"""Translate exceptions into enveloped JSON responses."""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.response import error_response
from app.services.errors import TaskServiceError
from app.utils.logger import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _field_errors(exc: RequestValidationError) -> list:
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors=_field_errors(exc))


async def task_service_exception_handler(request: Request, exc: TaskServiceError):
    logger.warning("Request rejected", code=exc.code, reason=exc.message, path=request.url.path)
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message, errors=exc.details or None)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def add_exception_handlers(app: FastAPI):
    """Register the envelope-producing exception handlers on the application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(TaskServiceError, task_service_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
