"""
Error taxonomy and the single place where it is mapped to HTTP.

Feature code raises one of the `AppError` subclasses for expected conditions
(bad input, missing row, wrong role). Anything else is unexpected: it is
logged with request context and answered with a generic 500 envelope.
"""

from __future__ import annotations

import logging
import traceback
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    default_message = "Invalid request."


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_message = "Unauthorized access."


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_message = "Access forbidden."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found."


class DatabaseError(AppError):
    code = "DATABASE_ERROR"
    default_message = "Database operation failed."


def _request_context(request: Request) -> dict:
    # Request bodies are left out: they carry passwords and whistleblower identities.
    client = request.client.host if request.client else None
    return {
        "method": request.method,
        "path": request.url.path,
        "params": dict(request.path_params),
        "query": dict(request.query_params),
        "client": client,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed code=%s message=%s context=%s",
            exc.code,
            exc.message,
            _request_context(request),
            extra={"method": request.method, "path": request.url.path, "status": exc.status_code},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "code": exc.code},
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Invalid request.",
            "code": ValidationError.code,
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        code = "ROUTE_NOT_FOUND"
        message = f"Route not found: {request.method} {request.url.path}"
    else:
        code = "HTTP_ERROR"
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"message": message, "code": code}},
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_error context=%s",
        _request_context(request),
        extra={"method": request.method, "path": request.url.path, "status": 500},
    )
    error: dict = {"message": "Internal Server Error", "code": "INTERNAL_ERROR"}
    if not settings.is_production():
        error["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
