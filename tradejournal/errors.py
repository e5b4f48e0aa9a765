"""Domain errors raised by the trade services and rendered by the API."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying the HTTP status it is reported with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Caller-supplied data violates a trade invariant."""

    status_code = 422


class NotFoundError(AppError):
    """Resource is missing or owned by another user."""

    status_code = 404


class ConflictError(AppError):
    """State transition attempted on a trade that is no longer open.

    Reported as not found so callers cannot tell "already closed" from
    "never existed".
    """

    status_code = 404


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.debug(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(AppError, app_error_handler)
