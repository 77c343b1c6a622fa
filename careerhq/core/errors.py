"""
Error taxonomy and the FastAPI handlers that render it.

Every error the API raises on purpose derives from CareerHQError and carries
its HTTP status. Storage faults that escape a route become a generic 500;
the message and traceback are only exposed when settings.debug is on.
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from careerhq.core.config import Settings

logger = logging.getLogger(__name__)


class CareerHQError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(CareerHQError):
    status_code = 400


class ValidationFailure(CareerHQError):
    status_code = 400


class NotFoundError(CareerHQError):
    status_code = 404


class ConflictError(CareerHQError):
    status_code = 409


class StorageError(CareerHQError):
    status_code = 500


class UpstreamError(CareerHQError):
    """Media host or automation API failed."""
    status_code = 502


def summarize_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one short line."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request data"


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:

    def internal_error(exc: Exception) -> JSONResponse:
        body = {"detail": "Internal server error"}
        if settings.debug:
            body["error"] = str(exc)
            body["trace"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
        return JSONResponse(status_code=500, content=body)

    @app.exception_handler(CareerHQError)
    async def careerhq_error_handler(request: Request, exc: CareerHQError):
        if isinstance(exc, StorageError):
            logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
            return internal_error(exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(PyMongoError)
    async def pymongo_error_handler(request: Request, exc: PyMongoError):
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return internal_error(exc)
