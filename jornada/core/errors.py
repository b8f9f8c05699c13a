"""Error normalization and handlers."""

import logging
from typing import Optional
from uuid import uuid4

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.requests import Request

from jornada.core.logging import get_request_id

logger = logging.getLogger("jornada")


class AppError(Exception):
    code = "app_error"
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None, request_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code
        self.request_id = request_id


class ValidationError(AppError, ValueError):
    code = "validation_error"
    status_code = 400


class NotFoundError(AppError, ValueError):
    code = "not_found"
    status_code = 404


class BackupImportError(ValidationError):
    """Raised when a pasted manual backup cannot be imported."""
    code = "invalid_backup"


class StorageError(AppError):
    """Raised by durable store backends when a read or write fails."""
    code = "storage_unavailable"
    status_code = 503


def _request_id_for(request: Request) -> str:
    return getattr(request.state, "request_id", None) or get_request_id() or str(uuid4())


def _error_response(status_code: int, code: str, message: str, rid: str) -> JSONResponse:
    response = JSONResponse(
        status_code=status_code,
        content={
            "error": {"code": code, "message": message, "request_id": rid},
            "detail": message,
        },
    )
    response.headers["x-request-id"] = rid
    return response


async def app_error_handler(request: Request, exc: AppError):
    rid = exc.request_id or _request_id_for(request)
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(level, f"app.error: {exc.message}", extra={"request_id": rid, "error_code": exc.code, "status": exc.status_code})
    return _error_response(exc.status_code, exc.code, exc.message, rid)


async def http_error_handler(request: Request, exc: HTTPException):
    rid = _request_id_for(request)
    code = "not_found" if exc.status_code == 404 else "http_error"
    message = exc.detail or "HTTP error"
    logger.warning("http.error", extra={"request_id": rid, "error_code": code, "status": exc.status_code})
    return _error_response(exc.status_code, code, message, rid)


async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = _request_id_for(request)
    logger.error("unhandled.exception", exc_info=exc, extra={"request_id": rid, "error_code": "internal_error", "status": 500})
    return _error_response(500, "internal_error", "Unexpected error", rid)
