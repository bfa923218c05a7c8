from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("gadget_api.errors")


class GadgetAPIError(Exception):
    """Base class for failures that map onto a single HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(GadgetAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class BadRequest(GadgetAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class Forbidden(GadgetAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(GadgetAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalError(GadgetAPIError):
    pass


class ExhaustedNamespace(BadRequest):
    """No unused codename could be found within the configured attempts."""

    default_message = "No unique codename available"


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"error": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def gadget_error_handler(request: Request, exc: GadgetAPIError):
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("request.failed", extra={"extra_data": {"path": request.url.path, "error": exc.message}})
    return ErrorEnvelope(status_code=exc.status_code, message=exc.message, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Validation failed"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    return ErrorEnvelope(
        status_code=status.HTTP_400_BAD_REQUEST,
        message=message,
        details={"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors]},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("database.error", exc_info=exc, extra={"extra_data": {"path": request.url.path}})
    return ErrorEnvelope(status_code=InternalError.status_code, message=InternalError.default_message)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("request.unhandled", exc_info=exc, extra={"extra_data": {"path": request.url.path}})
    return ErrorEnvelope(status_code=InternalError.status_code, message=InternalError.default_message)


__all__ = [
    "BadRequest",
    "ErrorEnvelope",
    "ExhaustedNamespace",
    "Forbidden",
    "GadgetAPIError",
    "InternalError",
    "NotFound",
    "Unauthenticated",
    "database_error_handler",
    "gadget_error_handler",
    "http_exception_handler",
    "unhandled_exception_handler",
    "validation_exception_handler",
]
