"""
Error taxonomy and the uniform JSON envelope for failures.
Every handler raises one of these; the app-level handlers turn them into
{status, success: false, message, code, details?}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base API error: carries HTTP status and machine-readable code."""

    status_code = 500
    code = "SERVER_ERROR"
    default_message = "Server Error"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    code = "BAD_REQUEST"
    default_message = "Bad Request"


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Conflict"


class ServerError(AppError):
    pass


_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def error_body(status_code: int, message: str, code: str, details: Any = None) -> dict:
    body = {"status": status_code, "success": False, "message": message, "code": code}
    if details is not None:
        body["details"] = details
    return body


def _error_response(status_code: int, message: str, code: str, details: Any = None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error_body(status_code, message, code, details)),
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register handlers so every failure leaves in the same envelope."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return _error_response(exc.status_code, exc.message, exc.code, exc.details, headers)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        code = _HTTP_CODES.get(exc.status_code, "ERROR")
        return _error_response(exc.status_code, str(exc.detail), code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = {
            ".".join(str(p) for p in err.get("loc", ()) if p != "body"): err.get("msg")
            for err in exc.errors()
        }
        return _error_response(422, "Validation failed", "VALIDATION_ERROR", details)

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s %s", request.method, request.url.path)
        return _error_response(409, "Duplicate field value entered", "DUPLICATE_VALUE")

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error_response(500, "Server Error", "SERVER_ERROR")
