"""
Exception handlers that render every failure in the response envelope.

Framework, validation and driver errors are converted to the matching
APIException first, so a single renderer produces every error body.

Example:
    app = FastAPI()
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.utils.exceptions import (
    APIException,
    ConflictException,
    InternalServerException,
    ServiceUnavailableException,
    ValidationException,
)
from common.utils.responses import error_response

logger = logging.getLogger(__name__)


def _validation_details(exc: RequestValidationError) -> list:
    details = []
    for error in exc.errors():
        # Drop the leading "body"/"query"/"path" segment
        loc = [str(part) for part in error.get("loc", ())[1:]]
        details.append({
            "field": ".".join(loc) or None,
            "message": error.get("msg", "Invalid value"),
        })
    return details


def _render(exc: APIException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, code=exc.code, details=exc.details),
        headers=exc.headers,
    )


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Render an APIException with its status and code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return _render(exc)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (404 route, 405 method)."""
    code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
    return _render(APIException(
        message=str(exc.detail),
        code=code,
        headers=getattr(exc, "headers", None),
        status_code=exc.status_code,
    ))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation errors as 400 with per-field details."""
    return _render(ValidationException(details=_validation_details(exc)))


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    """Render a unique index violation as 409."""
    logger.warning(f"Duplicate key on {request.method} {request.url.path}")
    return _render(ConflictException())


async def database_exception_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    """Render database failures without leaking driver messages."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    if isinstance(exc, ConnectionFailure):
        return _render(ServiceUnavailableException())
    return _render(InternalServerException())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback and return a generic 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _render(InternalServerException())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all envelope-producing handlers to the app."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(PyMongoError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
