"""
API exceptions carrying a status, a machine-readable code, and details.

Services raise these directly; `register_exception_handlers` renders them in
the error envelope. Each subclass only sets its defaults.

Example:
    from common.utils import NotFoundException

    workout = await workouts.find_one({"_id": oid, "userId": user_oid})
    if not workout:
        raise NotFoundException("Workout not found", code="WORKOUT_NOT_FOUND")
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException


class APIException(HTTPException):
    """Base API exception; `detail` mirrors the envelope's error object."""

    status_code = 500
    default_message = "Request failed"
    default_code = "ERROR"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details

        detail: Dict[str, Any] = {"message": self.message, "code": self.code}
        if details is not None:
            detail["details"] = details

        super().__init__(
            status_code=status_code or self.status_code,
            detail=detail,
            headers=headers,
        )


class BadRequestException(APIException):
    status_code = 400
    default_message = "Bad request"
    default_code = "BAD_REQUEST"


class UnauthorizedException(APIException):
    status_code = 401
    default_message = "Unauthorized"
    default_code = "UNAUTHORIZED"


class ForbiddenException(APIException):
    status_code = 403
    default_message = "Forbidden"
    default_code = "FORBIDDEN"


class NotFoundException(APIException):
    """Missing resources and resources owned by someone else look the same."""

    status_code = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class ConflictException(APIException):
    status_code = 409
    default_message = "Duplicate value for a unique field"
    default_code = "CONFLICT"


class ValidationException(APIException):
    """Malformed request input; `details` is a list of {field, message}."""

    status_code = 400
    default_message = "Invalid input data"
    default_code = "VALIDATION_ERROR"


class RateLimitException(APIException):
    status_code = 429
    default_message = "Too many requests, please try again later"
    default_code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: Optional[str] = None, retry_after: Optional[int] = None):
        super().__init__(
            message=message,
            details={"retryAfter": retry_after} if retry_after else None,
            headers={"Retry-After": str(retry_after)} if retry_after else None,
        )


class InternalServerException(APIException):
    status_code = 500
    default_message = "Internal server error"
    default_code = "INTERNAL_ERROR"


class ServiceUnavailableException(APIException):
    status_code = 503
    default_message = "Database connection error. Please try again later."
    default_code = "DATABASE_ERROR"
