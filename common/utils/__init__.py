"""
Utilities module - Response envelope, exceptions, handlers, and passwords.
"""

from common.utils.responses import (
    success_response,
    error_response,
    list_response,
)
from common.utils.exceptions import (
    APIException,
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    ValidationException,
    RateLimitException,
    InternalServerException,
    ServiceUnavailableException,
)
from common.utils.handlers import register_exception_handlers
from common.utils.password import PasswordHasher, validate_password

__all__ = [
    "success_response",
    "error_response",
    "list_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "ValidationException",
    "RateLimitException",
    "InternalServerException",
    "ServiceUnavailableException",
    "register_exception_handlers",
    "PasswordHasher",
    "validate_password",
]
