"""
Common library for reusable infrastructure components.

- database: Async MongoDB connection (Motor)
- auth: Purpose-tagged token issuing and bearer header parsing
- utils: Response envelope, exceptions, exception handlers, passwords
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import (
    TokenIssuer,
    JWTTokenIssuer,
    TokenPurpose,
    TokenExpiredError,
    TokenInvalidError,
)
from common.utils import (
    success_response,
    error_response,
    APIException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
    PasswordHasher,
    validate_password,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "TokenIssuer",
    "JWTTokenIssuer",
    "TokenPurpose",
    "TokenExpiredError",
    "TokenInvalidError",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ValidationException",
    "PasswordHasher",
    "validate_password",
    # Config
    "BaseAppSettings",
]
