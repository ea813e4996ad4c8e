"""
Authentication module - Purpose-tagged token issuing and bearer helpers.
"""

from common.auth.base import (
    TokenIssuer,
    TokenPurpose,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
)
from common.auth.jwt_auth import JWTTokenIssuer
from common.auth.dependencies import extract_bearer_token

__all__ = [
    "TokenIssuer",
    "TokenPurpose",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "JWTTokenIssuer",
    "extract_bearer_token",
]
