"""
Abstract token issuer interface.

Defines the contract for signed, time-bounded tokens that carry a subject
identifier and a purpose tag. Implementations decide how tokens are signed;
callers only ever deal with purposes and subjects.

Example:
    from common.auth import JWTTokenIssuer, TokenPurpose

    issuer = JWTTokenIssuer(secrets={
        TokenPurpose.ACCESS: settings.JWT_SECRET,
        TokenPurpose.REFRESH: settings.JWT_REFRESH_SECRET,
    })

    token = issuer.issue(user_id, TokenPurpose.ACCESS)
    claims = issuer.verify(token, TokenPurpose.ACCESS)
    print(claims["sub"])  # user_id
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from enum import Enum
from typing import Any, Dict, Optional


class TokenPurpose(str, Enum):
    """Purpose tag embedded in every token."""

    ACCESS = "access"
    REFRESH = "refresh"
    PASSWORD_RESET = "password_reset"


class TokenError(ValueError):
    """Base class for token verification failures."""


class TokenExpiredError(TokenError):
    """Token signature is valid but its expiry instant has passed."""


class TokenInvalidError(TokenError):
    """Token is malformed, badly signed, or carries the wrong purpose."""


class TokenIssuer(ABC):
    """
    Issues and verifies purpose-tagged tokens.

    A token issued for one purpose must never verify for another.
    """

    @abstractmethod
    def issue(
        self,
        subject_id: str,
        purpose: TokenPurpose,
        ttl: Optional[timedelta] = None,
    ) -> str:
        """
        Create a signed token.

        Args:
            subject_id: Identifier of the account the token is bound to
            purpose: Purpose tag to embed
            ttl: Lifetime override (defaults to the purpose's configured ttl)

        Returns:
            Encoded token string
        """
        pass

    @abstractmethod
    def verify(self, token: str, expected_purpose: TokenPurpose) -> Dict[str, Any]:
        """
        Verify a token for the given purpose.

        Args:
            token: Encoded token
            expected_purpose: Purpose the caller is about to use it for

        Returns:
            Decoded claims (at minimum: sub, purpose)

        Raises:
            TokenExpiredError: Token is past its expiry
            TokenInvalidError: Signature, structure, or purpose is wrong
        """
        pass
