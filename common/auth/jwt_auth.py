"""
JWT token issuer.

Signs tokens with HS256 (by default) using one secret per purpose, so a
leaked refresh secret cannot be used to forge access tokens.

Example:
    issuer = JWTTokenIssuer(
        secrets={
            TokenPurpose.ACCESS: "access-secret",
            TokenPurpose.REFRESH: "refresh-secret",
            TokenPurpose.PASSWORD_RESET: "reset-secret",
        },
        ttls={TokenPurpose.ACCESS: timedelta(minutes=15)},
    )

    token = issuer.issue("64f0c0ffee", TokenPurpose.ACCESS)
    claims = issuer.verify(token, TokenPurpose.ACCESS)
"""

import logging
import secrets as secrets_lib
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from jose import jwt, ExpiredSignatureError, JWTError

from common.auth.base import (
    TokenIssuer,
    TokenPurpose,
    TokenExpiredError,
    TokenInvalidError,
)

logger = logging.getLogger(__name__)


DEFAULT_TTLS: Dict[TokenPurpose, timedelta] = {
    TokenPurpose.ACCESS: timedelta(minutes=15),
    TokenPurpose.REFRESH: timedelta(days=7),
    TokenPurpose.PASSWORD_RESET: timedelta(hours=1),
}


class JWTTokenIssuer(TokenIssuer):
    """
    JWT implementation of TokenIssuer.

    Claims: sub, purpose, iat, exp, jti.
    """

    def __init__(
        self,
        secrets: Mapping[TokenPurpose, str],
        algorithm: str = "HS256",
        ttls: Optional[Mapping[TokenPurpose, timedelta]] = None,
    ):
        """
        Initialize the issuer.

        Args:
            secrets: Signing secret for each supported purpose
            algorithm: JWT algorithm (default: HS256)
            ttls: Per-purpose lifetime overrides

        Raises:
            ValueError: If a secret is empty
        """
        for purpose, secret in secrets.items():
            if not secret:
                raise ValueError(f"Missing signing secret for {purpose.value} tokens")

        self._secrets = dict(secrets)
        self.algorithm = algorithm
        self._ttls = {**DEFAULT_TTLS, **(ttls or {})}

    def _secret_for(self, purpose: TokenPurpose) -> str:
        try:
            return self._secrets[purpose]
        except KeyError:
            raise ValueError(f"No signing secret configured for {purpose.value} tokens")

    def ttl_for(self, purpose: TokenPurpose) -> timedelta:
        """Get the default lifetime for a purpose."""
        return self._ttls[purpose]

    def issue(
        self,
        subject_id: str,
        purpose: TokenPurpose,
        ttl: Optional[timedelta] = None,
    ) -> str:
        """Create a signed token for the subject."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(subject_id),
            "purpose": purpose.value,
            "iat": now,
            "exp": now + (ttl if ttl is not None else self._ttls[purpose]),
            "jti": secrets_lib.token_hex(8),
        }
        return jwt.encode(payload, self._secret_for(purpose), algorithm=self.algorithm)

    def verify(self, token: str, expected_purpose: TokenPurpose) -> Dict[str, Any]:
        """Verify signature, expiry, and purpose."""
        if not token:
            raise TokenInvalidError("Token is empty")

        try:
            payload = jwt.decode(
                token,
                self._secret_for(expected_purpose),
                algorithms=[self.algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JWTError as e:
            logger.debug(f"JWT decode failed for {expected_purpose.value} token: {e}")
            raise TokenInvalidError("Invalid token")

        if payload.get("purpose") != expected_purpose.value:
            raise TokenInvalidError("Token purpose mismatch")

        if not payload.get("sub"):
            raise TokenInvalidError("Token missing subject")

        return payload
