"""
Authentication middleware for protected routes.

Validates bearer access tokens and attaches the account to requests.
"""

import logging

from fastapi import Request

from common.auth.base import TokenExpiredError, TokenInvalidError, TokenIssuer, TokenPurpose
from common.auth.dependencies import extract_bearer_token
from common.utils.exceptions import ForbiddenException, UnauthorizedException
from fittrack.services.user.account_service import AccountService

logger = logging.getLogger(__name__)


class AuthMiddleware:
    """
    Middleware that validates access tokens and attaches user to request.
    """

    def __init__(self, token_issuer: TokenIssuer, account_service: AccountService):
        """
        Initialize AuthMiddleware.

        Args:
            token_issuer: For access token verification
            account_service: For loading the token's account
        """
        self._token_issuer = token_issuer
        self._accounts = account_service

    async def require_auth(self, request: Request) -> dict:
        """
        Validate request is authenticated.

        Args:
            request: HTTP request object

        Returns:
            User document attached to request

        Raises:
            UnauthorizedException: No token, invalid or expired token,
                missing or inactive account
            ForbiddenException: User is suspended

        Side Effects:
            - Attaches user to request.state.user
            - Attaches user id to request.state.user_id
        """
        token = extract_bearer_token(request.headers.get("Authorization"))

        if not token:
            raise UnauthorizedException(
                message="Access token required",
                code="NO_TOKEN"
            )

        try:
            claims = self._token_issuer.verify(token, TokenPurpose.ACCESS)
        except TokenExpiredError:
            raise UnauthorizedException(
                message="Access token expired",
                code="TOKEN_EXPIRED"
            )
        except TokenInvalidError:
            raise UnauthorizedException(
                message="Invalid access token",
                code="TOKEN_INVALID"
            )

        user = await self._accounts.get_by_id(claims["sub"])

        if not user or not user.get("isActive", False):
            raise UnauthorizedException(
                message="Invalid access token",
                code="TOKEN_INVALID"
            )

        if user.get("suspended"):
            raise ForbiddenException(
                message="Account suspended",
                code="ACCOUNT_SUSPENDED"
            )

        request.state.user = user
        request.state.user_id = str(user["_id"])

        return user

    async def require_admin(self, request: Request) -> dict:
        """
        Validate request is authenticated as an admin.

        Raises:
            ForbiddenException: authenticated but not an admin
        """
        user = await self.require_auth(request)

        if user.get("role") != "admin":
            logger.warning(f"Non-admin user {user['_id']} attempted admin access")
            raise ForbiddenException(
                message="Admin access required",
                code="ADMIN_REQUIRED"
            )

        return user
