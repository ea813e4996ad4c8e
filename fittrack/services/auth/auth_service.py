"""
Authentication service.

Registration, login, refresh, logout, and password reset on top of the
password hasher, the token issuer, and the account store.
"""

import logging
from typing import Awaitable, Callable, Dict, Optional

from pymongo.errors import DuplicateKeyError

from common.auth.base import TokenError, TokenIssuer, TokenPurpose
from common.utils.exceptions import BadRequestException, UnauthorizedException
from common.utils.password import PasswordHasher
from fittrack.services.user.account_service import AccountService, serialize_account

logger = logging.getLogger(__name__)

# Called with (account document, reset token) when a reset is requested
ResetTokenSender = Callable[[dict, str], Awaitable[None]]

RESET_ACKNOWLEDGMENT = "If the email exists, a reset link has been sent"


class AuthService:
    """
    Orchestrates the account session lifecycle.
    """

    def __init__(
        self,
        account_service: AccountService,
        password_hasher: PasswordHasher,
        token_issuer: TokenIssuer,
        reset_token_sender: Optional[ResetTokenSender] = None,
    ):
        """
        Initialize AuthService.

        Args:
            account_service: Account store
            password_hasher: For hashing and verifying credentials
            token_issuer: For access/refresh/reset tokens
            reset_token_sender: Out-of-band delivery of reset tokens
        """
        self._accounts = account_service
        self._password_hasher = password_hasher
        self._token_issuer = token_issuer
        self._reset_token_sender = reset_token_sender

    def issue_token_pair(self, user_id: str) -> Dict[str, str]:
        """Issue a fresh access + refresh token pair."""
        return {
            "accessToken": self._token_issuer.issue(str(user_id), TokenPurpose.ACCESS),
            "refreshToken": self._token_issuer.issue(str(user_id), TokenPurpose.REFRESH),
        }

    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> dict:
        """
        Create an account and sign it in.

        Returns:
            dict with user, accessToken, refreshToken

        Raises:
            BadRequestException: USER_EXISTS
        """
        existing = await self._accounts.get_by_email(email)
        if existing:
            raise BadRequestException(
                message="User already exists with this email",
                code="USER_EXISTS"
            )

        password_hash = self._password_hasher.hash(password)

        try:
            user = await self._accounts.create_account(
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
            )
        except DuplicateKeyError:
            # Lost a race with a concurrent registration
            raise BadRequestException(
                message="User already exists with this email",
                code="USER_EXISTS"
            )

        logger.info(f"User registered: {user['_id']}")

        return {
            "user": serialize_account(user),
            **self.issue_token_pair(user["_id"]),
        }

    async def login(self, email: str, password: str) -> dict:
        """
        Verify credentials and issue tokens.

        Unknown email, inactive account, and wrong password are
        indistinguishable to the caller.

        Raises:
            UnauthorizedException: INVALID_CREDENTIALS
        """
        user = await self._accounts.get_by_email(email, active_only=True)

        if not user or not self._password_hasher.verify(password, user.get("passwordHash", "")):
            logger.warning("Failed login attempt")
            raise UnauthorizedException(
                message="Invalid email or password",
                code="INVALID_CREDENTIALS"
            )

        user["lastLogin"] = await self._accounts.update_last_login(str(user["_id"]))

        logger.info(f"User logged in: {user['_id']}")

        return {
            "user": serialize_account(user),
            **self.issue_token_pair(user["_id"]),
        }

    async def refresh(self, refresh_token: str) -> Dict[str, str]:
        """
        Exchange a refresh token for a new token pair.

        Raises:
            UnauthorizedException: INVALID_REFRESH_TOKEN
        """
        try:
            claims = self._token_issuer.verify(refresh_token, TokenPurpose.REFRESH)
        except TokenError as e:
            logger.info(f"Refresh rejected: {e}")
            raise UnauthorizedException(
                message="Invalid refresh token",
                code="INVALID_REFRESH_TOKEN"
            )

        user = await self._accounts.get_by_id(claims["sub"])
        if not user or not user.get("isActive", False):
            raise UnauthorizedException(
                message="Invalid refresh token",
                code="INVALID_REFRESH_TOKEN"
            )

        return self.issue_token_pair(user["_id"])

    async def logout(self, user_id: str) -> dict:
        """
        Acknowledge a logout.

        Tokens are stateless and stay valid until they expire.
        """
        logger.info(f"User logged out: {user_id}")
        return {"message": "Logged out successfully"}

    async def request_password_reset(self, email: str) -> dict:
        """
        Start a password reset.

        The response is the same whether or not the email is registered.
        """
        user = await self._accounts.get_by_email(email, active_only=True)

        if user:
            reset_token = self._token_issuer.issue(
                str(user["_id"]), TokenPurpose.PASSWORD_RESET
            )
            if self._reset_token_sender:
                try:
                    await self._reset_token_sender(user, reset_token)
                except Exception as e:
                    logger.error(f"Failed to deliver reset token for user {user['_id']}: {e}")
            logger.info(f"Password reset requested for user {user['_id']}")

        return {"message": RESET_ACKNOWLEDGMENT}

    async def reset_password(self, reset_token: str, new_password: str) -> dict:
        """
        Replace the password using a reset token.

        Raises:
            BadRequestException: INVALID_RESET_TOKEN
        """
        try:
            claims = self._token_issuer.verify(reset_token, TokenPurpose.PASSWORD_RESET)
        except TokenError as e:
            logger.info(f"Reset rejected: {e}")
            raise BadRequestException(
                message="Invalid or expired reset token",
                code="INVALID_RESET_TOKEN"
            )

        user = await self._accounts.get_by_id(claims["sub"])
        if not user or not user.get("isActive", False):
            raise BadRequestException(
                message="Invalid or expired reset token",
                code="INVALID_RESET_TOKEN"
            )

        await self._accounts.set_password_hash(
            str(user["_id"]), self._password_hasher.hash(new_password)
        )

        logger.info(f"Password reset for user {user['_id']}")
        return {"message": "Password reset successfully"}
