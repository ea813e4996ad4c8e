"""
FastAPI router for Auth endpoints.

Provides endpoints for registration, login, token refresh, logout, and
password reset.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import success_response
from fittrack.dependencies import (
    auth_rate_limit,
    get_auth_service,
    require_auth,
)
from fittrack.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from fittrack.services.auth.auth_service import AuthService
from fittrack.services.user.account_service import serialize_account

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201, dependencies=[Depends(auth_rate_limit)])
async def register(
    body: RegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """
    Create an account.

    Returns the new user with an access and refresh token.
    """
    result = await auth_service.register(
        email=body.email,
        password=body.password,
        first_name=body.firstName,
        last_name=body.lastName,
    )
    return success_response(result, message="User registered successfully")


@router.post("/login", dependencies=[Depends(auth_rate_limit)])
async def login(
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Sign in with email and password."""
    result = await auth_service.login(email=body.email, password=body.password)
    return success_response(result, message="Login successful")


@router.post("/refresh")
async def refresh(
    body: RefreshRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Exchange a refresh token for a new token pair."""
    tokens = await auth_service.refresh(body.refreshToken)
    return success_response(tokens)


@router.post("/logout")
async def logout(
    user: Annotated[dict, Depends(require_auth)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """
    Log out.

    Tokens are not revoked; clients discard them.
    """
    result = await auth_service.logout(str(user["_id"]))
    return success_response(message=result["message"])


@router.post("/forgot-password", dependencies=[Depends(auth_rate_limit)])
async def forgot_password(
    body: ForgotPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Request a password reset link. Always responds the same way."""
    result = await auth_service.request_password_reset(body.email)
    return success_response(message=result["message"])


@router.put("/reset-password/{token}", dependencies=[Depends(auth_rate_limit)])
async def reset_password(
    token: str,
    body: ResetPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Set a new password using a reset token."""
    result = await auth_service.reset_password(token, body.newPassword)
    return success_response(message=result["message"])


@router.get("/me")
async def me(user: Annotated[dict, Depends(require_auth)]):
    """Get the authenticated user."""
    return success_response(serialize_account(user))
