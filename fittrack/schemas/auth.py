"""
Pydantic models for Auth request/response validation.

Defines schemas for registration, login, token refresh, and password reset.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from common.utils.password import validate_password
from fittrack.constants import NAME_MAX_LENGTH, PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH


def _check_password(value: str) -> str:
    is_valid, errors = validate_password(
        value,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
    )
    if not is_valid:
        raise ValueError("; ".join(errors))
    return value


class RegisterRequest(BaseModel):
    """Request body for user registration."""
    email: EmailStr
    password: str
    firstName: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    lastName: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("firstName", "lastName")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v


class LoginRequest(BaseModel):
    """Request body for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    """Request body for exchanging a refresh token."""
    refreshToken: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    """Request body for starting a password reset."""
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request body for completing a password reset."""
    newPassword: str

    @field_validator("newPassword")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)
