"""
Pydantic models for User profile requests.

Enum-valued fields are checked by the account service so each gets its
own error code.
"""

from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from fittrack.constants import NAME_MAX_LENGTH


class UpdateProfileRequest(BaseModel):
    """Request body for updating the caller's profile."""
    firstName: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    lastName: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    dateOfBirth: Optional[date] = None
    gender: Optional[str] = Field(None, description="male | female | other")
    fitnessLevel: Optional[str] = Field(None, description="beginner | intermediate | advanced")
    goals: Optional[List[Any]] = None
    units: Optional[str] = Field(None, description="metric | imperial")
    privacy: Optional[str] = Field(None, description="public | private")
    avatar: Optional[str] = None

    @field_validator("firstName", "lastName", "fitnessLevel", "goals", "units", "privacy")
    @classmethod
    def reject_null(cls, v):
        # Omit a field to keep it; only dateOfBirth, gender and avatar can be cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class UpdateGoalsRequest(BaseModel):
    """Request body for replacing goals; non-lists are rejected by the service."""
    goals: Any = None


class DeleteAccountRequest(BaseModel):
    """Request body for closing the caller's account."""
    password: Optional[str] = None
