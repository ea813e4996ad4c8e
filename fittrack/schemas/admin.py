"""
Pydantic models for Admin requests.
"""

from pydantic import BaseModel


class UpdateRoleRequest(BaseModel):
    """Request body for changing a user's role; checked by the admin service."""
    role: str


class SuspendRequest(BaseModel):
    """Request body for suspending or reinstating a user."""
    suspended: bool = False
