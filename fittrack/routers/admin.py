"""
FastAPI router for Admin endpoints.

Every route requires an authenticated user with the admin role.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from common.utils import success_response
from fittrack.dependencies import get_admin_service, require_admin
from fittrack.schemas.admin import SuspendRequest, UpdateRoleRequest
from fittrack.services.admin.admin_service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users")
async def list_users(
    admin: Annotated[dict, Depends(require_admin)],
    admin_service: Annotated[AdminService, Depends(get_admin_service)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
):
    """List users with pagination and optional search."""
    result = await admin_service.list_users(page=page, limit=limit, search=search)
    return success_response(result)


@router.get("/stats")
async def get_stats(
    admin: Annotated[dict, Depends(require_admin)],
    admin_service: Annotated[AdminService, Depends(get_admin_service)],
):
    """Platform dashboard statistics."""
    stats = await admin_service.get_platform_stats()
    return success_response(stats)


@router.get("/users/{user_id}")
async def get_user(
    user_id: str,
    admin: Annotated[dict, Depends(require_admin)],
    admin_service: Annotated[AdminService, Depends(get_admin_service)],
):
    """Get a user with their workout count."""
    user = await admin_service.get_user_detail(user_id)
    return success_response(user)


@router.put("/users/{user_id}/role")
async def update_role(
    user_id: str,
    body: UpdateRoleRequest,
    admin: Annotated[dict, Depends(require_admin)],
    admin_service: Annotated[AdminService, Depends(get_admin_service)],
):
    """Change a user's role."""
    user = await admin_service.update_role(user_id, body.role)
    return success_response(user, message="User role updated")


@router.put("/users/{user_id}/suspend")
async def set_suspended(
    user_id: str,
    body: SuspendRequest,
    admin: Annotated[dict, Depends(require_admin)],
    admin_service: Annotated[AdminService, Depends(get_admin_service)],
):
    """Suspend or reinstate a user."""
    user = await admin_service.set_suspended(user_id, body.suspended)
    return success_response(user, message="User status updated")


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: Annotated[dict, Depends(require_admin)],
    admin_service: Annotated[AdminService, Depends(get_admin_service)],
):
    """Delete a user and all of their data."""
    await admin_service.delete_user(str(admin["_id"]), user_id)
    return success_response(message="User account deleted successfully")
