"""
FastAPI router for User endpoints.

Provides endpoints for profile management, statistics, goals, search, and
account deletion.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from common.utils import list_response, success_response
from fittrack.dependencies import (
    get_account_service,
    get_stats_service,
    require_auth,
)
from fittrack.schemas.user import (
    DeleteAccountRequest,
    UpdateGoalsRequest,
    UpdateProfileRequest,
)
from fittrack.services.user.account_service import AccountService
from fittrack.services.user.stats_service import WorkoutStatsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile")
async def get_profile(
    user: Annotated[dict, Depends(require_auth)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
):
    """Get current user's profile."""
    profile = await account_service.get_profile(str(user["_id"]))
    return success_response(profile)


@router.put("/profile")
async def update_profile(
    body: UpdateProfileRequest,
    user: Annotated[dict, Depends(require_auth)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
):
    """
    Update current user's profile.

    Only provided fields will be updated (partial update).
    """
    updates = body.model_dump(exclude_unset=True)
    profile = await account_service.update_profile(str(user["_id"]), updates)
    return success_response(profile, message="Profile updated successfully")


@router.get("/stats")
async def get_stats(
    user: Annotated[dict, Depends(require_auth)],
    stats_service: Annotated[WorkoutStatsService, Depends(get_stats_service)],
):
    """Get lifetime workout statistics."""
    stats = await stats_service.get_user_stats(str(user["_id"]))
    return success_response(stats)


@router.get("/workout-summary")
async def get_workout_summary(
    user: Annotated[dict, Depends(require_auth)],
    stats_service: Annotated[WorkoutStatsService, Depends(get_stats_service)],
    days: int = Query(30, ge=1, le=365, description="Trailing window in days"),
):
    """Summarize workouts over the last N days."""
    summary = await stats_service.get_workout_summary(str(user["_id"]), days=days)
    return success_response(summary)


@router.put("/goals")
async def update_goals(
    body: UpdateGoalsRequest,
    user: Annotated[dict, Depends(require_auth)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
):
    """Replace the user's goals."""
    goals = await account_service.update_goals(str(user["_id"]), body.goals)
    return success_response({"goals": goals}, message="Goals updated successfully")


@router.get("/search")
async def search_users(
    user: Annotated[dict, Depends(require_auth)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
    q: str = Query(..., min_length=2, max_length=50),
    limit: int = Query(10, ge=1, le=50),
):
    """Search public profiles by name."""
    users = await account_service.search_users(q, str(user["_id"]), limit=limit)
    return list_response(users)


@router.delete("/account")
async def delete_account(
    body: DeleteAccountRequest,
    user: Annotated[dict, Depends(require_auth)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
):
    """
    Permanently delete the caller's account.

    Requires the current password; workouts and measurements go with it.
    """
    await account_service.delete_account(str(user["_id"]), body.password)
    return success_response(message="Account deleted successfully")
