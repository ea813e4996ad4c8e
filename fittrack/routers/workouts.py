"""
FastAPI router for Workout endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import list_response, success_response
from fittrack.dependencies import get_workout_service, require_auth
from fittrack.schemas.workout import WorkoutRequest
from fittrack.services.workout.workout_service import WorkoutService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("")
async def list_workouts(
    user: Annotated[dict, Depends(require_auth)],
    workout_service: Annotated[WorkoutService, Depends(get_workout_service)],
):
    """Get the 20 most recent workouts."""
    workouts = await workout_service.list_workouts(str(user["_id"]))
    return list_response(workouts)


@router.post("", status_code=201)
async def create_workout(
    body: WorkoutRequest,
    user: Annotated[dict, Depends(require_auth)],
    workout_service: Annotated[WorkoutService, Depends(get_workout_service)],
):
    """Log a workout. Total volume is computed from the sets."""
    workout = await workout_service.create_workout(str(user["_id"]), body.to_document())
    return success_response(workout, message="Workout created successfully")


@router.get("/{workout_id}")
async def get_workout(
    workout_id: str,
    user: Annotated[dict, Depends(require_auth)],
    workout_service: Annotated[WorkoutService, Depends(get_workout_service)],
):
    """Get a single workout."""
    workout = await workout_service.get_workout(str(user["_id"]), workout_id)
    return success_response(workout)


@router.put("/{workout_id}")
async def update_workout(
    workout_id: str,
    body: WorkoutRequest,
    user: Annotated[dict, Depends(require_auth)],
    workout_service: Annotated[WorkoutService, Depends(get_workout_service)],
):
    """Replace a workout."""
    workout = await workout_service.update_workout(
        str(user["_id"]), workout_id, body.to_document()
    )
    return success_response(workout, message="Workout updated successfully")


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: str,
    user: Annotated[dict, Depends(require_auth)],
    workout_service: Annotated[WorkoutService, Depends(get_workout_service)],
):
    """Delete a workout."""
    await workout_service.delete_workout(str(user["_id"]), workout_id)
    return success_response(message="Workout deleted successfully")
