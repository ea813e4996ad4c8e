"""
Workout service.

CRUD over the `workouts` collection, scoped to the owning account. The
derived `totalVolume` is recomputed on every write.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import NotFoundException
from fittrack.services.user.account_service import to_object_id

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 20

# Fields a client may set; everything else is server-managed
WORKOUT_FIELDS = ["name", "date", "exercises", "totalDuration", "notes"]


def compute_total_volume(exercises: Optional[List[dict]]) -> float:
    """
    Sum weight x reps over every set of every exercise.

    Missing or null weight/reps count as 0.
    """
    total = 0.0
    for exercise in exercises or []:
        for workout_set in exercise.get("sets") or []:
            weight = workout_set.get("weight") or 0
            reps = workout_set.get("reps") or 0
            total += weight * reps
    return total


def serialize_workout(workout: dict) -> dict:
    """Convert a workout document into its external representation."""
    data = {k: v for k, v in workout.items() if k not in ("_id", "userId", "__v")}
    data["id"] = str(workout["_id"])
    data["userId"] = str(workout["userId"])
    return data


def _not_found() -> NotFoundException:
    return NotFoundException(message="Workout not found", code="WORKOUT_NOT_FOUND")


class WorkoutService:
    """
    Manages workout records for their owners.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize WorkoutService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._workouts_collection = db["workouts"]

    def _owned(self, user_id: str, workout_id: str) -> Optional[Dict[str, Any]]:
        """Query matching one workout owned by the user, or None for a bad id."""
        oid = to_object_id(workout_id)
        if oid is None:
            return None
        return {"_id": oid, "userId": to_object_id(user_id)}

    async def list_workouts(self, user_id: str, limit: int = DEFAULT_LIST_LIMIT) -> List[dict]:
        """
        Get the user's most recent workouts, newest first.

        Args:
            user_id: Owner ID
            limit: Maximum number of workouts
        """
        cursor = self._workouts_collection.find({"userId": to_object_id(user_id)})
        cursor = cursor.sort("date", -1)
        cursor = cursor.limit(limit)

        workouts = await cursor.to_list(length=limit)
        return [serialize_workout(w) for w in workouts]

    async def get_workout(self, user_id: str, workout_id: str) -> dict:
        """
        Get a single workout.

        Raises:
            NotFoundException: missing or owned by someone else
        """
        query = self._owned(user_id, workout_id)
        if query is None:
            raise _not_found()

        workout = await self._workouts_collection.find_one(query)
        if not workout:
            raise _not_found()

        return serialize_workout(workout)

    async def create_workout(self, user_id: str, data: Dict[str, Any]) -> dict:
        """
        Log a new workout.

        Args:
            user_id: Owner ID
            data: Validated workout fields
        """
        now = datetime.now(timezone.utc)
        workout_doc = {k: v for k, v in data.items() if k in WORKOUT_FIELDS}
        workout_doc.setdefault("date", now)
        workout_doc["userId"] = to_object_id(user_id)
        workout_doc["totalVolume"] = compute_total_volume(workout_doc.get("exercises"))
        workout_doc["createdAt"] = now
        workout_doc["updatedAt"] = now

        result = await self._workouts_collection.insert_one(workout_doc)
        workout_doc["_id"] = result.inserted_id

        logger.info(f"Workout {result.inserted_id} created for user {user_id}")
        return serialize_workout(workout_doc)

    async def update_workout(
        self,
        user_id: str,
        workout_id: str,
        data: Dict[str, Any],
    ) -> dict:
        """
        Replace a workout's mutable fields.

        Raises:
            NotFoundException: missing or owned by someone else
        """
        query = self._owned(user_id, workout_id)
        if query is None:
            raise _not_found()

        changes = {k: v for k, v in data.items() if k in WORKOUT_FIELDS}
        changes["totalVolume"] = compute_total_volume(changes.get("exercises"))
        changes["updatedAt"] = datetime.now(timezone.utc)

        # Optional fields left out of the request are cleared
        unset = {
            field: ""
            for field in ("totalDuration", "notes")
            if field not in changes or changes[field] is None
        }
        for field in unset:
            changes.pop(field, None)

        update: Dict[str, Any] = {"$set": changes}
        if unset:
            update["$unset"] = unset

        workout = await self._workouts_collection.find_one_and_update(
            query,
            update,
            return_document=ReturnDocument.AFTER,
        )
        if not workout:
            raise _not_found()

        logger.info(f"Workout {workout_id} updated for user {user_id}")
        return serialize_workout(workout)

    async def delete_workout(self, user_id: str, workout_id: str) -> None:
        """
        Delete a workout.

        Raises:
            NotFoundException: missing or owned by someone else
        """
        query = self._owned(user_id, workout_id)
        if query is None:
            raise _not_found()

        workout = await self._workouts_collection.find_one_and_delete(query)
        if not workout:
            raise _not_found()

        logger.info(f"Workout {workout_id} deleted for user {user_id}")
