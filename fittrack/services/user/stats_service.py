"""
Workout statistics aggregation service.

Derives per-user metrics from the `workouts` collection with aggregation
pipelines. Every figure falls back to zero or an empty list when the user
has no workouts.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from common.utils.exceptions import BadRequestException, NotFoundException
from fittrack.constants import POPULAR_EXERCISES_LIMIT, RECENT_WINDOW_DAYS
from fittrack.services.user.account_service import to_object_id

logger = logging.getLogger(__name__)

SUMMARY_MIN_DAYS = 1
SUMMARY_MAX_DAYS = 365


def round_half_up(value: Optional[float]) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    if not value:
        return 0
    return int(math.floor(value + 0.5))


class WorkoutStatsService:
    """
    Aggregates workout statistics for a user.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize WorkoutStatsService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._users_collection = db["users"]
        self._workouts_collection = db["workouts"]

    async def get_user_stats(self, user_id: str) -> Dict[str, Any]:
        """
        Aggregate lifetime workout stats.

        Args:
            user_id: User ID

        Returns:
            dict with totalWorkouts, recentWorkouts, totalVolume,
            averageDuration, totalExercises, memberSince, workoutsByDay,
            popularExercises

        Raises:
            NotFoundException: user doesn't exist
        """
        oid = to_object_id(user_id)
        user = await self._users_collection.find_one({"_id": oid}, {"createdAt": 1}) if oid else None
        if not user:
            raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

        total_workouts = await self._workouts_collection.count_documents({"userId": oid})
        recent_workouts = await self._count_recent(oid)
        totals = await self._get_totals(oid)
        workouts_by_day = await self._get_workouts_by_day(oid)
        popular_exercises = await self._get_popular_exercises(oid)

        return {
            "totalWorkouts": total_workouts,
            "recentWorkouts": recent_workouts,
            "totalVolume": totals.get("totalVolume") or 0,
            "averageDuration": round_half_up(totals.get("averageDuration")),
            "totalExercises": totals.get("totalExercises") or 0,
            "memberSince": user.get("createdAt"),
            "workoutsByDay": workouts_by_day,
            "popularExercises": popular_exercises,
        }

    async def get_workout_summary(self, user_id: str, days: int = 30) -> Dict[str, Any]:
        """
        Summarize workouts over the trailing `days` days.

        Raises:
            BadRequestException: days outside 1-365
        """
        if not SUMMARY_MIN_DAYS <= days <= SUMMARY_MAX_DAYS:
            raise BadRequestException(
                message=f"Days must be between {SUMMARY_MIN_DAYS} and {SUMMARY_MAX_DAYS}",
                code="INVALID_DAYS"
            )

        since = datetime.now(timezone.utc) - timedelta(days=days)
        pipeline = [
            {"$match": {"userId": to_object_id(user_id), "date": {"$gte": since}}},
            {
                "$group": {
                    "_id": None,
                    "totalWorkouts": {"$sum": 1},
                    "totalVolume": {"$sum": "$totalVolume"},
                    "totalDuration": {"$sum": "$totalDuration"},
                    "averageVolume": {"$avg": "$totalVolume"},
                    "averageDuration": {"$avg": "$totalDuration"},
                }
            },
        ]
        results = await self._workouts_collection.aggregate(pipeline).to_list(length=1)
        summary = results[0] if results else {}

        return {
            "period": f"Last {days} days",
            "totalWorkouts": summary.get("totalWorkouts") or 0,
            "totalVolume": summary.get("totalVolume") or 0,
            "totalDuration": summary.get("totalDuration") or 0,
            "averageVolume": round_half_up(summary.get("averageVolume")),
            "averageDuration": round_half_up(summary.get("averageDuration")),
        }

    async def _count_recent(self, oid) -> int:
        since = datetime.now(timezone.utc) - timedelta(days=RECENT_WINDOW_DAYS)
        return await self._workouts_collection.count_documents(
            {"userId": oid, "date": {"$gte": since}}
        )

    async def _get_totals(self, oid) -> Dict[str, Any]:
        """Volume sum, mean declared duration, and exercise count."""
        pipeline = [
            {"$match": {"userId": oid}},
            {
                "$group": {
                    "_id": None,
                    "totalVolume": {"$sum": "$totalVolume"},
                    # $avg skips workouts without a totalDuration
                    "averageDuration": {"$avg": "$totalDuration"},
                    "totalExercises": {"$sum": {"$size": {"$ifNull": ["$exercises", []]}}},
                }
            },
        ]
        results = await self._workouts_collection.aggregate(pipeline).to_list(length=1)
        return results[0] if results else {}

    async def _get_workouts_by_day(self, oid) -> List[Dict[str, int]]:
        """Workout counts per weekday, 0 = Sunday."""
        pipeline = [
            {"$match": {"userId": oid}},
            {
                "$group": {
                    "_id": {"$subtract": [{"$dayOfWeek": "$date"}, 1]},
                    "count": {"$sum": 1},
                }
            },
            {"$sort": {"_id": 1}},
        ]
        results = await self._workouts_collection.aggregate(pipeline).to_list(length=7)
        return [{"dayOfWeek": day["_id"], "count": day["count"]} for day in results]

    async def _get_popular_exercises(self, oid) -> List[Dict[str, Any]]:
        """Most frequent exercise names, ties kept in first-logged order."""
        pipeline = [
            {"$match": {"userId": oid}},
            {"$sort": {"_id": 1}},
            {"$unwind": {"path": "$exercises", "includeArrayIndex": "exerciseIndex"}},
            {
                "$group": {
                    "_id": "$exercises.name",
                    "count": {"$sum": 1},
                    "totalSets": {"$sum": {"$size": {"$ifNull": ["$exercises.sets", []]}}},
                    "firstWorkout": {"$first": "$_id"},
                    "firstIndex": {"$first": "$exerciseIndex"},
                }
            },
            {"$sort": {"count": -1, "firstWorkout": 1, "firstIndex": 1}},
            {"$limit": POPULAR_EXERCISES_LIMIT},
        ]
        results = await self._workouts_collection.aggregate(pipeline).to_list(
            length=POPULAR_EXERCISES_LIMIT
        )
        return [
            {
                "name": exercise["_id"],
                "workouts": exercise["count"],
                "totalSets": exercise["totalSets"],
            }
            for exercise in results
        ]
