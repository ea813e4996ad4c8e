"""
Admin service.

Platform-wide user management for accounts with the admin role.
"""

import logging
import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import BadRequestException, NotFoundException
from fittrack.constants import RECENT_WINDOW_DAYS, ROLES
from fittrack.services.user.account_service import (
    AccountService,
    serialize_account,
    to_object_id,
)

logger = logging.getLogger(__name__)

TOP_USERS_LIMIT = 5


def _user_not_found() -> NotFoundException:
    return NotFoundException(message="User not found", code="USER_NOT_FOUND")


class AdminService:
    """
    User administration and platform statistics.
    """

    def __init__(self, db: AsyncIOMotorDatabase, account_service: AccountService):
        """
        Initialize AdminService.

        Args:
            db: MongoDB database connection
            account_service: Owns the account deletion cascade
        """
        self._db = db
        self._accounts = account_service
        self._users_collection = db["users"]
        self._workouts_collection = db["workouts"]

    async def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        List users newest first, optionally filtered by name or email.

        Returns:
            dict with users, total, currentPage, totalPages
        """
        query: Dict[str, Any] = {}
        if search and search.strip():
            pattern = {"$regex": re.escape(search.strip()), "$options": "i"}
            query["$or"] = [
                {"firstName": pattern},
                {"lastName": pattern},
                {"email": pattern},
            ]

        cursor = self._users_collection.find(query)
        cursor = cursor.sort("createdAt", -1)
        cursor = cursor.skip((page - 1) * limit)
        cursor = cursor.limit(limit)

        users = await cursor.to_list(length=limit)
        total = await self._users_collection.count_documents(query)

        return {
            "users": [serialize_account(u) for u in users],
            "total": total,
            "currentPage": page,
            "totalPages": math.ceil(total / limit) if limit else 0,
        }

    async def get_platform_stats(self) -> Dict[str, Any]:
        """
        Dashboard figures across all users.

        Returns:
            dict with totalUsers, totalWorkouts, activeUsers, recentUsers, topUsers
        """
        since = datetime.now(timezone.utc) - timedelta(days=RECENT_WINDOW_DAYS)

        total_users = await self._users_collection.count_documents({})
        total_workouts = await self._workouts_collection.count_documents({})
        active_users = await self._users_collection.count_documents({"lastLogin": {"$gte": since}})
        recent_users = await self._users_collection.count_documents({"createdAt": {"$gte": since}})

        pipeline = [
            {"$group": {"_id": "$userId", "workoutCount": {"$sum": 1}}},
            {"$sort": {"workoutCount": -1}},
            {"$limit": TOP_USERS_LIMIT},
            {
                "$lookup": {
                    "from": "users",
                    "localField": "_id",
                    "foreignField": "_id",
                    "as": "user",
                }
            },
            {"$unwind": "$user"},
            {
                "$project": {
                    "workoutCount": 1,
                    "user.firstName": 1,
                    "user.lastName": 1,
                    "user.email": 1,
                }
            },
        ]
        top = await self._workouts_collection.aggregate(pipeline).to_list(length=TOP_USERS_LIMIT)

        return {
            "totalUsers": total_users,
            "totalWorkouts": total_workouts,
            "activeUsers": active_users,
            "recentUsers": recent_users,
            "topUsers": [self._format_top_user(t) for t in top],
        }

    async def get_user_detail(self, user_id: str) -> Dict[str, Any]:
        """
        Get a user with their workout count.

        Raises:
            NotFoundException: user doesn't exist
        """
        user = await self._accounts.get_by_id(user_id)
        if not user:
            raise _user_not_found()

        workout_count = await self._workouts_collection.count_documents({"userId": user["_id"]})
        return {**serialize_account(user), "workoutCount": workout_count}

    async def update_role(self, user_id: str, role: str) -> Dict[str, Any]:
        """
        Change a user's role.

        Raises:
            BadRequestException: role not user/admin
            NotFoundException: user doesn't exist
        """
        if role not in ROLES:
            raise BadRequestException(
                message='Invalid role. Must be "user" or "admin"',
                code="INVALID_ROLE"
            )

        user = await self._update_user(user_id, {"role": role})
        logger.info(f"Role of user {user_id} set to {role}")
        return user

    async def set_suspended(self, user_id: str, suspended: bool) -> Dict[str, Any]:
        """
        Suspend or reinstate a user.

        Raises:
            NotFoundException: user doesn't exist
        """
        user = await self._update_user(user_id, {"suspended": bool(suspended)})
        logger.info(f"User {user_id} suspended={bool(suspended)}")
        return user

    async def delete_user(self, admin_id: str, user_id: str) -> Dict[str, int]:
        """
        Delete another user and their data.

        Raises:
            BadRequestException: admin targeting their own account
            NotFoundException: user doesn't exist
        """
        if str(admin_id) == str(user_id):
            raise BadRequestException(
                message="Cannot delete your own account",
                code="CANNOT_DELETE_SELF"
            )

        user = await self._accounts.get_by_id(user_id)
        if not user:
            raise _user_not_found()

        result = await self._accounts.delete_account_data(user["_id"])
        logger.info(f"Admin {admin_id} deleted user {user_id}")
        return result

    async def _update_user(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        oid = to_object_id(user_id)
        if oid is None:
            raise _user_not_found()

        user = await self._users_collection.find_one_and_update(
            {"_id": oid},
            {"$set": {**changes, "updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        if not user:
            raise _user_not_found()

        return serialize_account(user)

    def _format_top_user(self, entry: dict) -> Dict[str, Any]:
        user = entry.get("user", {})
        return {
            "userId": str(entry["_id"]),
            "workoutCount": entry["workoutCount"],
            "firstName": user.get("firstName"),
            "lastName": user.get("lastName"),
            "email": user.get("email"),
        }
