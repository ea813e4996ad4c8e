"""
Account service for user record lifecycle.

Owns the `users` collection and the cascade that removes a user's workouts
and measurements when the account is closed.
"""

import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from common.utils.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from common.utils.password import PasswordHasher
from fittrack.constants import (
    DEFAULT_ACCOUNT_SETTINGS,
    FITNESS_LEVELS,
    GENDER_OPTIONS,
    GOALS_MAX_COUNT,
    PRIVACY_SETTINGS,
    UNIT_SYSTEMS,
)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = [
    "firstName",
    "lastName",
    "dateOfBirth",
    "gender",
    "fitnessLevel",
    "goals",
    "units",
    "privacy",
    "avatar",
]

# Profile fields an explicit null removes; the rest must always hold a value
NULLABLE_PROFILE_FIELDS = {"dateOfBirth", "gender", "avatar"}

# Never leaves the service layer
PRIVATE_FIELDS = {"passwordHash", "__v"}


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id, returning None for anything that isn't a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _as_datetime(value: Any) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return value


def serialize_account(user: dict) -> dict:
    """
    Convert a user document into its external representation.

    Drops the credential hash, stringifies ids, and adds fullName.
    """
    data = {k: v for k, v in user.items() if k not in PRIVATE_FIELDS and k != "_id"}
    data["id"] = str(user["_id"])
    data["fullName"] = f"{user.get('firstName', '')} {user.get('lastName', '')}".strip()
    return data


def clean_goals(goals: List[Any]) -> List[str]:
    """Trim goals, drop non-strings and blanks, keep the first 10."""
    cleaned = [g.strip() for g in goals if isinstance(g, str) and g.strip()]
    return cleaned[:GOALS_MAX_COUNT]


class AccountService:
    """
    Manages user accounts.
    """

    def __init__(self, db: AsyncIOMotorDatabase, password_hasher: PasswordHasher):
        """
        Initialize AccountService.

        Args:
            db: MongoDB database connection
            password_hasher: For password confirmation on account deletion
        """
        self._db = db
        self._password_hasher = password_hasher
        self._users_collection = db["users"]
        self._workouts_collection = db["workouts"]
        self._measurements_collection = db["measurements"]

    async def ensure_indexes(self) -> None:
        """Create the indexes the account invariants rely on."""
        await self._users_collection.create_index([("email", ASCENDING)], unique=True)
        await self._users_collection.create_index([("isActive", ASCENDING)])
        await self._workouts_collection.create_index(
            [("userId", ASCENDING), ("date", DESCENDING)]
        )
        await self._measurements_collection.create_index(
            [("userId", ASCENDING), ("date", DESCENDING)]
        )
        logger.info("Account indexes ensured")

    # ─────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────

    async def get_by_id(self, user_id: str) -> Optional[dict]:
        """
        Load user by MongoDB ID.

        Returns:
            User document (including passwordHash) or None
        """
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await self._users_collection.find_one({"_id": oid})

    async def get_by_email(self, email: str, active_only: bool = False) -> Optional[dict]:
        """
        Load user by email address (case-insensitive).

        Args:
            email: User's email address
            active_only: Only match accounts with isActive true
        """
        query: Dict[str, Any] = {"email": normalize_email(email)}
        if active_only:
            query["isActive"] = True
        return await self._users_collection.find_one(query)

    # ─────────────────────────────────────────────────────────────
    # Writes used by authentication
    # ─────────────────────────────────────────────────────────────

    async def create_account(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> dict:
        """
        Insert a new user document.

        Raises:
            DuplicateKeyError: email already taken (unique index)
        """
        now = datetime.now(timezone.utc)
        user_doc = {
            "email": normalize_email(email),
            "passwordHash": password_hash,
            "firstName": first_name.strip(),
            "lastName": last_name.strip(),
            **{k: (list(v) if isinstance(v, list) else v) for k, v in DEFAULT_ACCOUNT_SETTINGS.items()},
            "lastLogin": None,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._users_collection.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id

        logger.info(f"Account created: {result.inserted_id}")
        return user_doc

    async def update_last_login(self, user_id: str) -> datetime:
        """Stamp the login time and return it."""
        now = datetime.now(timezone.utc)
        await self._users_collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": {"lastLogin": now, "updatedAt": now}}
        )
        return now

    async def set_password_hash(self, user_id: str, password_hash: str) -> None:
        """Replace the stored credential hash."""
        now = datetime.now(timezone.utc)
        await self._users_collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": {"passwordHash": password_hash, "updatedAt": now}}
        )

    # ─────────────────────────────────────────────────────────────
    # Profile
    # ─────────────────────────────────────────────────────────────

    async def get_profile(self, user_id: str) -> dict:
        """
        Get a user's profile.

        Raises:
            NotFoundException: user doesn't exist
        """
        user = await self.get_by_id(user_id)
        if not user:
            raise NotFoundException(message="User not found", code="USER_NOT_FOUND")
        return serialize_account(user)

    async def update_profile(self, user_id: str, updates: Dict[str, Any]) -> dict:
        """
        Update whitelisted profile fields.

        Unknown fields and email are ignored.

        Raises:
            BadRequestException: null for a required field, or invalid enum value
            NotFoundException: user doesn't exist
        """
        changes = {k: v for k, v in updates.items() if k in PROFILE_FIELDS}
        for field, value in changes.items():
            if value is None and field not in NULLABLE_PROFILE_FIELDS:
                raise BadRequestException(
                    message=f"{field} cannot be null", code="VALIDATION_ERROR"
                )
        cleared = [k for k, v in changes.items() if v is None]
        changes = {k: v for k, v in changes.items() if v is not None}
        self._validate_profile(changes)

        if "goals" in changes:
            changes["goals"] = clean_goals(changes["goals"])
        if "dateOfBirth" in changes:
            changes["dateOfBirth"] = _as_datetime(changes["dateOfBirth"])
        if "gender" in changes:
            changes["gender"] = changes["gender"].lower()

        changes["updatedAt"] = datetime.now(timezone.utc)
        update: Dict[str, Any] = {"$set": changes}
        if cleared:
            update["$unset"] = {field: "" for field in cleared}

        user = await self._users_collection.find_one_and_update(
            {"_id": to_object_id(user_id)},
            update,
            return_document=ReturnDocument.AFTER,
        )
        if not user:
            raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

        logger.info(f"Profile updated for user {user_id}: {sorted(changes) + cleared}")
        return serialize_account(user)

    async def update_goals(self, user_id: str, goals: Any) -> List[str]:
        """
        Replace the user's goals list.

        Raises:
            BadRequestException: goals is not a list
            NotFoundException: user doesn't exist
        """
        if not isinstance(goals, list):
            raise BadRequestException(
                message="Goals must be an array",
                code="INVALID_GOALS_FORMAT"
            )

        cleaned = clean_goals(goals)
        user = await self._users_collection.find_one_and_update(
            {"_id": to_object_id(user_id)},
            {"$set": {"goals": cleaned, "updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        if not user:
            raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

        return user.get("goals", [])

    def _validate_profile(self, changes: Dict[str, Any]) -> None:
        """Validate enum-valued profile fields."""
        checks = [
            ("fitnessLevel", FITNESS_LEVELS, "INVALID_FITNESS_LEVEL", "Invalid fitness level"),
            ("units", UNIT_SYSTEMS, "INVALID_UNITS", "Invalid units"),
            ("privacy", PRIVACY_SETTINGS, "INVALID_PRIVACY", "Invalid privacy setting"),
        ]
        for field, allowed, code, message in checks:
            if field in changes and changes[field] not in allowed:
                raise BadRequestException(message=message, code=code)

        gender = changes.get("gender")
        if gender is not None and gender.lower() not in GENDER_OPTIONS:
            raise BadRequestException(message="Invalid gender", code="INVALID_GENDER")

        if changes.get("goals") is not None and not isinstance(changes["goals"], list):
            raise BadRequestException(
                message="Goals must be an array",
                code="INVALID_GOALS_FORMAT"
            )

    # ─────────────────────────────────────────────────────────────
    # Closure
    # ─────────────────────────────────────────────────────────────

    async def delete_account(self, user_id: str, password: Optional[str]) -> Dict[str, int]:
        """
        Delete the caller's account after confirming their password.

        Raises:
            BadRequestException: password missing
            UnauthorizedException: password wrong
            NotFoundException: user doesn't exist
        """
        if not password:
            raise BadRequestException(
                message="Password confirmation required to delete account",
                code="PASSWORD_REQUIRED"
            )

        user = await self.get_by_id(user_id)
        if not user:
            raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

        if not self._password_hasher.verify(password, user.get("passwordHash", "")):
            raise UnauthorizedException(message="Invalid password", code="INVALID_PASSWORD")

        return await self.delete_account_data(user["_id"])

    async def delete_account_data(self, user_id: Any) -> Dict[str, int]:
        """
        Cascade-delete a user: workouts, then measurements, then the account.

        The steps are not atomic. Any failure stops the cascade and propagates;
        the account document is removed last so the operation can be retried.

        Returns:
            Counts of deleted workouts, measurements, and users
        """
        oid = to_object_id(user_id)

        workouts = await self._workouts_collection.delete_many({"userId": oid})
        measurements = await self._measurements_collection.delete_many({"userId": oid})
        users = await self._users_collection.delete_one({"_id": oid})

        result = {
            "workoutsDeleted": workouts.deleted_count,
            "measurementsDeleted": measurements.deleted_count,
            "usersDeleted": users.deleted_count,
        }
        logger.info(f"Account {oid} deleted: {result}")
        return result

    # ─────────────────────────────────────────────────────────────
    # Search
    # ─────────────────────────────────────────────────────────────

    async def search_users(
        self,
        query: str,
        current_user_id: str,
        limit: int = 10,
    ) -> List[dict]:
        """
        Find public, active users by first or last name.

        Args:
            query: Case-insensitive substring to match
            current_user_id: Excluded from results
            limit: Maximum number of results
        """
        pattern = {"$regex": re.escape(query.strip()), "$options": "i"}
        cursor = self._users_collection.find(
            {
                "_id": {"$ne": to_object_id(current_user_id)},
                "privacy": "public",
                "isActive": True,
                "$or": [{"firstName": pattern}, {"lastName": pattern}],
            },
            {"firstName": 1, "lastName": 1, "fitnessLevel": 1, "createdAt": 1},
        ).limit(limit)

        users = await cursor.to_list(length=limit)
        return [
            {
                "id": str(u["_id"]),
                "firstName": u.get("firstName"),
                "lastName": u.get("lastName"),
                "fitnessLevel": u.get("fitnessLevel"),
                "createdAt": u.get("createdAt"),
            }
            for u in users
        ]
