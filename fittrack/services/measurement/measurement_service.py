"""
Measurement service.

Body weight and composition records, scoped to the owning account.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import BadRequestException, NotFoundException
from fittrack.services.user.account_service import to_object_id

logger = logging.getLogger(__name__)

MEASUREMENT_FIELDS = ["date", "weight", "bodyFat", "muscleMass", "measurements", "notes"]


def serialize_measurement(measurement: dict) -> dict:
    data = {k: v for k, v in measurement.items() if k not in ("_id", "userId", "__v")}
    data["id"] = str(measurement["_id"])
    data["userId"] = str(measurement["userId"])
    return data


def _not_found() -> NotFoundException:
    return NotFoundException(message="Measurement not found", code="MEASUREMENT_NOT_FOUND")


class MeasurementService:
    """
    Manages measurement records for their owners.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._measurements_collection = db["measurements"]

    def _owned(self, user_id: str, measurement_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(measurement_id)
        if oid is None:
            return None
        return {"_id": oid, "userId": to_object_id(user_id)}

    async def list_measurements(self, user_id: str) -> List[dict]:
        """Get all of the user's measurements, newest first."""
        cursor = self._measurements_collection.find({"userId": to_object_id(user_id)})
        cursor = cursor.sort("date", -1)

        measurements = await cursor.to_list(length=None)
        return [serialize_measurement(m) for m in measurements]

    async def get_measurement(self, user_id: str, measurement_id: str) -> dict:
        """
        Get a single measurement.

        Raises:
            NotFoundException: missing or owned by someone else
        """
        query = self._owned(user_id, measurement_id)
        if query is None:
            raise _not_found()

        measurement = await self._measurements_collection.find_one(query)
        if not measurement:
            raise _not_found()

        return serialize_measurement(measurement)

    async def create_measurement(self, user_id: str, data: Dict[str, Any]) -> dict:
        """Record a new measurement."""
        now = datetime.now(timezone.utc)
        doc = {k: v for k, v in data.items() if k in MEASUREMENT_FIELDS and v is not None}
        doc.setdefault("date", now)
        doc["userId"] = to_object_id(user_id)
        doc["createdAt"] = now
        doc["updatedAt"] = now

        result = await self._measurements_collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info(f"Measurement {result.inserted_id} created for user {user_id}")
        return serialize_measurement(doc)

    async def update_measurement(
        self,
        user_id: str,
        measurement_id: str,
        data: Dict[str, Any],
    ) -> dict:
        """
        Partially update a measurement; only supplied fields change.

        A None value removes an optional field. The date cannot be removed.

        Raises:
            BadRequestException: date set to None
            NotFoundException: missing or owned by someone else
        """
        query = self._owned(user_id, measurement_id)
        if query is None:
            raise _not_found()

        changes = {k: v for k, v in data.items() if k in MEASUREMENT_FIELDS}
        if "date" in changes and changes["date"] is None:
            raise BadRequestException(message="date cannot be null", code="VALIDATION_ERROR")

        cleared = [k for k, v in changes.items() if v is None]
        changes = {k: v for k, v in changes.items() if v is not None}
        changes["updatedAt"] = datetime.now(timezone.utc)
        update: Dict[str, Any] = {"$set": changes}
        if cleared:
            update["$unset"] = {field: "" for field in cleared}

        measurement = await self._measurements_collection.find_one_and_update(
            query,
            update,
            return_document=ReturnDocument.AFTER,
        )
        if not measurement:
            raise _not_found()

        return serialize_measurement(measurement)

    async def delete_measurement(self, user_id: str, measurement_id: str) -> None:
        """
        Delete a measurement.

        Raises:
            NotFoundException: missing or owned by someone else
        """
        query = self._owned(user_id, measurement_id)
        if query is None:
            raise _not_found()

        measurement = await self._measurements_collection.find_one_and_delete(query)
        if not measurement:
            raise _not_found()

        logger.info(f"Measurement {measurement_id} deleted for user {user_id}")
