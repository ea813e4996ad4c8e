"""
FastAPI router for Measurement endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import list_response, success_response
from fittrack.dependencies import get_measurement_service, require_auth
from fittrack.schemas.measurement import MeasurementRequest
from fittrack.services.measurement.measurement_service import MeasurementService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/measurements", tags=["measurements"])


@router.get("")
async def list_measurements(
    user: Annotated[dict, Depends(require_auth)],
    measurement_service: Annotated[MeasurementService, Depends(get_measurement_service)],
):
    """Get all measurements, newest first."""
    measurements = await measurement_service.list_measurements(str(user["_id"]))
    return list_response(measurements)


@router.post("", status_code=201)
async def create_measurement(
    body: MeasurementRequest,
    user: Annotated[dict, Depends(require_auth)],
    measurement_service: Annotated[MeasurementService, Depends(get_measurement_service)],
):
    """Record a measurement."""
    measurement = await measurement_service.create_measurement(
        str(user["_id"]), body.model_dump(exclude_none=True)
    )
    return success_response(measurement, message="Measurement created successfully")


@router.get("/{measurement_id}")
async def get_measurement(
    measurement_id: str,
    user: Annotated[dict, Depends(require_auth)],
    measurement_service: Annotated[MeasurementService, Depends(get_measurement_service)],
):
    """Get a single measurement."""
    measurement = await measurement_service.get_measurement(str(user["_id"]), measurement_id)
    return success_response(measurement)


@router.put("/{measurement_id}")
async def update_measurement(
    measurement_id: str,
    body: MeasurementRequest,
    user: Annotated[dict, Depends(require_auth)],
    measurement_service: Annotated[MeasurementService, Depends(get_measurement_service)],
):
    """
    Update a measurement.

    Only provided fields will be updated (partial update).
    """
    measurement = await measurement_service.update_measurement(
        str(user["_id"]), measurement_id, body.model_dump(exclude_unset=True)
    )
    return success_response(measurement, message="Measurement updated successfully")


@router.delete("/{measurement_id}")
async def delete_measurement(
    measurement_id: str,
    user: Annotated[dict, Depends(require_auth)],
    measurement_service: Annotated[MeasurementService, Depends(get_measurement_service)],
):
    """Delete a measurement."""
    await measurement_service.delete_measurement(str(user["_id"]), measurement_id)
    return success_response(message="Measurement deleted successfully")
