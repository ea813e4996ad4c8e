"""
Pydantic models for Measurement request validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from fittrack.constants import NOTES_MAX_LENGTH


class BodyMeasurements(BaseModel):
    """Circumference measurements."""
    chest: Optional[float] = Field(None, ge=0)
    waist: Optional[float] = Field(None, ge=0)
    hips: Optional[float] = Field(None, ge=0)
    biceps: Optional[float] = Field(None, ge=0)
    thighs: Optional[float] = Field(None, ge=0)
    neck: Optional[float] = Field(None, ge=0)


class MeasurementRequest(BaseModel):
    """
    Request body for creating or partially updating a measurement.

    An explicit null clears an optional field on update; date is required.
    """
    date: Optional[datetime] = None
    weight: Optional[float] = Field(None, ge=20, le=1000)
    bodyFat: Optional[float] = Field(None, ge=0, le=100)
    muscleMass: Optional[float] = Field(None, ge=0)
    measurements: Optional[BodyMeasurements] = None
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)

    @field_validator("date")
    @classmethod
    def reject_null_date(cls, v):
        if v is None:
            raise ValueError("Date cannot be null")
        return v
