"""
Pydantic models for Workout request validation.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from fittrack.constants import (
    EXERCISE_NAME_MAX_LENGTH,
    EXERCISES_MAX_COUNT,
    NOTES_MAX_LENGTH,
    SETS_MAX_COUNT,
    WORKOUT_NAME_MAX_LENGTH,
)

ExerciseCategory = Literal["chest", "back", "shoulders", "arms", "legs", "core", "cardio", "other"]


class WorkoutSet(BaseModel):
    """Single set of an exercise."""
    reps: Optional[int] = Field(None, ge=0, le=1000)
    weight: Optional[float] = Field(None, ge=0, le=10000)
    duration: Optional[int] = Field(None, ge=0, le=86400, description="Seconds")
    restTime: Optional[int] = Field(None, ge=0, le=3600, description="Seconds")
    rpe: Optional[int] = Field(None, ge=1, le=10, description="Rate of perceived exertion")


class Exercise(BaseModel):
    """Exercise with its sets."""
    name: str = Field(..., min_length=1, max_length=EXERCISE_NAME_MAX_LENGTH)
    category: Optional[ExerciseCategory] = None
    sets: List[WorkoutSet] = Field(..., min_length=1, max_length=SETS_MAX_COUNT)
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)


class WorkoutRequest(BaseModel):
    """
    Request body for creating or replacing a workout.

    totalVolume is derived server-side and any client value is ignored.
    """
    name: str = Field(..., min_length=1, max_length=WORKOUT_NAME_MAX_LENGTH)
    date: Optional[datetime] = None
    exercises: List[Exercise] = Field(..., min_length=1, max_length=EXERCISES_MAX_COUNT)
    totalDuration: Optional[int] = Field(None, ge=0, description="Minutes")
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)

    def to_document(self) -> dict:
        """Fields to persist, without unset optionals."""
        return self.model_dump(exclude_none=True)
