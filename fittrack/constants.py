"""
Domain constants shared by schemas and services.
"""

FITNESS_LEVELS = ["beginner", "intermediate", "advanced"]
UNIT_SYSTEMS = ["metric", "imperial"]
PRIVACY_SETTINGS = ["public", "private"]
GENDER_OPTIONS = ["male", "female", "other"]
ROLES = ["user", "admin"]

EXERCISE_CATEGORIES = [
    "chest",
    "back",
    "shoulders",
    "arms",
    "legs",
    "core",
    "cardio",
    "other",
]

# Validation limits
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128
NAME_MAX_LENGTH = 50
WORKOUT_NAME_MAX_LENGTH = 100
EXERCISE_NAME_MAX_LENGTH = 50
NOTES_MAX_LENGTH = 500
GOALS_MAX_COUNT = 10
GOAL_MAX_LENGTH = 100
SETS_MAX_COUNT = 50
EXERCISES_MAX_COUNT = 20

# Analytics windows (days)
RECENT_WINDOW_DAYS = 30
POPULAR_EXERCISES_LIMIT = 5

DEFAULT_ACCOUNT_SETTINGS = {
    "fitnessLevel": "beginner",
    "units": "metric",
    "privacy": "private",
    "goals": [],
    "isEmailVerified": False,
    "isActive": True,
    "suspended": False,
    "role": "user",
}
