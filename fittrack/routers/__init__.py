"""
FitTrack API Routers.

All routers are imported here for easy access.
"""

from fittrack.routers.auth import router as auth_router
from fittrack.routers.users import router as users_router
from fittrack.routers.workouts import router as workouts_router
from fittrack.routers.measurements import router as measurements_router
from fittrack.routers.admin import router as admin_router

__all__ = [
    "auth_router",
    "users_router",
    "workouts_router",
    "measurements_router",
    "admin_router",
]
