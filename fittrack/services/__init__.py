"""
FitTrack Services.

All service classes organized by feature.
"""

from fittrack.services.user.account_service import AccountService
from fittrack.services.user.stats_service import WorkoutStatsService
from fittrack.services.auth.auth_service import AuthService
from fittrack.services.workout.workout_service import WorkoutService, compute_total_volume
from fittrack.services.measurement.measurement_service import MeasurementService
from fittrack.services.admin.admin_service import AdminService
from fittrack.services.email.email_service import EmailService

__all__ = [
    "AccountService",
    "WorkoutStatsService",
    "AuthService",
    "WorkoutService",
    "compute_total_volume",
    "MeasurementService",
    "AdminService",
    "EmailService",
]
