"""
FastAPI dependencies for FitTrack.

Provides dependency injection for all services.
"""

from datetime import timedelta
from typing import Annotated, FrozenSet, Optional

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import JWTTokenIssuer, TokenIssuer, TokenPurpose
from common.utils.password import PasswordHasher
from fittrack.config import Settings
from fittrack.middleware.auth import AuthMiddleware
from fittrack.middleware.rate_limit import (
    DisabledRateLimiter,
    MemoryRateLimiter,
    RateLimiter,
    enforce_rate_limit,
)
from fittrack.services.admin.admin_service import AdminService
from fittrack.services.auth.auth_service import AuthService
from fittrack.services.email.email_service import EmailService
from fittrack.services.measurement.measurement_service import MeasurementService
from fittrack.services.user.account_service import AccountService
from fittrack.services.user.stats_service import WorkoutStatsService
from fittrack.services.workout.workout_service import WorkoutService

# ─────────────────────────────────────────────────────────────────
# Service instances (initialized at startup)
# ─────────────────────────────────────────────────────────────────

# Auth
_password_hasher: Optional[PasswordHasher] = None
_token_issuer: Optional[TokenIssuer] = None
_email_service: Optional[EmailService] = None
_auth_service: Optional[AuthService] = None
_auth_middleware: Optional[AuthMiddleware] = None
_auth_rate_limiter: Optional[RateLimiter] = None
_trusted_proxies: FrozenSet[str] = frozenset()

# User
_account_service: Optional[AccountService] = None
_stats_service: Optional[WorkoutStatsService] = None

# Tracking
_workout_service: Optional[WorkoutService] = None
_measurement_service: Optional[MeasurementService] = None

# Admin
_admin_service: Optional[AdminService] = None


# ─────────────────────────────────────────────────────────────────
# Initialization
# ─────────────────────────────────────────────────────────────────

def build_token_issuer(settings: Settings) -> JWTTokenIssuer:
    """Create the token issuer from configured secrets and lifetimes."""
    return JWTTokenIssuer(
        secrets={
            TokenPurpose.ACCESS: settings.JWT_SECRET,
            TokenPurpose.REFRESH: settings.JWT_REFRESH_SECRET,
            TokenPurpose.PASSWORD_RESET: settings.get_reset_secret(),
        },
        algorithm=settings.JWT_ALGORITHM,
        ttls={
            TokenPurpose.ACCESS: timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
            TokenPurpose.REFRESH: timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS),
            TokenPurpose.PASSWORD_RESET: timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES),
        },
    )


def init_auth_services(db: AsyncIOMotorDatabase, settings: Settings) -> None:
    """Initialize hashing, tokens, email delivery, and the access guard."""
    global _password_hasher, _token_issuer, _email_service
    global _auth_service, _auth_middleware, _auth_rate_limiter, _account_service
    global _trusted_proxies

    _password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    _token_issuer = build_token_issuer(settings)
    _account_service = AccountService(db, _password_hasher)

    _email_service = EmailService(
        mode=settings.EMAIL_MODE,
        from_email=settings.SMTP_FROM_EMAIL,
        from_name=settings.SMTP_FROM_NAME,
        frontend_url=settings.FRONTEND_URL,
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
        smtp_user=settings.SMTP_USER,
        smtp_password=settings.SMTP_PASSWORD,
    )

    _auth_service = AuthService(
        account_service=_account_service,
        password_hasher=_password_hasher,
        token_issuer=_token_issuer,
        reset_token_sender=_email_service.send_reset_token,
    )
    _auth_middleware = AuthMiddleware(_token_issuer, _account_service)
    _trusted_proxies = settings.get_trusted_proxies()

    if settings.RATE_LIMIT_ENABLED:
        _auth_rate_limiter = MemoryRateLimiter(
            max_requests=settings.RATE_LIMIT_AUTH_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_AUTH_WINDOW_SECONDS,
        )
    else:
        _auth_rate_limiter = DisabledRateLimiter()


def init_user_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize profile statistics (accounts are created with auth)."""
    global _stats_service
    _stats_service = WorkoutStatsService(db)


def init_tracking_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize workout and measurement services."""
    global _workout_service, _measurement_service
    _workout_service = WorkoutService(db)
    _measurement_service = MeasurementService(db)


def init_admin_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize admin services."""
    global _admin_service
    _admin_service = AdminService(db, get_account_service())


def init_all_services(db: AsyncIOMotorDatabase, settings: Settings) -> None:
    """
    Initialize all services at application startup.

    Args:
        db: Main MongoDB database connection
        settings: Application settings
    """
    init_auth_services(db, settings)
    init_user_services(db)
    init_tracking_services(db)
    init_admin_services(db)


# ─────────────────────────────────────────────────────────────────
# Auth getters
# ─────────────────────────────────────────────────────────────────

def get_auth_service() -> AuthService:
    """Get auth service instance."""
    if _auth_service is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_service


def get_auth_middleware() -> AuthMiddleware:
    """Get auth middleware instance."""
    if _auth_middleware is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_middleware


def get_auth_rate_limiter() -> RateLimiter:
    """Get the limiter guarding auth routes."""
    if _auth_rate_limiter is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_rate_limiter


async def require_auth(
    request: Request,
    auth_middleware: Annotated[AuthMiddleware, Depends(get_auth_middleware)]
) -> dict:
    """Dependency that requires authentication."""
    return await auth_middleware.require_auth(request)


async def require_admin(
    request: Request,
    auth_middleware: Annotated[AuthMiddleware, Depends(get_auth_middleware)]
) -> dict:
    """Dependency that requires an authenticated admin."""
    return await auth_middleware.require_admin(request)


def auth_rate_limit(
    request: Request,
    limiter: Annotated[RateLimiter, Depends(get_auth_rate_limiter)]
) -> None:
    """Dependency that throttles auth attempts per client."""
    enforce_rate_limit(limiter, request, scope="auth", trusted_proxies=_trusted_proxies)


# ─────────────────────────────────────────────────────────────────
# User getters
# ─────────────────────────────────────────────────────────────────

def get_account_service() -> AccountService:
    """Get account service instance."""
    if _account_service is None:
        raise RuntimeError("Auth services not initialized.")
    return _account_service


def get_stats_service() -> WorkoutStatsService:
    """Get workout stats service instance."""
    if _stats_service is None:
        raise RuntimeError("User services not initialized.")
    return _stats_service


# ─────────────────────────────────────────────────────────────────
# Tracking getters
# ─────────────────────────────────────────────────────────────────

def get_workout_service() -> WorkoutService:
    """Get workout service instance."""
    if _workout_service is None:
        raise RuntimeError("Tracking services not initialized.")
    return _workout_service


def get_measurement_service() -> MeasurementService:
    """Get measurement service instance."""
    if _measurement_service is None:
        raise RuntimeError("Tracking services not initialized.")
    return _measurement_service


# ─────────────────────────────────────────────────────────────────
# Admin getters
# ─────────────────────────────────────────────────────────────────

def get_admin_service() -> AdminService:
    """Get admin service instance."""
    if _admin_service is None:
        raise RuntimeError("Admin services not initialized.")
    return _admin_service
