"""
FitTrack application settings.

Extends the base settings with FitTrack-specific configuration.
"""

from typing import FrozenSet, List, Optional

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """FitTrack-specific settings."""

    # ==========================================================================
    # Password & Reset Settings
    # ==========================================================================
    BCRYPT_ROUNDS: int = 12

    # Password reset token lifetime
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # ==========================================================================
    # Rate Limiting (auth endpoints)
    # ==========================================================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_AUTH_MAX_REQUESTS: int = 5
    RATE_LIMIT_AUTH_WINDOW_SECONDS: int = 15 * 60
    # Comma-separated proxy addresses whose X-Forwarded-For is honoured
    TRUSTED_PROXIES: str = ""

    # ==========================================================================
    # Email Settings (password reset delivery)
    # ==========================================================================
    EMAIL_MODE: str = "console"  # "console" or "smtp"
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: str = "noreply@fittrack.app"
    SMTP_FROM_NAME: str = "FitTrack"

    # ==========================================================================
    # Frontend URL (for email links)
    # ==========================================================================
    FRONTEND_URL: str = "http://localhost:3000"

    def get_trusted_proxies(self) -> FrozenSet[str]:
        return frozenset(p.strip() for p in self.TRUSTED_PROXIES.split(",") if p.strip())

    def missing_requirements(self) -> List[str]:
        errors = super().missing_requirements()
        if self.EMAIL_MODE == "smtp" and not self.SMTP_HOST:
            errors.append("SMTP_HOST is required when EMAIL_MODE=smtp")
        return errors


# Global settings instance
settings = Settings()
