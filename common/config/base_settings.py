"""
Base settings shared by every app: MongoDB, token secrets, server and CORS.

Values are read from the environment (and `.env`) by pydantic-settings.
Apps subclass BaseAppSettings to add their own fields.

Example:
    from common.config import BaseAppSettings

    class Settings(BaseAppSettings):
        SMTP_HOST: Optional[str] = None

    settings = Settings()
    settings.validate_required()
"""

from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    """Common configuration; secrets have no defaults and are checked at startup."""

    # ==========================================================================
    # Database
    # ==========================================================================
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "fittrack"

    # ==========================================================================
    # Tokens (one secret per purpose)
    # ==========================================================================
    JWT_SECRET: Optional[str] = None
    JWT_REFRESH_SECRET: Optional[str] = None
    JWT_RESET_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # ==========================================================================
    # Server
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: str = "*"  # "*" or comma-separated origins
    CORS_ALLOW_CREDENTIALS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    @field_validator("ENVIRONMENT", "LOG_LEVEL")
    @classmethod
    def normalize_case(cls, v: str, info) -> str:
        v = v.strip()
        return v.upper() if info.field_name == "LOG_LEVEL" else v.lower()

    def get_cors_origins(self) -> List[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    def get_reset_secret(self) -> Optional[str]:
        """Reset tokens fall back to the access secret; the purpose claim still separates them."""
        return self.JWT_RESET_SECRET or self.JWT_SECRET

    def missing_requirements(self) -> List[str]:
        """Problems that must stop the app from starting."""
        errors = []
        if not self.JWT_SECRET:
            errors.append("JWT_SECRET is required")
        if not self.JWT_REFRESH_SECRET:
            errors.append("JWT_REFRESH_SECRET is required")
        if self.JWT_SECRET and self.JWT_SECRET == self.JWT_REFRESH_SECRET:
            errors.append("JWT_SECRET and JWT_REFRESH_SECRET must be different")
        return errors

    def validate_required(self) -> None:
        """
        Raises:
            ValueError: listing every configuration problem at once
        """
        errors = self.missing_requirements()
        if errors:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(errors))
