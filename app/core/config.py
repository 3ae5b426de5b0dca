"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, JWT secret, upload paths)
- Validates configuration on startup
- Environment-specific settings
"""

from pathlib import Path
from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="profileshare",
        description="MongoDB database name"
    )

    # Authentication
    JWT_SECRET: str = Field(
        default="change-me-in-production",
        description="Secret used to verify access tokens"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Signing algorithm for access tokens"
    )
    JWT_EXPIRES_HOURS: int = Field(
        default=5,
        description="Lifetime of tokens issued by create_access_token"
    )

    # Uploads
    UPLOAD_ROOT: str = Field(
        default="uploads",
        description="Directory served at /uploads"
    )
    LOGO_SUBDIR: str = Field(
        default="profile-share",
        description="Sub-directory of UPLOAD_ROOT holding profile-share logos"
    )
    LOGO_MAX_BYTES: int = Field(
        default=5 * 1024 * 1024,
        description="Maximum logo size in bytes"
    )
    ALLOWED_LOGO_EXTENSIONS: list = Field(
        default=[".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"],
        description="Accepted logo file extensions (lowercase, with dot)"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: str, info: ValidationInfo) -> str:
        """Ensure JWT secret is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("JWT_SECRET must be changed in production environment")
        return v

    @field_validator("ALLOWED_LOGO_EXTENSIONS")
    @classmethod
    def normalize_extensions(cls, v: list) -> list:
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def logo_dir(self) -> Path:
        """Filesystem directory for uploaded logos."""
        return Path(self.UPLOAD_ROOT) / self.LOGO_SUBDIR

    @property
    def logo_url_prefix(self) -> str:
        """Public URL prefix under which logos are served."""
        return f"/uploads/{self.LOGO_SUBDIR}"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")

    if settings.LOGO_MAX_BYTES <= 0:
        errors.append("LOGO_MAX_BYTES must be positive")

    if not settings.ALLOWED_LOGO_EXTENSIONS:
        errors.append("ALLOWED_LOGO_EXTENSIONS must not be empty")

    # Production-specific validations
    if settings.is_production and settings.JWT_SECRET == "change-me-in-production":
        errors.append("JWT_SECRET is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
