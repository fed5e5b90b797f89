"""
storefront/core/config.py

Purpose: Application configuration

- Loads environment variables (and .env)
- Centralizes config values (gateway keys, store location, etc.)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal

from storefront.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Gateway credentials are checked by validate_settings() on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Razorpay
    RAZORPAY_KEY_ID: Optional[str] = Field(
        default=None,
        description="Razorpay public key identifier"
    )
    RAZORPAY_KEY_SECRET: Optional[str] = Field(
        default=None,
        description="Razorpay key secret (also signs payment callbacks)"
    )
    RAZORPAY_BASE_URL: str = Field(
        default="https://api.razorpay.com/v1",
        description="Razorpay REST API base URL"
    )
    GATEWAY_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout for a single gateway request"
    )
    GATEWAY_MAX_RETRIES: int = Field(
        default=1,
        description="Retries on transient gateway network failures"
    )

    # Storage
    STORE_BACKEND: Literal["file", "mongo"] = Field(
        default="file",
        description="Where user records and order ledgers are kept"
    )
    USERS_FILE: str = Field(
        default="users.json",
        description="JSON file backing the file store"
    )
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI (mongo backend only)"
    )
    MONGODB_DB_NAME: str = Field(
        default="storefront",
        description="MongoDB database name"
    )

    # Accounts
    MIN_PASSWORD_LENGTH: int = Field(
        default=8,
        description="Minimum accepted password length"
    )

    # Export
    EXPORT_FILENAME: str = Field(
        default="future_world_users.xlsx",
        description="Download name of the users spreadsheet"
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
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    STATIC_DIR: Optional[str] = Field(
        default="static",
        description="Directory holding index.html and frontend assets"
    )
    PORT: int = Field(
        default=3001,
        description="Port used when running the module directly"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def validate_settings(current: Optional[Settings] = None) -> bool:
    """
    Validates critical settings on application startup.
    Raises ConfigurationError if any required setting is missing or invalid.
    """
    current = current or settings
    errors = []

    if not current.RAZORPAY_KEY_ID:
        errors.append("RAZORPAY_KEY_ID is required")
    if not current.RAZORPAY_KEY_SECRET:
        errors.append("RAZORPAY_KEY_SECRET is required")

    if current.STORE_BACKEND == "file" and not current.USERS_FILE:
        errors.append("USERS_FILE is required for the file store")

    if current.MIN_PASSWORD_LENGTH < 1:
        errors.append("MIN_PASSWORD_LENGTH must be positive")

    if errors:
        raise ConfigurationError(f"Configuration validation failed: {', '.join(errors)}")

    return True
