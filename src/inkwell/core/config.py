"""
Foundation settings for the Inkwell blog backend.
"""

from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class InkwellSettings(BaseSettings):
    """
    Process-wide settings, read from the environment and an optional `.env`.

    Example:
        >>> settings = InkwellSettings(ADMIN_USER="me", ADMIN_PASSWORD="pw")
        >>> settings.AUTH_COOKIE_NAME
        'auth'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    # --- Basic Environment ---
    DEBUG: bool = True
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # --- Database ---
    DATABASE_URL: str = "sqlite+aiosqlite:///inkwell.db"
    DB_ECHO: bool = False

    # --- Administrator credentials (checked at login, never hashed) ---
    ADMIN_USER: str = ""
    ADMIN_PASSWORD: str = ""

    # --- Sessions ---
    AUTH_COOKIE_NAME: str = "auth"
    SESSION_LOCK_TIMEOUT: float = 1.0

    # --- Listings ---
    DEFAULT_LIST_PER_PAGE: int = 10
    MAX_API_LIMIT: int = 100
    MIN_LIST_PER_PAGE: int = 1

    # --- Media & dashboard ---
    MEDIA_ROOT: str = "static/media"
    STATS_DAYS: int = 3
    CONTACT_PREVIEW_LIMIT: int = 10

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None
    LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_FILE_BACKUPS: int = 5
    ENABLE_REQUEST_ID: bool = True

    @model_validator(mode="after")
    def validate_security(self) -> "InkwellSettings":
        """Ensures production doesn't ship without an admin password."""
        if not self.DEBUG and not self.ADMIN_PASSWORD:
            raise ValueError("ADMIN_PASSWORD is mandatory in production mode.")
        return self

    def is_development(self) -> bool:
        return self.DEBUG or self.ENVIRONMENT == "development"


# Singleton instance for core use
inkwell_settings = InkwellSettings()
