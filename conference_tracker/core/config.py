"""
Application configuration
Settings are read from the environment (and `.env`) once at startup
"""
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ===== Application =====
    APP_NAME: str = "ConferenceTracker"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Only kept as an example of a secret value; nothing reads it functionally
    SECRET_MESSAGE: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SECRET_MESSAGE", "SecretMessage"),
    )

    # ===== Server =====
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # ===== Database =====
    IN_MEMORY_DATABASE_NAME: str = "ConferenceTracker"
    DATABASE_URL: str | None = None

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        """The session factory needs an async driver"""
        if v is None:
            return v
        valid_prefixes = ("sqlite+aiosqlite://",)
        if not v.startswith(valid_prefixes):
            raise ValueError(f"DATABASE_URL must start with one of: {valid_prefixes}")
        return v

    @computed_field
    @property
    def database_url(self) -> str:
        """Effective database URL, a named shared in-memory store unless overridden"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"sqlite+aiosqlite:///file:{self.IN_MEMORY_DATABASE_NAME}"
            "?mode=memory&cache=shared&uri=true"
        )

    # ===== CORS =====
    CORS_POLICY_NAME: str = "_allowedOrigins"
    CORS_ORIGINS_STR: str = "http://pluralsight.com"

    @computed_field
    @property
    def CORS_ORIGINS(self) -> list[str]:
        """Parse CORS origins into a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS_STR.split(",") if origin.strip()]

    # ===== Error handling / transport security =====
    ERROR_PATH: str = "/Home/Error"
    HSTS_MAX_AGE: int = 30 * 24 * 60 * 60
    HSTS_INCLUDE_SUBDOMAINS: bool = False
    HSTS_PRELOAD: bool = False
    HSTS_EXCLUDED_HOSTS: list[str] = ["localhost", "127.0.0.1", "[::1]"]

    # ===== Static files =====
    STATIC_FILES_DIR: Path = PACKAGE_ROOT / "wwwroot"

    # ===== Identity =====
    JWT_SECRET_KEY: str = "your-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    EMAIL_CONFIRMATION_EXPIRE_HOURS: int = 24
    AUTH_COOKIE_NAME: str = ".ConferenceTracker.Identity"
    CONSENT_COOKIE_NAME: str = ".ConferenceTracker.Consent"

    # ===== Logging =====
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "console"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_using_default_secrets(self) -> bool:
        """Whether the insecure default signing key is still in use"""
        return self.JWT_SECRET_KEY == "your-secret-key-change-in-production"

    def validate_secrets(self) -> None:
        """Production must not run with the default signing key"""
        if self.is_production and self.is_using_default_secrets:
            raise ValueError("Production cannot use the default JWT_SECRET_KEY")


@lru_cache
def get_settings() -> Settings:
    """Settings read from the process environment"""
    return Settings()
