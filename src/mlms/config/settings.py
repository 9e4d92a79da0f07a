"""Application settings loaded from environment variables and .env."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection and pool configuration.

    Pool settings only apply to server databases (PostgreSQL). SQLite ignores
    them, see _engine_options in persistence/database.py.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_", env_file=".env", extra="ignore"
    )

    url: str = "sqlite+aiosqlite:///./mlms.db"
    echo: bool = False
    pool_pre_ping: bool = True
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 3600


class SecuritySettings(BaseSettings):
    """Token signing and password hashing configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SECURITY_", env_file=".env", extra="ignore"
    )

    # Hey future me - NEVER ship the default secret! Anyone who knows it can mint admin tokens.
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = 60
    # bcrypt cost factor. 10 matches the hashes already stored in production.
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    allowed_email_tlds: list[str] = [".com", ".edu", ".org", ".net"]

    @field_validator("allowed_email_tlds")
    @classmethod
    def _normalize_tlds(cls, value: list[str]) -> list[str]:
        normalized = []
        for tld in value:
            tld = tld.strip().lower()
            normalized.append(tld if tld.startswith(".") else f".{tld}")
        return normalized


class LoggingSettings(BaseSettings):
    """Logging output configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = "INFO"
    json_format: bool = False


class Settings(BaseSettings):
    """Top-level application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "mlms"
    debug: bool = False
    api_prefix: str = "/api"
    cors_origins: list[str] = ["*"]

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Cached so every Depends(get_settings) shares one instance. Tests bypass this by passing
# their own Settings into create_app().
@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
