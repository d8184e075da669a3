"""
Centralized configuration management.

Rules:
- All secrets (DB URLs, JWT keys, cache credentials) MUST come from
  environment variables or a secure secret store (never hardcoded)
- Centralize configuration in this module
- Do not spread os.getenv calls all over the codebase
- Do not log secrets or environment values
"""
from __future__ import annotations
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Postgres ---
    PG_HOST: str = Field(default="localhost", description="PostgreSQL host")
    PG_PORT: int = Field(default=5432, description="PostgreSQL port")
    PG_DB: str = Field(default="rentdesk", description="PostgreSQL database name")
    PG_USER: str = Field(default="rentdesk", description="PostgreSQL user")
    PG_PASSWORD: str = Field(..., description="PostgreSQL password")
    PG_SSLMODE: str = Field(default="prefer", description="PostgreSQL SSL mode (require/prefer/disable)")
    DATABASE_URL: str | None = Field(default=None, description="Full SQLAlchemy URL, overrides PG_* when set")
    SQL_ECHO: bool = Field(default=False, description="Echo SQL statements")

    # --- JWT / session cookie ---
    JWT_SECRET: str = Field(..., description="JWT signing secret key")
    JWT_EXP_MIN: int = Field(default=60 * 24 * 7, description="JWT expiration in minutes")
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT signing algorithm")
    AUTH_COOKIE_NAME: str = Field(default="accessToken", description="Name of the HTTP-only access token cookie")
    AUTH_COOKIE_SECURE: bool = Field(default=True, description="Send the access token cookie over HTTPS only")
    AUTH_COOKIE_SAMESITE: str = Field(default="lax", description="SameSite policy of the access token cookie")

    # --- Redis/Valkey ---
    REDIS_URL: str | None = Field(default=None, description="Redis URL for the settings cache (unset disables it)")
    SETTINGS_CACHE_TTL: int = Field(default=300, description="Settings cache TTL in seconds")

    # --- HTTP ---
    CORS_ORIGINS: str = Field(default="*", description="CORS allowed origins (comma-separated)")
    API_PREFIX: str = Field(default="/api/v1", description="Prefix for all API routes")
    LOG_LEVEL: str = Field(default="INFO", description="Log level for the rentdesk logger")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.PG_USER}:{self.PG_PASSWORD}"
            f"@{self.PG_HOST}:{self.PG_PORT}/{self.PG_DB}?sslmode={self.PG_SSLMODE}"
        )


settings = Settings()
