# app/core/config.py
from __future__ import annotations

"""
# Creator Studio — Centralized Configuration (Pydantic v2)

Single `settings` object with strongly-typed, environment-driven config.

## Goals
- Safe defaults for local/dev; explicit where prod needs secrets.
- Creator-policy defaults live here so the pipeline has a documented
  fallback when the `creator_settings` row has never been written.
- Optional external systems (Redis) so imports never crash in dev.

## Usage
    from app.core.config import settings
"""

import logging
from decimal import Decimal
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)
load_dotenv()  # harmless in prod; convenient in dev


# ─────────────────────────────────────────────────────────────
# Small helpers
# ─────────────────────────────────────────────────────────────
def _split_csv(v: str | None) -> list[str]:
    """Split a comma-separated string into a trimmed list (empty-safe)."""
    if not v:
        return []
    return [s.strip() for s in str(v).split(",") if s and s.strip()]


# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────
class Settings(BaseSettings):
    """
    Global application settings sourced from environment.

    Security:
        - Explicit secret for JWT verification; issuer/audience optional.

    Creator policy:
        - `CREATOR_*` values seed `CreatorPolicy` whenever the singleton
          `creator_settings` row is absent.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # don't crash on unknown keys
    )

    # ── App meta ──────────────────────────────────────────────
    PROJECT_NAME: str = "Creator Studio API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENV: Literal["development", "staging", "production", "test"] = "development"
    ENABLE_DOCS: bool = True

    # ── Security / JWT ────────────────────────────────────────
    JWT_SECRET_KEY: SecretStr = Field(...)
    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = "HS256"
    JWT_ISSUER: Optional[str] = None
    JWT_AUDIENCE: Optional[str] = None

    # ── Redis / Rate limiting ─────────────────────────────────
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_ENABLED: bool = True
    DEFAULT_RATE_LIMIT: Optional[str] = None  # e.g., "200/minute"
    RATELIMIT_STORAGE_URI: Optional[str] = None  # read by app.core.limiter; memory:// when unset

    # ── Database (PostgreSQL) ─────────────────────────────────
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = Field(...)
    POSTGRES_DB: str = "creator_studio"
    DATABASE_URL_OVERRIDE: Optional[str] = None  # full async DSN, e.g. sqlite+aiosqlite:///./dev.db
    DB_ECHO: bool = False

    # ── CORS ─────────────────────────────────────────────────
    FRONTEND_ORIGINS: Optional[str] = None  # CSV
    ALLOW_ORIGINS_REGEX: Optional[str] = None

    # ── Creator policy defaults ──────────────────────────────
    CREATOR_MIN_ACCOUNT_AGE_DAYS: int = Field(30, ge=0)
    CREATOR_MAX_ACCOUNT_AGE_DAYS: int = Field(90, ge=0)
    CREATOR_DEFAULT_DAILY_UPLOAD_LIMIT: int = Field(4, ge=0)
    CREATOR_DEFAULT_DAILY_STORAGE_LIMIT_GB: Decimal = Field(Decimal("8"), ge=0)
    CREATOR_MAX_STRIKES_BEFORE_SUSPENSION: int = Field(3, ge=1)
    CREATOR_AUTO_APPROVE_NEW_CREATORS: bool = False
    CREATOR_SYSTEM_ENABLED: bool = True

    # ── Publisher ─────────────────────────────────────────────
    PUBLISH_MAX_DEDUP_ATTEMPTS: int = Field(100, ge=1, le=10_000)

    # ── Idempotency ───────────────────────────────────────────
    IDEMPOTENCY_TTL_SECONDS: int = Field(600, ge=1)

    # ── Validators / normalizers ──────────────────────────────
    @field_validator("FRONTEND_ORIGINS", mode="before")
    @classmethod
    def _normalize_frontend_csv(cls, v):
        return None if v is None else ",".join(_split_csv(str(v)))

    @model_validator(mode="after")
    def _check_age_window(self) -> "Settings":
        if self.CREATOR_MIN_ACCOUNT_AGE_DAYS > self.CREATOR_MAX_ACCOUNT_AGE_DAYS:
            raise ValueError("CREATOR_MIN_ACCOUNT_AGE_DAYS must not exceed CREATOR_MAX_ACCOUNT_AGE_DAYS")
        return self

    # ── Derived / convenience properties ─────────────────────
    @property
    def DATABASE_URL(self) -> str:
        """Sync DSN (used by Alembic offline mode)."""
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        """Async SQLAlchemy DSN; `DATABASE_URL_OVERRIDE` wins when set."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")

    @property
    def frontend_origins_list(self) -> List[str]:
        return _split_csv(self.FRONTEND_ORIGINS)


# Singleton instance
settings = Settings()
