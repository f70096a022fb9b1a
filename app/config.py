"""Configuration management using Pydantic settings."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, PrivateAttr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_ENV_FILES: tuple[Path, ...] = (BASE_DIR / ".env",)
ENV_FILE_OVERRIDES: dict[str, tuple[Path, ...]] = {
    "testing": (BASE_DIR / ".env.test",),
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Flask settings
    SECRET_KEY: str = Field(default="dev-secret-key-change-in-production")
    FLASK_ENV: str = Field(default="development")
    DEBUG: bool = Field(default=True)

    # Database settings
    DATABASE_URL: str = Field(
        default=f"sqlite:///{BASE_DIR / 'rig_history.db'}",
        description="SQLAlchemy connection string for the local history store",
    )
    DB_POOL_ECHO: bool = Field(
        default=False,
        description="Log connection pool checkouts and checkins",
    )

    # Server settings
    WAITRESS_THREADS: int = Field(
        default=8, description="Worker threads for the production Waitress server"
    )

    # CORS settings
    CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:3000"], description="Allowed CORS origins"
    )

    # Domain defaults
    DEFAULT_DISPOSAL_REASON: str = Field(
        default="other",
        description="Disposal reason recorded when the caller does not supply one",
    )

    _engine_options_override: dict[str, Any] | None = PrivateAttr(default=None)

    @model_validator(mode="after")
    def configure_environment_defaults(self):
        """Apply environment-specific defaults after validation."""
        if self.FLASK_ENV == "production":
            self.DEBUG = False
        return self

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """SQLAlchemy database URI."""
        return self.DATABASE_URL

    @property
    def SQLALCHEMY_TRACK_MODIFICATIONS(self) -> bool:
        """Disable SQLAlchemy track modifications."""
        return False

    @property
    def SQLALCHEMY_ENGINE_OPTIONS(self) -> dict[str, Any]:
        """Engine options, overridable by tests that share an in-memory connection."""
        if self._engine_options_override is not None:
            return self._engine_options_override
        return {}

    def set_engine_options_override(self, options: dict[str, Any]) -> None:
        """Replace the engine options passed to Flask-SQLAlchemy."""
        self._engine_options_override = options

    @property
    def is_sqlite(self) -> bool:
        """Check whether the configured store is SQLite."""
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.FLASK_ENV == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings(_env_file=_resolve_env_files())


def _resolve_env_files() -> tuple[str, ...]:
    """Select environment files based on FLASK_ENV."""
    env = os.getenv("FLASK_ENV")
    candidate_paths: list[Path] = list(DEFAULT_ENV_FILES)

    override = ENV_FILE_OVERRIDES.get(env or "")
    if override:
        candidate_paths.extend(override)

    unique_paths = dict.fromkeys(candidate_paths)
    return tuple(str(path) for path in unique_paths)
