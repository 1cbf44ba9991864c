"""
Application configuration using Pydantic Settings.

Values are read from environment variables (or a local .env file).
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test"] = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./kpiboard.db"
    DATABASE_ECHO: bool = False

    # ===========================================
    # Persistence
    # ===========================================
    # Quiet period before a burst of changes is written back
    AUTOSAVE_DEBOUNCE_SECONDS: float = 1.0
    # Minimum time the "saving" indicator stays on
    SAVING_INDICATOR_SECONDS: float = 0.5

    # ===========================================
    # Scoring
    # ===========================================
    # Over-achievement cap for KPI ratios (1.0 = 100%, 1.5 = 150%)
    KPI_ACHIEVEMENT_CAP: float = Field(default=1.0, ge=1.0)

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == "local"

    @property
    def is_test(self) -> bool:
        return self.ENVIRONMENT == "test"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
