from functools import lru_cache
from typing import List, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "test", "development", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # Remote REST backend
    BACKEND_API_URL: str = "http://localhost:8080/api/v1"
    BACKEND_TIMEOUT: float = 10.0
    BACKEND_PAGE_SIZE: int = 100

    # Schedule rules
    SCHEDULE_FALLBACK_DURATION: int = 60  # minutes, legacy clamp
    SCHEDULE_MIN_DURATION: int = 30
    SCHEDULE_MAX_DURATION: int = 300
    SCHEDULE_MAX_SPAN_DAYS: int = 180

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("BACKEND_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
