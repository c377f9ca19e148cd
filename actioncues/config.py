from functools import lru_cache
from typing import Any, Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application Configuration
    ACTIONCUES_VERSION: str = "v0.1.x"
    API_NAME: str = "ActionCues"
    API_SUMMARY: str = "A task list kept in sync with a hosted document collection"

    ACTIONCUES_API_KEY: str | None = None

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    CORS_ENABLED: bool = False
    CORS_ORIGINS: list[str] = ["*"]

    # Database Configuration
    REDIS_URL: str = "redis://localhost:6379"
    POSTGRES_URL: str = "postgresql://localhost:5432/actioncues"  # Assumes a local Postgres db named 'actioncues' exists

    TASK_STORE_BACKEND: Literal["postgres", "redis"] = "postgres"
    TASK_COLLECTION: str = "tasks"

    # Session Configuration
    MAX_SESSIONS: int = 1000
    SESSION_IDLE_TIMEOUT: float = 3600.0

    # OpenTelemetry Settings
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "actioncues"

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: Any):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    def validate_list_from_string(cls, v: Any):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",")]
        return v

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings():
    return Settings()
