"""Application configuration and settings management."""
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_ENV_FILE = Path(__file__).resolve().parent.parent / ".." / ".env"


class Settings(BaseSettings):
    """Server settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix="OVERTIME_",
        extra="ignore",
    )

    app_name: str = "Overtime Sync"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./overtime.db"

    # Security
    token_ttl_days: int = 30
    username_min_length: int = 3
    username_max_length: int = 20
    password_min_length: int = 6
    allowed_origins: Annotated[List[str], NoDecode] = ["*"]

    # Scheduler
    scheduler_enabled: bool = True
    purge_interval_seconds: int = 3600

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def token_ttl_seconds(self) -> int:
        return self.token_ttl_days * 24 * 60 * 60


class ClientSettings(BaseSettings):
    """Settings for the synchronizing client."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix="OVERTIME_CLIENT_",
        extra="ignore",
    )

    api_base_url: str = "http://127.0.0.1:8000"
    storage_path: Path = Path.home() / ".overtime-sync" / "storage.json"
    request_timeout: float = 10.0


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()


@lru_cache
def get_client_settings() -> ClientSettings:
    """Return memoized client settings instance."""

    return ClientSettings()
