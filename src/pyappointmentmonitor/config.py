"""Settings loaded from the environment and an optional .env file."""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .const import DEFAULT_ENDPOINT
from .exceptions import ConfigError

ENV_PATH = Path.cwd() / ".env"

MIN_POLL_PERIOD = 10
MAX_POLL_PERIOD = 3600
MIN_BACKOFF_PERIOD = 60


class ApiConfig(BaseModel):
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = Field(default=30.0, gt=0)
    retry_count: int = Field(default=0, ge=0)


class MonitorConfig(BaseModel):
    poll_period: int = Field(default=30, ge=MIN_POLL_PERIOD, le=MAX_POLL_PERIOD)
    # None means "same as poll_period".
    backoff_period: int | None = Field(default=None, ge=MIN_BACKOFF_PERIOD)


class PublisherConfig(BaseModel):
    pushover_token: str | None = None

    @field_validator("pushover_token")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class LoggingConfig(BaseModel):
    log_level: str = "INFO"
    logs_dir: Path | None = None
    max_bytes: int = Field(default=5 * 1024 * 1024, gt=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseModel):
    api: ApiConfig = ApiConfig()
    monitor: MonitorConfig = MonitorConfig()
    publisher: PublisherConfig = PublisherConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``env`` (defaults to ``os.environ``).

    Raises ConfigError when a value is missing its expected type or bounds.
    """
    if env is None:
        env = os.environ

    def _optional_int(name: str) -> int | None:
        value = env.get(name)
        if value is None or not value.strip():
            return None
        return int(value)

    try:
        return Settings(
            api=ApiConfig(
                endpoint=env.get("AM_ENDPOINT") or DEFAULT_ENDPOINT,
                timeout=float(env.get("AM_TIMEOUT", "30")),
                retry_count=int(env.get("AM_RETRY_COUNT", "0")),
            ),
            monitor=MonitorConfig(
                poll_period=int(env.get("AM_POLL_PERIOD", "30")),
                backoff_period=_optional_int("AM_BACKOFF_PERIOD"),
            ),
            publisher=PublisherConfig(pushover_token=env.get("PUSHOVER_APP_TOKEN")),
            logging=LoggingConfig(
                log_level=env.get("AM_LOG_LEVEL", "INFO"),
                logs_dir=env.get("AM_LOG_DIR") or None,
            ),
        )
    except (PydanticValidationError, ValueError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


@lru_cache
def get_settings() -> Settings:
    """Load and cache settings, reading ``.env`` first when present."""
    if ENV_PATH.exists():
        load_dotenv(ENV_PATH, override=False)
    return load_settings()


__all__ = [
    "ApiConfig",
    "LoggingConfig",
    "MonitorConfig",
    "PublisherConfig",
    "Settings",
    "get_settings",
    "load_settings",
]
