# ABOUTME: Runtime settings loaded from the environment, optionally seeded from a .env file.
# ABOUTME: Validates the API credential and HTTP options once at startup.

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from weather_tui.weather_service import CURRENT_WEATHER_URL

DEFAULT_TIMEOUT_SECONDS = 10.0

_ENV_FIELDS = {
    "api_key": "API_KEY",
    "api_url": "WEATHER_API_URL",
    "timeout": "WEATHER_TIMEOUT",
    "log_file": "WEATHER_TUI_LOG_FILE",
    "log_level": "WEATHER_TUI_LOG_LEVEL",
}


class WeatherTuiError(Exception):
    """Base class for errors raised by weather_tui."""


class ConfigError(WeatherTuiError):
    """Settings are missing or invalid; the app cannot start."""


class Settings(BaseModel):
    """Settings read once at startup."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1)
    api_url: str = CURRENT_WEATHER_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    log_file: str | None = None
    log_level: str = "WARNING"

    @field_validator("api_key")
    @classmethod
    def strip_api_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("API_KEY must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_settings(env: dict[str, str] | None = None, dotenv_path: str | None = ".env") -> Settings:
    """Build Settings from `env` (defaults to os.environ after loading .env).

    Raises ConfigError naming the environment variables that failed validation.
    """
    if env is None:
        if dotenv_path:
            load_dotenv(dotenv_path)
        env = dict(os.environ)

    if not env.get("API_KEY", "").strip():
        raise ConfigError("API_KEY is not set; add it to the environment or a .env file")

    values = {field: env[name] for field, name in _ENV_FIELDS.items() if env.get(name)}
    try:
        return Settings(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{_ENV_FIELDS.get(str(err['loc'][0]), err['loc'][0])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"invalid configuration: {problems}") from e
