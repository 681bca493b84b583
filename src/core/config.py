"""
Application settings.

Values are read from environment variables, and validated by pydantic.
"""

import os

from pydantic import BaseModel, ValidationError, field_validator

from src.core.exceptions import ConfigurationError

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings(BaseModel):
    """Knobs for the engine / session shell"""

    log_level: str = "WARNING"
    # After checkmate or a king capture, refuse any further selections until a new game is started.
    lock_on_game_over: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level {value!r}. Pick one from {','.join(LOG_LEVELS)}"
            )
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        try:
            return cls(
                log_level=os.getenv("CHESS_LOG_LEVEL", "WARNING"),
                lock_on_game_over=_env_flag("CHESS_LOCK_ON_GAME_OVER", "true"),
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e


def get_settings() -> Settings:
    return Settings.from_env()
