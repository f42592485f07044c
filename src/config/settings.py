"""
Runtime configuration.

Every field can be overridden with an environment variable prefixed by KNIGHT_PATH_,
e.g. KNIGHT_PATH_DATABASE_URL=postgresql+psycopg://... or KNIGHT_PATH_LOG_JSON=true.
A `.env` file in the working directory is read as well.
"""

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="KNIGHT_PATH_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    database_url: str = "sqlite:///./knight_path.db"
    database_echo: bool = False

    log_level: LogLevel = "INFO"
    log_json: bool = False

    # Deliveries of one message before it is moved to the dead-letter list
    queue_max_receive_count: int = Field(default=5, ge=1)
    # Seconds a received message stays hidden before it is redelivered without an ack
    queue_visibility_timeout_seconds: float = Field(default=30.0, gt=0)
    worker_batch_size: int = Field(default=10, ge=1)

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    return Settings()
