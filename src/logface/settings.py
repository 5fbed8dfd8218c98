"""
Environment-driven logging configuration.

Reads ``LOGFACE_*`` variables (and ``.env``) into a ``LogConfig``::

    LOGFACE_PROVIDER=structlog
    LOGFACE_LEVEL=debug
    LOGFACE_OUTPUT_PATH=logs/app.log
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import DEFAULT_NAME, DEFAULT_PROVIDER, LogConfig
from .options import (
    DEFAULT_LEVEL,
    DEFAULT_MAX_LOG_AGE,
    DEFAULT_MAX_LOG_FILES,
    DEFAULT_MAX_LOG_SIZE,
    DEFAULT_MAX_MESSAGE_SIZE,
)
from .types import FORMAT_TEXT, OUTPUT_STDOUT, LogLevel


class LoggingSettings(BaseSettings):
    """Logging configuration loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="LOGFACE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    provider: str = Field(default=DEFAULT_PROVIDER, description="Provider name")
    name: str = Field(default=DEFAULT_NAME, description="Logger name")
    level: LogLevel = Field(default=DEFAULT_LEVEL, description="Log level")
    format: str = Field(default=FORMAT_TEXT, description="Output format (text, json)")
    output_path: str = Field(default=OUTPUT_STDOUT, description="stdout or a file path")
    max_log_size: int = Field(default=DEFAULT_MAX_LOG_SIZE, description="Max file size in MB")
    max_log_age: timedelta = Field(default=DEFAULT_MAX_LOG_AGE, description="Max backup age")
    max_log_files: int = Field(default=DEFAULT_MAX_LOG_FILES, description="Max backups kept")
    compress_logs: bool = Field(default=False, description="Gzip rotated backups")
    max_message_size: int = Field(default=DEFAULT_MAX_MESSAGE_SIZE, description="Max message size in KB")
    extra_config: Dict[str, Any] = Field(default_factory=dict, description="Provider-specific settings (JSON)")

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> LogLevel:
        return LogLevel.parse(value)

    def to_log_config(self) -> LogConfig:
        config = LogConfig(
            provider=self.provider,
            name=self.name,
            level=self.level,
            format=self.format,
            output_path=self.output_path,
            max_log_size=self.max_log_size,
            max_log_age=self.max_log_age,
            max_log_files=self.max_log_files,
            compress_logs=self.compress_logs,
            max_message_size=self.max_message_size,
            extra_config=dict(self.extra_config),
        )
        config.normalize()
        return config
