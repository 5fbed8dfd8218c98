"""
Typed, user-facing logger configuration.

``LogConfig`` is the serialized layout external tooling may produce (JSON or
YAML, camelCase keys). It converts into the same option sequence the
functional-option path uses, so both paths build identical LoggerOptions.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Mapping

import orjson
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigLoadError
from .options import (
    DEFAULT_LEVEL,
    DEFAULT_MAX_LOG_AGE,
    DEFAULT_MAX_LOG_FILES,
    DEFAULT_MAX_LOG_SIZE,
    DEFAULT_MAX_MESSAGE_SIZE,
    Option,
    with_compress_logs,
    with_config,
    with_format,
    with_level,
    with_max_log_age,
    with_max_log_files,
    with_max_log_size,
    with_max_message_size,
    with_output_path,
)
from .types import FORMAT_JSON, FORMAT_TEXT, OUTPUT_STDOUT, LogLevel

DEFAULT_PROVIDER = "console"
DEFAULT_NAME = "app"


class LogConfig(BaseModel):
    """Unified configuration covering every provider."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    provider: str = Field(default=DEFAULT_PROVIDER, description="Provider name")
    name: str = Field(default=DEFAULT_NAME, description="Logger name")
    level: LogLevel = Field(default=DEFAULT_LEVEL, description="Minimum level emitted")
    format: str = Field(default=FORMAT_TEXT, description="Output format (text/json)")
    output_path: str = Field(default=OUTPUT_STDOUT, alias="outputPath", description="stdout or a file path")

    max_log_size: int = Field(default=DEFAULT_MAX_LOG_SIZE, alias="maxLogSize", description="Max file size in MB")
    max_log_age: timedelta = Field(default=DEFAULT_MAX_LOG_AGE, alias="maxLogAge", description="Max backup age")
    max_log_files: int = Field(default=DEFAULT_MAX_LOG_FILES, alias="maxLogFiles", description="Max backups kept")
    compress_logs: bool = Field(default=False, alias="compressLogs", description="Gzip rotated backups")
    max_message_size: int = Field(
        default=DEFAULT_MAX_MESSAGE_SIZE, alias="maxMessageSize", description="Max message size in KB"
    )

    extra_config: Dict[str, Any] = Field(
        default_factory=dict, alias="extraConfig", description="Provider-specific settings"
    )

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> LogLevel:
        return LogLevel.parse(value)

    @field_validator("extra_config", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    # ------------------------------------------------------------------
    # Fluent setters
    # ------------------------------------------------------------------

    def with_provider(self, provider: str) -> "LogConfig":
        self.provider = provider
        return self

    def with_name(self, name: str) -> "LogConfig":
        self.name = name
        return self

    def with_level(self, level: LogLevel) -> "LogConfig":
        self.level = level
        return self

    def with_format(self, format: str) -> "LogConfig":
        self.format = format
        return self

    def with_output_path(self, path: str) -> "LogConfig":
        self.output_path = path
        return self

    def with_max_log_size(self, size: int) -> "LogConfig":
        self.max_log_size = size
        return self

    def with_max_log_age(self, age: timedelta) -> "LogConfig":
        self.max_log_age = age
        return self

    def with_max_log_files(self, files: int) -> "LogConfig":
        self.max_log_files = files
        return self

    def with_compress_logs(self, compress: bool) -> "LogConfig":
        self.compress_logs = compress
        return self

    def with_max_message_size(self, size: int) -> "LogConfig":
        self.max_message_size = size
        return self

    def with_extra_config(self, key: str, value: Any) -> "LogConfig":
        self.extra_config[key] = value
        return self

    def with_extra_configs(self, configs: Mapping[str, Any]) -> "LogConfig":
        self.extra_config.update(configs)
        return self

    # ------------------------------------------------------------------
    # Normalization & conversion
    # ------------------------------------------------------------------

    def normalize(self) -> bool:
        """Repair empty or out-of-range values back to defaults.

        Idempotent and total: it never fails, so it is safe on partially
        populated or deserialized configs. Always returns True.
        """
        if not self.provider:
            self.provider = DEFAULT_PROVIDER
        if not self.name:
            self.name = DEFAULT_NAME
        if not self.output_path:
            self.output_path = OUTPUT_STDOUT
        if self.format not in (FORMAT_TEXT, FORMAT_JSON):
            self.format = FORMAT_TEXT
        if self.max_log_size <= 0:
            self.max_log_size = DEFAULT_MAX_LOG_SIZE
        if self.max_log_age <= timedelta(0):
            self.max_log_age = DEFAULT_MAX_LOG_AGE
        if self.max_log_files <= 0:
            self.max_log_files = DEFAULT_MAX_LOG_FILES
        return True

    validate_config = normalize

    def to_options(self) -> List[Option]:
        return [
            with_level(self.level),
            with_format(self.format),
            with_output_path(self.output_path),
            with_max_log_size(self.max_log_size),
            with_max_log_age(self.max_log_age),
            with_max_log_files(self.max_log_files),
            with_compress_logs(self.compress_logs),
            with_max_message_size(self.max_message_size),
            with_config(self.extra_config),
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Dump using the serialized (camelCase) layout."""
        data = self.model_dump(by_alias=True)
        data["level"] = self.level.label.lower()
        data["maxLogAge"] = self.max_log_age.total_seconds()
        return data

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, source: str = "<mapping>") -> "LogConfig":
        try:
            return cls.model_validate(dict(data))
        except (ValidationError, ValueError) as e:
            raise ConfigLoadError(source=source, reason=str(e)) from e

    @classmethod
    def from_json(cls, text: str | bytes, *, source: str = "<json>") -> "LogConfig":
        try:
            data = orjson.loads(text)
        except orjson.JSONDecodeError as e:
            raise ConfigLoadError(source=source, reason=str(e)) from e
        return cls._from_document(data, source)

    @classmethod
    def from_yaml(cls, text: str, *, source: str = "<yaml>") -> "LogConfig":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigLoadError(source=source, reason=str(e)) from e
        return cls._from_document(data, source)

    @classmethod
    def from_file(cls, path: str | Path) -> "LogConfig":
        """Load a ``.json``, ``.yaml`` or ``.yml`` file."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigLoadError(source=str(path), reason=str(e)) from e
        if path.suffix.lower() in (".yaml", ".yml"):
            return cls.from_yaml(text, source=str(path))
        return cls.from_json(text, source=str(path))

    @classmethod
    def _from_document(cls, data: Any, source: str) -> "LogConfig":
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigLoadError(source=source, reason="top-level value must be an object")
        return cls.from_mapping(data, source=source)


def new_log_config() -> LogConfig:
    """Create a LogConfig holding the defaults."""
    return LogConfig()
