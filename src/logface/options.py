"""
Functional options and the normalized option set every backend consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Any, Callable, Dict, Mapping

from .types import FORMAT_TEXT, OUTPUT_STDOUT, LogLevel

DEFAULT_LEVEL = LogLevel.INFO
DEFAULT_MAX_LOG_SIZE = 100  # MB
DEFAULT_MAX_LOG_AGE = timedelta(days=7)
DEFAULT_MAX_LOG_FILES = 10
DEFAULT_MAX_MESSAGE_SIZE = 0  # KB, 0 = unlimited


@dataclass
class LoggerOptions:
    """Settings a provider uses to build one logger."""

    level: LogLevel = DEFAULT_LEVEL
    format: str = FORMAT_TEXT
    output_path: str = OUTPUT_STDOUT
    max_log_size: int = DEFAULT_MAX_LOG_SIZE
    max_log_age: timedelta = DEFAULT_MAX_LOG_AGE
    max_log_files: int = DEFAULT_MAX_LOG_FILES
    compress_logs: bool = False
    max_message_size: int = DEFAULT_MAX_MESSAGE_SIZE
    config: Dict[str, Any] = field(default_factory=dict)

    @property
    def max_log_age_days(self) -> int:
        """Age in whole days, as handed to the rotating file sink."""
        return int(self.max_log_age.total_seconds() // 86400)

    def to_map(self) -> Dict[str, Any]:
        """Render the camelCase map accepted by ``LoggerProvider.create_with_config``."""
        mapping: Dict[str, Any] = dict(self.config)
        mapping.update(
            {
                "level": self.level,
                "format": self.format,
                "outputPath": self.output_path,
                "maxLogSize": self.max_log_size,
                "maxLogAge": self.max_log_age,
                "maxLogFiles": self.max_log_files,
                "compressLogs": self.compress_logs,
                "maxMessageSize": self.max_message_size,
            }
        )
        return mapping


Option = Callable[[LoggerOptions], None]


def default_options(format: str = FORMAT_TEXT) -> LoggerOptions:
    """Built-in defaults. Only the format differs between backends."""
    return LoggerOptions(format=format)


def apply_options(options: LoggerOptions, *opts: Option) -> LoggerOptions:
    """Apply ``opts`` left to right onto ``options`` in place and return it."""
    for opt in opts:
        opt(options)
    return options


def build_options(*opts: Option, format: str = FORMAT_TEXT) -> LoggerOptions:
    return apply_options(default_options(format), *opts)


def copy_options(options: LoggerOptions) -> LoggerOptions:
    return replace(options, config=dict(options.config))


# =============================================================================
# Option builders
# =============================================================================


def with_level(level: LogLevel) -> Option:
    def _apply(options: LoggerOptions) -> None:
        options.level = level

    return _apply


def with_format(format: str) -> Option:
    """Set the output format, ``"text"`` or ``"json"``."""

    def _apply(options: LoggerOptions) -> None:
        options.format = format

    return _apply


def with_output_path(path: str) -> Option:
    """Set the output target: ``"stdout"`` or a file path."""

    def _apply(options: LoggerOptions) -> None:
        options.output_path = path

    return _apply


def with_config(config: Mapping[str, Any]) -> Option:
    """Set the provider-specific extra configuration."""

    def _apply(options: LoggerOptions) -> None:
        options.config = dict(config) if config else {}

    return _apply


def with_max_log_size(size: int) -> Option:
    """Max size of one log file in MB before it is rotated."""

    def _apply(options: LoggerOptions) -> None:
        options.max_log_size = size

    return _apply


def with_max_log_age(age: timedelta) -> Option:
    def _apply(options: LoggerOptions) -> None:
        options.max_log_age = age

    return _apply


def with_max_log_files(files: int) -> Option:
    def _apply(options: LoggerOptions) -> None:
        options.max_log_files = files

    return _apply


def with_compress_logs(compress: bool) -> Option:
    def _apply(options: LoggerOptions) -> None:
        options.compress_logs = compress

    return _apply


def with_max_message_size(size: int) -> Option:
    """Max size of one message in KB; 0 disables truncation."""

    def _apply(options: LoggerOptions) -> None:
        options.max_message_size = size

    return _apply
