"""
Provider abstraction: a named, stateless factory for one backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Mapping, Tuple, Type

from ..logger import Logger
from ..options import LoggerOptions, default_options
from ..types import LogLevel


class LoggerProvider(ABC):
    """Constructs Logger instances for one backend technology.

    Implementations must be safe to call concurrently and must not share
    mutable state between the loggers they return.
    """

    #: Format used when the caller does not choose one.
    default_format: str = "text"

    @abstractmethod
    def create(self, name: str) -> Logger:
        """Create a logger with built-in defaults."""
        ...

    @abstractmethod
    def create_with_config(self, name: str, config: Mapping[str, Any]) -> Logger:
        """Create a logger from a generic map.

        Missing or wrongly typed entries fall back to defaults; this never
        raises for malformed entries.
        """
        ...

    def create_with_options(self, name: str, options: LoggerOptions) -> Logger:
        """Create a logger from already-merged options."""
        return self.create_with_config(name, options.to_map())


def _typed(config: Mapping[str, Any], key: str, types: Tuple[Type, ...], default: Any) -> Any:
    value = config.get(key)
    # bool is an int subclass; it never counts as a number here
    if isinstance(value, bool) and bool not in types:
        return default
    if isinstance(value, types):
        return value
    return default


def options_from_map(config: Mapping[str, Any], *, format: str = "text") -> LoggerOptions:
    """Extract LoggerOptions from a generic map, per key, with type checks."""
    defaults = default_options(format)
    return LoggerOptions(
        level=_typed(config, "level", (LogLevel,), defaults.level),
        format=_typed(config, "format", (str,), defaults.format),
        output_path=_typed(config, "outputPath", (str,), defaults.output_path),
        max_log_size=_typed(config, "maxLogSize", (int,), defaults.max_log_size),
        max_log_age=_typed(config, "maxLogAge", (timedelta,), defaults.max_log_age),
        max_log_files=_typed(config, "maxLogFiles", (int,), defaults.max_log_files),
        compress_logs=_typed(config, "compressLogs", (bool,), defaults.compress_logs),
        max_message_size=_typed(config, "maxMessageSize", (int,), defaults.max_message_size),
        config=dict(config),
    )
