"""
logface: one Logger interface, several swappable backends.

Provides a registry of named providers and uniform configuration:
- console: plain text or JSON lines (built in)
- structlog: structlog adapter (``import logface.providers.structlog``)
- loguru: loguru adapter (``import logface.providers.loguru``)

Design Pattern: Strategy Pattern for backends, Factory for construction.
Library: structlog + loguru backends, orjson for JSON, pydantic for config.
"""

import logging as _logging

from .config import LogConfig, new_log_config
from .exceptions import (
    ConfigLoadError,
    ConfigurationError,
    FatalExit,
    InvalidProviderError,
    LogFaceError,
    LoggerPanic,
    ProviderNotFoundError,
)
from .facade import (
    debug,
    debugf,
    error,
    errorf,
    fatal,
    fatalf,
    get_logger,
    get_logger_with_log_config,
    get_logger_with_map,
    get_logger_with_name,
    get_logger_with_provider,
    info,
    infof,
    panic,
    panicf,
    register_provider,
    set_global_logger,
    unregister_provider,
    warn,
    warnf,
)
from .factory import LogFactory, get_log_factory, new_default_logger, new_registry, reset_log_factory
from .logger import BaseLogger, Logger
from .options import (
    LoggerOptions,
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
from .providers import LoggerProvider
from .types import Field, LogLevel

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

DEBUG = LogLevel.DEBUG
INFO = LogLevel.INFO
WARN = LogLevel.WARN
ERROR = LogLevel.ERROR
FATAL = LogLevel.FATAL
PANIC = LogLevel.PANIC

__all__ = [
    "BaseLogger",
    "ConfigLoadError",
    "ConfigurationError",
    "DEBUG",
    "ERROR",
    "FATAL",
    "FatalExit",
    "Field",
    "INFO",
    "InvalidProviderError",
    "LogConfig",
    "LogFaceError",
    "LogFactory",
    "LogLevel",
    "Logger",
    "LoggerOptions",
    "LoggerPanic",
    "LoggerProvider",
    "Option",
    "PANIC",
    "ProviderNotFoundError",
    "WARN",
    "debug",
    "debugf",
    "error",
    "errorf",
    "fatal",
    "fatalf",
    "get_log_factory",
    "get_logger",
    "get_logger_with_log_config",
    "get_logger_with_map",
    "get_logger_with_name",
    "get_logger_with_provider",
    "info",
    "infof",
    "new_default_logger",
    "new_log_config",
    "new_registry",
    "panic",
    "panicf",
    "register_provider",
    "reset_log_factory",
    "set_global_logger",
    "unregister_provider",
    "warn",
    "warnf",
    "with_compress_logs",
    "with_config",
    "with_format",
    "with_level",
    "with_max_log_age",
    "with_max_log_files",
    "with_max_log_size",
    "with_max_message_size",
    "with_output_path",
]
