"""
Package-level entry points backed by the process-wide registry.

The ``debug`` ... ``panicf`` helpers log through the global logger, which
``set_global_logger`` can swap at any time.
"""

from __future__ import annotations

from typing import Any, Mapping

from .config import LogConfig
from .factory import get_log_factory
from .logger import Logger
from .options import Option
from .providers.base import LoggerProvider
from .types import Field


def get_logger() -> Logger:
    return get_log_factory().get_logger()


def get_logger_with_name(name: str) -> Logger:
    return get_log_factory().get_logger_with_name(name)


def get_logger_with_provider(name: str, provider: str, *opts: Option) -> Logger:
    return get_log_factory().get_logger_with_provider(name, provider, *opts)


def get_logger_with_map(name: str, config: Mapping[str, Any]) -> Logger:
    return get_log_factory().create_logger_with_config(name, config)


def get_logger_with_log_config(config: LogConfig) -> Logger:
    return get_log_factory().create_logger_with_log_config(config)


def set_global_logger(logger: Logger) -> None:
    get_log_factory().set_global_logger(logger)


def register_provider(name: str, provider: LoggerProvider) -> None:
    get_log_factory().register_provider(name, provider)


def unregister_provider(name: str) -> None:
    get_log_factory().unregister_provider(name)


# =============================================================================
# Global logging functions
# =============================================================================


def debug(msg: str, *fields: Field, **kv: Any) -> None:
    get_logger().debug(msg, *fields, **kv)


def debugf(format: str, *args: Any) -> None:
    get_logger().debugf(format, *args)


def info(msg: str, *fields: Field, **kv: Any) -> None:
    get_logger().info(msg, *fields, **kv)


def infof(format: str, *args: Any) -> None:
    get_logger().infof(format, *args)


def warn(msg: str, *fields: Field, **kv: Any) -> None:
    get_logger().warn(msg, *fields, **kv)


def warnf(format: str, *args: Any) -> None:
    get_logger().warnf(format, *args)


def error(msg: str, *fields: Field, **kv: Any) -> None:
    get_logger().error(msg, *fields, **kv)


def errorf(format: str, *args: Any) -> None:
    get_logger().errorf(format, *args)


def fatal(msg: str, *fields: Field, **kv: Any) -> None:
    """Log at FATAL, then exit with status 1."""
    get_logger().fatal(msg, *fields, **kv)


def fatalf(format: str, *args: Any) -> None:
    get_logger().fatalf(format, *args)


def panic(msg: str, *fields: Field, **kv: Any) -> None:
    """Log at PANIC, then raise LoggerPanic."""
    get_logger().panic(msg, *fields, **kv)


def panicf(format: str, *args: Any) -> None:
    get_logger().panicf(format, *args)
