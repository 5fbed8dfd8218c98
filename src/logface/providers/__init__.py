"""
Logger providers.

``console`` is always available. The structured backends register
themselves when imported::

    import logface.providers.structlog  # registers "structlog"
    import logface.providers.loguru  # registers "loguru"
"""

from .base import LoggerProvider, options_from_map
from .console import ConsoleLogger, ConsoleLoggerProvider, new_console_logger

__all__ = [
    "LoggerProvider",
    "options_from_map",
    "ConsoleLogger",
    "ConsoleLoggerProvider",
    "new_console_logger",
]
