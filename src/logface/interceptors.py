"""
Interceptors for routing standard library logging into a facade Logger.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .logger import Logger
from .types import Field, LogLevel


def level_from_stdlib(levelno: int) -> LogLevel:
    """Map a stdlib level number; CRITICAL becomes ERROR so it never exits."""
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARN
    if levelno >= logging.INFO:
        return LogLevel.INFO
    return LogLevel.DEBUG


class FacadeHandler(logging.Handler):
    """
    Redirect standard library logging events to a facade Logger.
    This lets third-party logs pass through the same backend and sink.
    """

    def __init__(self, logger: Logger, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        # Skip our own diagnostics to avoid loops
        if record.name == "logface" or record.name.startswith("logface."):
            return
        try:
            msg = self.format(record)
            fields = [Field("source", record.name)]
            if record.exc_info and record.exc_info[1] is not None:
                fields.append(Field("error", record.exc_info[1]))
            emit = {
                LogLevel.DEBUG: self._logger.debug,
                LogLevel.INFO: self._logger.info,
                LogLevel.WARN: self._logger.warn,
                LogLevel.ERROR: self._logger.error,
            }[level_from_stdlib(record.levelno)]
            emit(msg, *fields)
        except Exception:
            self.handleError(record)


def install_stdlib_bridge(
    logger: Logger,
    *,
    level: int = logging.INFO,
    loggers: Optional[Iterable[str]] = None,
) -> FacadeHandler:
    """Attach a FacadeHandler to the root logger (or the named loggers).

    Existing handlers on those loggers are removed.
    """
    handler = FacadeHandler(logger)
    targets = [logging.getLogger(name) for name in loggers] if loggers else [logging.getLogger()]
    for target in targets:
        target.handlers = [handler]
        target.setLevel(level)
        if loggers:
            target.propagate = False
    return handler


def uninstall_stdlib_bridge(handler: FacadeHandler, loggers: Optional[Iterable[str]] = None) -> None:
    targets = [logging.getLogger(name) for name in loggers] if loggers else [logging.getLogger()]
    for target in targets:
        target.removeHandler(handler)
