"""
The ``Logger`` contract and the state every backend shares.

``BaseLogger`` owns level gating, field accumulation, context binding and
message-size limiting. Backends implement ``_emit`` (render and write one
entry) and ``sync``.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, Tuple

from .exceptions import FatalExit, LoggerPanic
from .types import Field, LogLevel

ELLIPSIS = "..."


class Logger(ABC):
    """Unified logging interface implemented by every backend."""

    # -- emit ---------------------------------------------------------------

    @abstractmethod
    def debug(self, msg: str, *fields: Field, **kv: Any) -> None: ...

    @abstractmethod
    def info(self, msg: str, *fields: Field, **kv: Any) -> None: ...

    @abstractmethod
    def warn(self, msg: str, *fields: Field, **kv: Any) -> None: ...

    @abstractmethod
    def error(self, msg: str, *fields: Field, **kv: Any) -> None: ...

    @abstractmethod
    def fatal(self, msg: str, *fields: Field, **kv: Any) -> None:
        """Write the entry, then raise ``FatalExit`` (exit status 1)."""
        ...

    @abstractmethod
    def panic(self, msg: str, *fields: Field, **kv: Any) -> None:
        """Write the entry, then raise ``LoggerPanic``."""
        ...

    @abstractmethod
    def debugf(self, format: str, *args: Any) -> None: ...

    @abstractmethod
    def infof(self, format: str, *args: Any) -> None: ...

    @abstractmethod
    def warnf(self, format: str, *args: Any) -> None: ...

    @abstractmethod
    def errorf(self, format: str, *args: Any) -> None: ...

    @abstractmethod
    def fatalf(self, format: str, *args: Any) -> None: ...

    @abstractmethod
    def panicf(self, format: str, *args: Any) -> None: ...

    # -- derivation ---------------------------------------------------------

    @abstractmethod
    def with_fields(self, *fields: Field, **kv: Any) -> "Logger": ...

    @abstractmethod
    def with_field(self, key: str, value: Any) -> "Logger": ...

    @abstractmethod
    def with_context(self, ctx: Any) -> "Logger": ...

    @abstractmethod
    def with_error(self, err: BaseException) -> "Logger": ...

    @abstractmethod
    def with_time(self, t: datetime) -> "Logger": ...

    # -- level --------------------------------------------------------------

    @abstractmethod
    def set_level(self, level: LogLevel) -> None: ...

    @abstractmethod
    def get_level(self) -> LogLevel: ...

    @abstractmethod
    def is_debug_enabled(self) -> bool: ...

    @abstractmethod
    def is_info_enabled(self) -> bool: ...

    @abstractmethod
    def is_warn_enabled(self) -> bool: ...

    @abstractmethod
    def is_error_enabled(self) -> bool: ...

    @abstractmethod
    def is_fatal_enabled(self) -> bool: ...

    @abstractmethod
    def is_panic_enabled(self) -> bool: ...

    @abstractmethod
    def sync(self) -> None:
        """Flush buffered output. Raises ``OSError`` on a genuine flush failure."""
        ...

    def close(self) -> None:
        """Release the output resources. Loggers derived from this one share them."""

    def warning(self, msg: str, *fields: Field, **kv: Any) -> None:
        self.warn(msg, *fields, **kv)


def truncate_message(msg: str, max_kb: int) -> str:
    """Cut ``msg`` to ``max_kb`` KiB of UTF-8, ending with an ellipsis.

    Byte-oriented: a multibyte character split at the boundary is dropped.
    """
    if max_kb <= 0:
        return msg
    limit = max_kb * 1024
    encoded = msg.encode("utf-8")
    if len(encoded) <= limit:
        return msg
    return encoded[: limit - len(ELLIPSIS)].decode("utf-8", errors="ignore") + ELLIPSIS


def _collect(fields: Tuple[Field, ...], kv: dict) -> Tuple[Field, ...]:
    if kv:
        return fields + tuple(Field(k, v) for k, v in kv.items())
    return fields


def _sprintf(format: str, args: Tuple[Any, ...]) -> str:
    if not args:
        return format
    return format % args


class BaseLogger(Logger):
    """Shared implementation of the Logger contract.

    Derived loggers are shallow copies: they share the backend's sink and
    carry their own level, fields and context.
    """

    def __init__(
        self,
        name: str,
        *,
        level: LogLevel = LogLevel.INFO,
        max_message_size: int = 0,
    ) -> None:
        self._name = name
        self._level = LogLevel(level)
        self._fields: Tuple[Field, ...] = ()
        self._ctx: Any = None
        self._max_message_size = max_message_size

    @property
    def name(self) -> str:
        return self._name

    @property
    def fields(self) -> Tuple[Field, ...]:
        return self._fields

    @property
    def context(self) -> Any:
        return self._ctx

    @property
    def max_message_size(self) -> int:
        return self._max_message_size

    # -- backend hooks ------------------------------------------------------

    @abstractmethod
    def _emit(self, level: LogLevel, msg: str, fields: Tuple[Field, ...]) -> str:
        """Render and write one entry; ``fields`` holds only call-site fields.

        Returns the text a PANIC entry should carry.
        """
        ...

    def _after_fatal(self) -> None:
        """Flush before the process exits."""
        try:
            self.sync()
        except (OSError, ValueError):
            pass

    def _limit(self, msg: str) -> str:
        return truncate_message(msg, self._max_message_size)

    # -- emit ---------------------------------------------------------------

    def _log(self, level: LogLevel, msg: str, fields: Tuple[Field, ...]) -> None:
        if self._level > level:
            return
        rendered = self._emit(level, msg, fields)
        if level == LogLevel.FATAL:
            self._after_fatal()
            raise FatalExit(rendered)
        if level == LogLevel.PANIC:
            raise LoggerPanic(rendered)

    def debug(self, msg: str, *fields: Field, **kv: Any) -> None:
        self._log(LogLevel.DEBUG, msg, _collect(fields, kv))

    def info(self, msg: str, *fields: Field, **kv: Any) -> None:
        self._log(LogLevel.INFO, msg, _collect(fields, kv))

    def warn(self, msg: str, *fields: Field, **kv: Any) -> None:
        self._log(LogLevel.WARN, msg, _collect(fields, kv))

    def error(self, msg: str, *fields: Field, **kv: Any) -> None:
        self._log(LogLevel.ERROR, msg, _collect(fields, kv))

    def fatal(self, msg: str, *fields: Field, **kv: Any) -> None:
        self._log(LogLevel.FATAL, msg, _collect(fields, kv))

    def panic(self, msg: str, *fields: Field, **kv: Any) -> None:
        self._log(LogLevel.PANIC, msg, _collect(fields, kv))

    def _logf(self, level: LogLevel, format: str, args: Tuple[Any, ...]) -> None:
        # skip formatting work for gated calls
        if self._level > level:
            return
        self._log(level, _sprintf(format, args), ())

    def debugf(self, format: str, *args: Any) -> None:
        self._logf(LogLevel.DEBUG, format, args)

    def infof(self, format: str, *args: Any) -> None:
        self._logf(LogLevel.INFO, format, args)

    def warnf(self, format: str, *args: Any) -> None:
        self._logf(LogLevel.WARN, format, args)

    def errorf(self, format: str, *args: Any) -> None:
        self._logf(LogLevel.ERROR, format, args)

    def fatalf(self, format: str, *args: Any) -> None:
        self._logf(LogLevel.FATAL, format, args)

    def panicf(self, format: str, *args: Any) -> None:
        self._logf(LogLevel.PANIC, format, args)

    # -- derivation ---------------------------------------------------------

    def _derive(self) -> "BaseLogger":
        return copy.copy(self)

    def with_fields(self, *fields: Field, **kv: Any) -> "BaseLogger":
        derived = self._derive()
        derived._fields = self._fields + _collect(fields, kv)
        return derived

    def with_field(self, key: str, value: Any) -> "BaseLogger":
        return self.with_fields(Field(key, value))

    def with_context(self, ctx: Any) -> "BaseLogger":
        derived = self._derive()
        derived._ctx = ctx
        return derived

    def with_error(self, err: BaseException) -> "BaseLogger":
        return self.with_field("error", err)

    def with_time(self, t: datetime) -> "BaseLogger":
        return self.with_field("time", t)

    # -- level --------------------------------------------------------------

    def set_level(self, level: LogLevel) -> None:
        self._level = LogLevel(level)

    def get_level(self) -> LogLevel:
        return self._level

    def _enabled(self, level: LogLevel) -> bool:
        return self._level <= level

    def is_debug_enabled(self) -> bool:
        return self._enabled(LogLevel.DEBUG)

    def is_info_enabled(self) -> bool:
        return self._enabled(LogLevel.INFO)

    def is_warn_enabled(self) -> bool:
        return self._enabled(LogLevel.WARN)

    def is_error_enabled(self) -> bool:
        return self._enabled(LogLevel.ERROR)

    def is_fatal_enabled(self) -> bool:
        return self._enabled(LogLevel.FATAL)

    def is_panic_enabled(self) -> bool:
        return self._enabled(LogLevel.PANIC)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self._name!r} level={self._level.label}>"
