"""
loguru backend.

Every logger owns a private loguru core holding exactly one handler, which
writes to the logger's own sink. Records never reach the process-wide
``loguru.logger`` or its default stderr handler, and handlers configured on
it never see facade records. Importing this module registers the provider
as ``loguru``.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping, Optional, Tuple

from loguru._logger import Core as _Core
from loguru._logger import Logger as _Logger

from ..factory import register_builtin_provider
from ..formatters import render_kv
from ..logger import BaseLogger
from ..options import LoggerOptions, Option, build_options
from ..sinks import BaseSink, open_sink
from ..types import FORMAT_JSON, FORMAT_TEXT, Field, LogLevel, fields_to_dict
from .base import LoggerProvider, options_from_map

PROVIDER_NAME = "loguru"

# rendered key=value suffix, text format only
KV_KEY = "_logface_kv"

JSON_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name} | {message}"
TEXT_FORMAT = JSON_FORMAT + "{extra[" + KV_KEY + "]}"

_LOGURU_LEVELS = {
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARN: "WARNING",
    LogLevel.ERROR: "ERROR",
    LogLevel.FATAL: "CRITICAL",
    LogLevel.PANIC: "CRITICAL",
}


def _new_core() -> _Logger:
    """A loguru logger with its own handler table, detached from ``loguru.logger``."""
    return _Logger(
        core=_Core(),
        exception=None,
        depth=0,
        record=False,
        lazy=False,
        colors=False,
        raw=False,
        capture=True,
        patchers=[],
        extra={},
    )


class LineCapture:
    """loguru sink that forwards to a facade sink and keeps the last line per thread."""

    def __init__(self, sink: BaseSink) -> None:
        self._sink = sink
        self._local = threading.local()

    def __call__(self, message: str) -> None:
        self._sink.write(message)
        self._local.line = str(message).rstrip("\n")

    def take(self) -> Optional[str]:
        line = getattr(self._local, "line", None)
        self._local.line = None
        return line


class LoguruLogger(BaseLogger):
    """Adapter over a private loguru core. Truncation applies to the message only."""

    def __init__(self, name: str, options: LoggerOptions, sink: Optional[BaseSink] = None) -> None:
        super().__init__(name, level=options.level, max_message_size=options.max_message_size)
        self._format = options.format
        self._sink = sink or open_sink(options)
        self._capture = LineCapture(self._sink)
        core = _new_core()
        json = options.format == FORMAT_JSON
        self._handler_id = core.add(
            self._capture,
            level=0,
            format=JSON_FORMAT if json else TEXT_FORMAT,
            serialize=json,
            colorize=False,
        )
        self._root = core
        self._core = core.patch(self._stamp_name)

    @property
    def sink(self) -> BaseSink:
        return self._sink

    @property
    def handler_id(self) -> int:
        return self._handler_id

    def _stamp_name(self, record: dict) -> None:
        record["name"] = self._name

    def _emit(self, level: LogLevel, msg: str, fields: Tuple[Field, ...]) -> str:
        msg = self._limit(msg)
        extra = fields_to_dict(self._fields + fields)
        if self._format != FORMAT_JSON:
            extra[KV_KEY] = render_kv({k: v for k, v in extra.items() if k != KV_KEY})
        self._core.bind(**extra).log(_LOGURU_LEVELS[level], msg)
        line = self._capture.take()
        return line if line is not None else msg

    def sync(self) -> None:
        self._sink.flush()

    def close(self) -> None:
        """Remove the handler and close the sink; derived loggers share both."""
        self._root.remove()
        self._sink.close()


def new_loguru_logger(name: str, *opts: Option) -> LoguruLogger:
    return LoguruLogger(name, build_options(*opts, format=FORMAT_TEXT))


class LoguruProvider(LoggerProvider):
    """Provider registered as ``loguru``. Text output by default."""

    default_format = FORMAT_TEXT

    def create(self, name: str) -> LoguruLogger:
        return new_loguru_logger(name)

    def create_with_config(self, name: str, config: Mapping[str, Any]) -> LoguruLogger:
        return LoguruLogger(name, options_from_map(config, format=self.default_format))

    def create_with_options(self, name: str, options: LoggerOptions) -> LoguruLogger:
        return LoguruLogger(name, options)


register_builtin_provider(PROVIDER_NAME, LoguruProvider)
