"""
Console backend: plain text or JSON lines written straight to a sink.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

from ..formatters import ConsoleFormatter
from ..logger import BaseLogger
from ..options import LoggerOptions, Option, build_options
from ..sinks import BaseSink, open_sink
from ..types import FORMAT_JSON, FORMAT_TEXT, Field, LogLevel
from .base import LoggerProvider, options_from_map


class ConsoleLogger(BaseLogger):
    """Renders ``timestamp [LEVEL] [name] message k=v`` or a JSON object per line.

    Truncation applies to the whole rendered line.
    """

    def __init__(self, name: str, options: LoggerOptions, sink: Optional[BaseSink] = None) -> None:
        super().__init__(name, level=options.level, max_message_size=options.max_message_size)
        self._format = options.format
        self._sink = sink or open_sink(options)

    @property
    def sink(self) -> BaseSink:
        return self._sink

    @property
    def format(self) -> str:
        return self._format

    def _render(self, level: LogLevel, msg: str, fields: Tuple[Field, ...]) -> str:
        all_fields = self._fields + fields
        if self._format == FORMAT_JSON:
            line = ConsoleFormatter.format_json(level, self._name, msg, all_fields)
        else:
            line = ConsoleFormatter.format_text(level, self._name, msg, all_fields)
        return self._limit(line)

    def _emit(self, level: LogLevel, msg: str, fields: Tuple[Field, ...]) -> str:
        line = self._render(level, msg, fields)
        self._sink.write(line + "\n")
        return line

    def sync(self) -> None:
        self._sink.flush()

    def close(self) -> None:
        self._sink.close()


def new_console_logger(name: str, *opts: Option) -> ConsoleLogger:
    return ConsoleLogger(name, build_options(*opts, format=FORMAT_TEXT))


class ConsoleLoggerProvider(LoggerProvider):
    """Provider registered as ``console``."""

    default_format = FORMAT_TEXT

    def create(self, name: str) -> ConsoleLogger:
        return new_console_logger(name)

    def create_with_config(self, name: str, config: Mapping[str, Any]) -> ConsoleLogger:
        return ConsoleLogger(name, options_from_map(config, format=self.default_format))

    def create_with_options(self, name: str, options: LoggerOptions) -> ConsoleLogger:
        return ConsoleLogger(name, options)
