"""
structlog backend.

Each logger wraps its own sink with ``structlog.wrap_logger`` and a processor
chain that shapes entries as ``time``, ``level``, ``logger``, ``msg`` plus
fields, rendered as JSON (orjson) or key=value text. Importing this module
registers the provider as ``structlog``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from ..factory import register_builtin_provider
from ..formatters import orjson_dumps
from ..logger import BaseLogger
from ..options import LoggerOptions, Option, build_options
from ..sinks import BaseSink, open_sink
from ..types import FORMAT_JSON, Field, LogLevel, fields_to_dict
from .base import LoggerProvider, options_from_map

PROVIDER_NAME = "structlog"

RESERVED_KEYS = ("time", "level", "logger", "msg")

# structlog owns "event"; a user field of that name travels under this key
EVENT_FIELD_KEY = "_field_event"

_STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
    LogLevel.PANIC: logging.CRITICAL,
}


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp unless a ``time`` field is already bound."""
    event_dict.setdefault("time", datetime.now(timezone.utc).isoformat())
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    name = event_dict.pop("_name", "root")
    event_dict.setdefault("logger", name)
    return event_dict


def add_level_label(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    label = event_dict.pop("_level", method_name)
    event_dict.setdefault("level", str(label).lower())
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'msg'."""
    if "event" in event_dict:
        event = event_dict.pop("event")
        event_dict.setdefault("msg", event)
    return event_dict


def restore_event_field(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    if EVENT_FIELD_KEY in event_dict:
        event_dict["event"] = event_dict.pop(EVENT_FIELD_KEY)
    return event_dict


def order_reserved_keys(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    ordered = {k: event_dict.pop(k) for k in RESERVED_KEYS if k in event_dict}
    ordered.update(event_dict)
    return ordered


def build_processors(format: str) -> list[Processor]:
    renderer: Processor
    if format == FORMAT_JSON:
        renderer = structlog.processors.JSONRenderer(serializer=orjson_dumps)
    else:
        renderer = structlog.processors.KeyValueRenderer(key_order=list(RESERVED_KEYS), drop_missing=True)
    return [
        add_timestamp,
        add_logger_name,
        add_level_label,
        rename_event_key,
        restore_event_field,
        order_reserved_keys,
        renderer,
    ]


class SinkWriter:
    """Final structlog logger: writes rendered lines to a sink.

    Returns the line so callers of the bound logger receive it.
    """

    def __init__(self, sink: BaseSink) -> None:
        self._sink = sink

    def msg(self, message: str) -> str:
        self._sink.write(message + "\n")
        return message

    log = debug = info = warn = warning = msg
    err = error = critical = fatal = exception = failure = msg


# =============================================================================
# Logger & Provider
# =============================================================================


class StructlogLogger(BaseLogger):
    """Adapter over a structlog bound logger. Truncation applies to the message only."""

    def __init__(self, name: str, options: LoggerOptions, sink: Optional[BaseSink] = None) -> None:
        super().__init__(name, level=options.level, max_message_size=options.max_message_size)
        self._format = options.format
        self._sink = sink or open_sink(options)
        # the facade gates levels itself; the wrapper lets everything through
        self._bound = structlog.wrap_logger(
            SinkWriter(self._sink),
            processors=build_processors(options.format),
            wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
            context_class=dict,
            cache_logger_on_first_use=False,
            _name=name,
        )

    @property
    def sink(self) -> BaseSink:
        return self._sink

    def _emit(self, level: LogLevel, msg: str, fields: Tuple[Field, ...]) -> str:
        msg = self._limit(msg)
        context = fields_to_dict(self._fields + fields)
        if "event" in context:
            context[EVENT_FIELD_KEY] = context.pop("event")
        bound = self._bound.bind(**context)
        rendered = bound.log(_STDLIB_LEVELS[level], msg, _level=level.label)
        return rendered if isinstance(rendered, str) else msg

    def sync(self) -> None:
        self._sink.flush()

    def close(self) -> None:
        self._sink.close()


def new_structlog_logger(name: str, *opts: Option) -> StructlogLogger:
    return StructlogLogger(name, build_options(*opts, format=StructlogProvider.default_format))


class StructlogProvider(LoggerProvider):
    """Provider registered as ``structlog``. JSON output by default."""

    default_format = FORMAT_JSON

    def create(self, name: str) -> StructlogLogger:
        return new_structlog_logger(name)

    def create_with_config(self, name: str, config: Mapping[str, Any]) -> StructlogLogger:
        return StructlogLogger(name, options_from_map(config, format=self.default_format))

    def create_with_options(self, name: str, options: LoggerOptions) -> StructlogLogger:
        return StructlogLogger(name, options)


register_builtin_provider(PROVIDER_NAME, StructlogProvider)
