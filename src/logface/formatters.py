"""
Line rendering for the console backend, plus the shared orjson serializer.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable

import orjson

from .types import Field, fields_to_dict, level_label


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


def _render_value(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def render_kv(fields: Dict[str, Any]) -> str:
    """Render merged fields as `` k=v k=v`` (leading space, empty when none)."""
    return "".join(f" {k}={_render_value(v)}" for k, v in fields.items())


class ConsoleFormatter:
    """Renders one entry as a text or JSON line."""

    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

    @classmethod
    def configure(cls, *, timestamp_format: str | None = None) -> None:
        if timestamp_format:
            cls.TIMESTAMP_FORMAT = timestamp_format

    @classmethod
    def format_timestamp(cls, now: datetime | None = None) -> str:
        now = now or datetime.now()
        text = now.strftime(cls.TIMESTAMP_FORMAT)
        # %f is microseconds; keep milliseconds
        if cls.TIMESTAMP_FORMAT.endswith("%f"):
            text = text[:-3]
        return text

    @classmethod
    def format_text(cls, level: int, name: str, msg: str, fields: Iterable[Field], timestamp: str | None = None) -> str:
        timestamp = timestamp or cls.format_timestamp()
        return f"{timestamp} [{level_label(level)}] [{name}] {msg}{render_kv(fields_to_dict(fields))}"

    @classmethod
    def format_json(cls, level: int, name: str, msg: str, fields: Iterable[Field]) -> str:
        """Render a JSON object; falls back to the text line if serialization fails."""
        fields = list(fields)
        timestamp = cls.format_timestamp()
        payload: Dict[str, Any] = {
            "time": timestamp,
            "level": level_label(level),
            "logger": name,
            "msg": msg,
        }
        # fields overwrite reserved keys
        payload.update(fields_to_dict(fields))
        try:
            return orjson_dumps(payload)
        except (orjson.JSONEncodeError, TypeError, ValueError):
            return cls.format_text(level, name, msg, fields, timestamp=timestamp)
