"""
Core value types shared by every backend: severity levels and fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterable, Literal

LogFormat = Literal["text", "json"]

FORMAT_TEXT = "text"
FORMAT_JSON = "json"
OUTPUT_STDOUT = "stdout"

_LABELS = ("DEBUG", "INFO", "WARN", "ERROR", "FATAL", "PANIC")
_ALIASES = {"WARNING": "WARN", "CRITICAL": "FATAL"}


class LogLevel(IntEnum):
    """Totally ordered severity levels.

    A message at level L is emitted iff L >= the logger's configured level.
    """

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4
    PANIC = 5

    @property
    def label(self) -> str:
        return _LABELS[self.value]

    def __str__(self) -> str:
        return self.label

    @classmethod
    def parse(cls, value: Any) -> "LogLevel":
        """Coerce a level, an in-range int, or a level name into a LogLevel."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid log level: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            name = value.strip().upper()
            name = _ALIASES.get(name, name)
            if name.isdigit():
                return cls(int(name))
            try:
                return cls[name]
            except KeyError:
                pass
        raise ValueError(f"Invalid log level: {value!r}")


def level_label(value: int) -> str:
    """Render any numeric level, ``UNKNOWN`` when out of range."""
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value < len(_LABELS):
        return _LABELS[value]
    return "UNKNOWN"


@dataclass(frozen=True)
class Field:
    """One structured key/value attribute attached to a log entry."""

    key: str
    value: Any


def fields_to_dict(fields: Iterable[Field]) -> Dict[str, Any]:
    """Merge fields into a mapping. Later keys win, first position is kept."""
    merged: Dict[str, Any] = {}
    for f in fields:
        merged[f.key] = f.value
    return merged
