"""
In-memory test double for the Logger contract.

``RecordingProvider`` hands out ``RecordingLogger`` instances that append
every emitted entry to a shared list instead of writing anywhere::

    provider = RecordingProvider()
    factory.register_provider("memory", provider)
    factory.create_logger_with_provider("svc", "memory").info("hi", user="u1")
    assert provider.entries[0].fields == {"user": "u1"}
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .logger import BaseLogger
from .options import LoggerOptions, default_options
from .providers.base import LoggerProvider, options_from_map
from .types import Field, LogLevel, fields_to_dict


@dataclass(frozen=True)
class LogEntry:
    level: LogLevel
    message: str
    logger: str
    fields: Dict[str, Any] = field(default_factory=dict)
    context: Any = None


class EntryStore:
    """Thread-safe list of entries shared by a logger and its derivations."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: List[LogEntry] = []
        self.syncs = 0

    def append(self, entry: LogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    @property
    def entries(self) -> List[LogEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class RecordingLogger(BaseLogger):
    def __init__(self, name: str, options: Optional[LoggerOptions] = None, store: Optional[EntryStore] = None) -> None:
        options = options or default_options()
        super().__init__(name, level=options.level, max_message_size=options.max_message_size)
        self.options = options
        self.store = store or EntryStore()

    @property
    def entries(self) -> List[LogEntry]:
        return self.store.entries

    def _emit(self, level: LogLevel, msg: str, fields: Tuple[Field, ...]) -> str:
        msg = self._limit(msg)
        self.store.append(
            LogEntry(
                level=level,
                message=msg,
                logger=self._name,
                fields=fields_to_dict(self._fields + fields),
                context=self._ctx,
            )
        )
        return msg

    def sync(self) -> None:
        self.store.syncs += 1


class RecordingProvider(LoggerProvider):
    """Provider whose loggers all record into one shared store."""

    def __init__(self) -> None:
        self.store = EntryStore()
        self.created: List[str] = []

    @property
    def entries(self) -> List[LogEntry]:
        return self.store.entries

    def create(self, name: str) -> RecordingLogger:
        self.created.append(name)
        return RecordingLogger(name, store=self.store)

    def create_with_config(self, name: str, config: Mapping[str, Any]) -> RecordingLogger:
        self.created.append(name)
        return RecordingLogger(name, options_from_map(config, format=self.default_format), store=self.store)

    def create_with_options(self, name: str, options: LoggerOptions) -> RecordingLogger:
        self.created.append(name)
        return RecordingLogger(name, options, store=self.store)
