"""
Standard library logging bridge.
"""

from __future__ import annotations

import logging

import pytest

from logface.interceptors import FacadeHandler, install_stdlib_bridge, level_from_stdlib, uninstall_stdlib_bridge
from logface.types import LogLevel


@pytest.mark.parametrize(
    "levelno,expected",
    [
        (logging.DEBUG, LogLevel.DEBUG),
        (5, LogLevel.DEBUG),
        (logging.INFO, LogLevel.INFO),
        (logging.WARNING, LogLevel.WARN),
        (logging.ERROR, LogLevel.ERROR),
        (logging.CRITICAL, LogLevel.ERROR),
    ],
)
def test_level_mapping(levelno: int, expected: LogLevel) -> None:
    assert level_from_stdlib(levelno) is expected


class TestBridge:
    def test_forwards_records_with_source(self, recording_logger) -> None:
        names = ["bridge.forward"]
        handler = install_stdlib_bridge(recording_logger, loggers=names)
        try:
            std = logging.getLogger("bridge.forward")
            std.debug("dropped by stdlib level")
            std.info("hello %s", "world")
            std.critical("very bad")
        finally:
            uninstall_stdlib_bridge(handler, loggers=names)

        entries = recording_logger.entries
        assert [(e.level, e.message) for e in entries] == [
            (LogLevel.INFO, "hello world"),
            (LogLevel.ERROR, "very bad"),
        ]
        assert entries[0].fields == {"source": "bridge.forward"}

    def test_exception_info_becomes_error_field(self, recording_logger) -> None:
        names = ["bridge.exc"]
        handler = install_stdlib_bridge(recording_logger, loggers=names)
        try:
            try:
                raise KeyError("missing")
            except KeyError:
                logging.getLogger("bridge.exc").exception("lookup failed")
        finally:
            uninstall_stdlib_bridge(handler, loggers=names)

        (entry,) = recording_logger.entries
        assert entry.level == LogLevel.ERROR
        assert isinstance(entry.fields["error"], KeyError)

    def test_named_loggers_stop_propagating(self, recording_logger) -> None:
        names = ["bridge.propagate"]
        handler = install_stdlib_bridge(recording_logger, loggers=names, level=logging.DEBUG)
        try:
            target = logging.getLogger("bridge.propagate")
            assert target.handlers == [handler]
            assert target.propagate is False
            assert target.level == logging.DEBUG
        finally:
            uninstall_stdlib_bridge(handler, loggers=names)
        assert handler not in logging.getLogger("bridge.propagate").handlers

    def test_own_diagnostics_are_skipped(self, recording_logger) -> None:
        handler = FacadeHandler(recording_logger)
        handler.emit(logging.makeLogRecord({"name": "logface.sinks", "msg": "loop", "levelno": logging.WARNING}))
        handler.emit(logging.makeLogRecord({"name": "logfacex", "msg": "kept", "levelno": logging.WARNING}))
        assert [e.message for e in recording_logger.entries] == ["kept"]
