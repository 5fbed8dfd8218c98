"""
structlog backend: processor chain, rendering and the shared Logger contract.
"""

from __future__ import annotations

import orjson
import pytest

from logface.exceptions import FatalExit, LoggerPanic
from logface.options import build_options, with_format, with_level, with_max_message_size, with_output_path
from logface.providers.structlog import (
    StructlogLogger,
    StructlogProvider,
    add_level_label,
    add_logger_name,
    new_structlog_logger,
    order_reserved_keys,
    rename_event_key,
    restore_event_field,
)
from logface.types import Field, LogLevel


def _records(capsys) -> list[dict]:
    return [orjson.loads(line) for line in capsys.readouterr().out.splitlines()]


class TestProcessors:
    def test_rename_event_key(self) -> None:
        assert rename_event_key(None, "info", {"event": "hi"}) == {"msg": "hi"}

    def test_logger_name_and_level(self) -> None:
        event = add_logger_name(None, "info", {"_name": "svc"})
        event = add_level_label(None, "critical", {**event, "_level": "PANIC"})
        assert event == {"logger": "svc", "level": "panic"}

    def test_restore_event_field(self) -> None:
        event = rename_event_key(None, "info", {"event": "m", "_field_event": "signup"})
        assert restore_event_field(None, "info", event) == {"msg": "m", "event": "signup"}

    def test_reserved_keys_lead(self) -> None:
        ordered = order_reserved_keys(None, "info", {"user": 1, "msg": "m", "time": "t", "level": "info"})
        assert list(ordered) == ["time", "level", "msg", "user"]


class TestStructlogLogger:
    def test_json_is_default(self, capsys) -> None:
        logger = StructlogProvider().create("svc")
        logger.info("hello", Field("user", "alice"), attempt=2)
        (record,) = _records(capsys)
        assert list(record)[:4] == ["time", "level", "logger", "msg"]
        assert record["level"] == "info"
        assert record["logger"] == "svc"
        assert record["msg"] == "hello"
        assert record["user"] == "alice"
        assert record["attempt"] == 2

    def test_text_renderer(self, capsys) -> None:
        logger = new_structlog_logger("svc", with_format("text"))
        logger.warn("slow", Field("ms", 120))
        line = capsys.readouterr().out.strip()
        assert line.startswith("time=")
        assert "level='warn' logger='svc' msg='slow' ms=120" in line

    def test_accumulated_fields_and_last_write_wins(self, capsys) -> None:
        logger = new_structlog_logger("svc").with_fields(Field("k", 1), request_id="r1")
        logger.error("dup", Field("k", 2))
        (record,) = _records(capsys)
        assert record["k"] == 2
        assert record["request_id"] == "r1"

    def test_level_gating(self, capsys) -> None:
        logger = new_structlog_logger("svc", with_level(LogLevel.WARN))
        logger.debug("d")
        logger.info("i")
        logger.warnf("w%d", 1)
        assert [r["msg"] for r in _records(capsys)] == ["w1"]

    def test_message_truncated_not_fields(self, capsys) -> None:
        logger = new_structlog_logger("svc", with_max_message_size(1))
        logger.info("x" * 2000, Field("payload", "y" * 2000))
        (record,) = _records(capsys)
        assert record["msg"] == "x" * 1021 + "..."
        assert len(record["msg"].encode("utf-8")) == 1024
        assert record["payload"] == "y" * 2000

    def test_multibyte_boundary_is_dropped(self, capsys) -> None:
        logger = new_structlog_logger("svc", with_max_message_size(1))
        # 3-byte characters; 1021 bytes ends mid-character
        logger.info("€" * 400)
        (record,) = _records(capsys)
        assert record["msg"] == "€" * 340 + "..."

    def test_fatal(self, capsys) -> None:
        with pytest.raises(FatalExit) as exc_info:
            new_structlog_logger("svc").fatal("gone")
        assert exc_info.value.code == 1
        assert _records(capsys)[0]["level"] == "fatal"

    def test_event_field_survives(self, capsys) -> None:
        new_structlog_logger("svc").with_field("event", "login").info("m", Field("event", "signup"))
        (record,) = _records(capsys)
        assert record["msg"] == "m"
        assert record["event"] == "signup"

    def test_event_field_in_text_output(self, capsys) -> None:
        new_structlog_logger("svc", with_format("text")).info("m", Field("event", "signup"))
        line = capsys.readouterr().out.strip()
        assert "msg='m'" in line
        assert "event='signup'" in line

    def test_panic_carries_rendered_line(self, capsys) -> None:
        with pytest.raises(LoggerPanic) as exc_info:
            new_structlog_logger("svc").panic("boom")
        line = capsys.readouterr().out.strip()
        assert exc_info.value.message == line
        assert orjson.loads(line)["level"] == "panic"

    def test_derived_loggers_share_sink(self) -> None:
        base = new_structlog_logger("svc")
        child = base.with_context({"trace": "t"})
        assert child.sink is base.sink
        assert base.context is None

    def test_file_output(self, log_file) -> None:
        logger = StructlogLogger("svc", build_options(with_output_path(str(log_file)), format="json"))
        logger.info("persisted", n=1)
        logger.sync()
        record = orjson.loads(log_file.read_text(encoding="utf-8"))
        assert record["msg"] == "persisted"
        assert record["n"] == 1

    def test_create_with_config(self, capsys) -> None:
        logger = StructlogProvider().create_with_config("svc", {"level": LogLevel.DEBUG, "format": 42})
        assert logger.get_level() == LogLevel.DEBUG
        logger.debug("visible")
        assert _records(capsys)[0]["msg"] == "visible"
