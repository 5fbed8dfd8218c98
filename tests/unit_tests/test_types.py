"""
Level and field model tests.
"""

from __future__ import annotations

import pytest

from logface.types import Field, LogLevel, fields_to_dict, level_label


class TestLogLevel:
    def test_order_is_total(self) -> None:
        levels = list(LogLevel)
        assert levels == sorted(levels)
        assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARN < LogLevel.ERROR < LogLevel.FATAL < LogLevel.PANIC

    @pytest.mark.parametrize(
        "level,label",
        [
            (LogLevel.DEBUG, "DEBUG"),
            (LogLevel.INFO, "INFO"),
            (LogLevel.WARN, "WARN"),
            (LogLevel.ERROR, "ERROR"),
            (LogLevel.FATAL, "FATAL"),
            (LogLevel.PANIC, "PANIC"),
        ],
    )
    def test_labels(self, level: LogLevel, label: str) -> None:
        assert str(level) == label
        assert level.label == label
        assert level_label(int(level)) == label

    @pytest.mark.parametrize("value", [-1, 6, 100])
    def test_out_of_range_is_unknown(self, value: int) -> None:
        assert level_label(value) == "UNKNOWN"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("debug", LogLevel.DEBUG),
            ("INFO", LogLevel.INFO),
            ("warning", LogLevel.WARN),
            (" Error ", LogLevel.ERROR),
            (4, LogLevel.FATAL),
            ("5", LogLevel.PANIC),
            (LogLevel.WARN, LogLevel.WARN),
        ],
    )
    def test_parse(self, raw, expected: LogLevel) -> None:
        assert LogLevel.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["verbose", 9, True, None, 1.5])
    def test_parse_rejects_garbage(self, raw) -> None:
        with pytest.raises(ValueError):
            LogLevel.parse(raw)


class TestField:
    def test_field_is_immutable(self) -> None:
        f = Field("user", "alice")
        with pytest.raises(AttributeError):
            f.key = "other"  # type: ignore[misc]

    def test_merge_keeps_first_position_last_value(self) -> None:
        merged = fields_to_dict([Field("a", 1), Field("b", 2), Field("a", 3)])
        assert merged == {"a": 3, "b": 2}
        assert list(merged) == ["a", "b"]
