"""Tests for the built-in scalar casters."""

import enum
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from typebind.casters import (
    BUILTIN_CASTERS,
    format_duration,
    parse_duration,
    to_bool,
    to_duration,
    to_float,
    to_int,
    to_str,
    to_time,
    to_uint,
)

UTC = timezone.utc


class Color(enum.Enum):
    RED = "red"


class Level(enum.IntEnum):
    HIGH = 3


class TestDurationSyntax:
    """Test parse_duration / format_duration."""

    @pytest.mark.parametrize("text, expected", [
        ("1s", timedelta(seconds=1)),
        ("1h30m", timedelta(minutes=90)),
        ("1.5s", timedelta(seconds=1.5)),
        ("300ms", timedelta(milliseconds=300)),
        ("-2us", timedelta(microseconds=-2)),
        ("2µs", timedelta(microseconds=2)),
        ("1500ns", timedelta(microseconds=2)),
        ("72h3m0.5s", timedelta(hours=72, minutes=3, seconds=0.5)),
        ("0", timedelta(0)),
        (" 10m ", timedelta(minutes=10)),
    ])
    def test_parse(self, text, expected):
        """Go-style duration strings are parsed."""
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["", "1", "abc", "1x", "h1", "1s2"])
    def test_parse_rejects_malformed(self, text):
        """Malformed durations raise ValueError."""
        with pytest.raises(ValueError):
            parse_duration(text)

    @pytest.mark.parametrize("value, expected", [
        (timedelta(0), "0s"),
        (timedelta(microseconds=5), "5us"),
        (timedelta(milliseconds=300), "300ms"),
        (timedelta(milliseconds=1.5), "1.5ms"),
        (timedelta(seconds=2), "2s"),
        (timedelta(seconds=1.5), "1.5s"),
        (timedelta(minutes=2), "2m0s"),
        (timedelta(minutes=90), "1h30m0s"),
        (timedelta(seconds=-2), "-2s"),
    ])
    def test_format(self, value, expected):
        """Durations are rendered in the shortest Go form."""
        assert format_duration(value) == expected


class TestToBool:
    """Test bool coercion."""

    @pytest.mark.parametrize("value", [True, 1, 2.5, "1", "t", "T", "TRUE", "true", "True", b"true"])
    def test_truthy(self, value):
        assert to_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, 0.0, "", "0", "f", "FALSE", "false", " False "])
    def test_falsy(self, value):
        assert to_bool(value) is False

    def test_invalid_string(self):
        """Unknown words are rejected."""
        with pytest.raises(ValueError):
            to_bool("yes")

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            to_bool(object())


class TestToInt:
    """Test int / uint coercion."""

    @pytest.mark.parametrize("value, expected", [
        (10, 10),
        (True, 1),
        (11.0, 11),
        (12.9, 12),
        (Decimal("3.9"), 3),
        ("12", 12),
        (" 42 ", 42),
        ("010", 10),
        ("0x1f", 31),
        ("12.7", 12),
        (b"7", 7),
        (timedelta(seconds=1), 1000),
        (datetime(2023, 1, 1, tzinfo=UTC), 1672531200),
        (Level.HIGH, 3),
    ])
    def test_int(self, value, expected):
        assert to_int(value) == expected

    def test_int_rejects_malformed_string(self):
        with pytest.raises(ValueError):
            to_int("abc")

    def test_int_rejects_infinity(self):
        with pytest.raises(ValueError):
            to_int(float("inf"))

    def test_int_unsupported_type(self):
        with pytest.raises(TypeError):
            to_int([1])

    def test_uint_accepts_non_negative(self):
        assert to_uint("5") == 5
        assert to_uint(0) == 0

    def test_uint_rejects_negative(self):
        with pytest.raises(ValueError):
            to_uint(-1)


class TestToFloat:
    """Test float coercion."""

    @pytest.mark.parametrize("value, expected", [
        ("1.2", 1.2),
        (30, 30.0),
        (True, 1.0),
        (Decimal("0.5"), 0.5),
        (timedelta(seconds=1.5), 1.5),
        (datetime(2023, 1, 1, tzinfo=UTC), 1672531200.0),
    ])
    def test_float(self, value, expected):
        assert to_float(value) == expected

    def test_invalid_string(self):
        with pytest.raises(ValueError):
            to_float("one")


class TestToStr:
    """Test str coercion."""

    @pytest.mark.parametrize("value, expected", [
        ("abc", "abc"),
        (b"ab", "ab"),
        (47, "47"),
        (True, "true"),
        (False, "false"),
        (3.0, "3"),
        (2.5, "2.5"),
        (Decimal("1.10"), "1.10"),
        (timedelta(seconds=1), "1s"),
        (datetime(2023, 1, 1, tzinfo=UTC), "2023-01-01T00:00:00+00:00"),
        (date(2023, 1, 2), "2023-01-02"),
        (ValueError("boom"), "boom"),
        (Color.RED, "red"),
        (Level.HIGH, "3"),
    ])
    def test_str(self, value, expected):
        assert to_str(value) == expected

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            to_str(object())


class TestToDuration:
    """Test duration coercion."""

    @pytest.mark.parametrize("value, expected", [
        ("1s", timedelta(seconds=1)),
        (2000, timedelta(seconds=2)),
        (3.0, timedelta(seconds=3)),
        (Decimal("0.25"), timedelta(milliseconds=250)),
        ("2000", timedelta(seconds=2)),
        ("1.5", timedelta(seconds=1.5)),
        (timedelta(minutes=1), timedelta(minutes=1)),
    ])
    def test_duration(self, value, expected):
        assert to_duration(value) == expected

    def test_bool_is_rejected(self):
        with pytest.raises(TypeError):
            to_duration(True)

    def test_malformed_string(self):
        with pytest.raises(ValueError):
            to_duration("soon")


class TestToTime:
    """Test time coercion."""

    @pytest.mark.parametrize("value, expected", [
        (1672531200, datetime(2023, 1, 1, tzinfo=UTC)),
        (1672531200.5, datetime(2023, 1, 1, 0, 0, 0, 500000, tzinfo=UTC)),
        ("1672531200", datetime(2023, 1, 1, tzinfo=UTC)),
        ("2023-02-01T00:00:00Z", datetime(2023, 2, 1, tzinfo=UTC)),
        ("2023-02-01T03:00:00+03:00", datetime(2023, 2, 1, tzinfo=UTC)),
        ("2023-02-01", datetime(2023, 2, 1, tzinfo=UTC)),
        (date(2023, 1, 2), datetime(2023, 1, 2, tzinfo=UTC)),
    ])
    def test_time(self, value, expected):
        assert to_time(value) == expected

    def test_naive_datetime_is_utc(self):
        result = to_time(datetime(2023, 1, 1))
        assert result.tzinfo is UTC

    def test_malformed_string(self):
        with pytest.raises(ValueError):
            to_time("not a date")

    def test_bool_is_rejected(self):
        with pytest.raises(TypeError):
            to_time(False)


class TestBuiltinCasters:
    """Test the caster table."""

    def test_all_kinds_registered(self):
        assert set(BUILTIN_CASTERS) == {"bool", "int", "uint", "float", "str", "duration", "time"}

    def test_entries_are_callables(self):
        assert BUILTIN_CASTERS["int"] is to_int
        assert BUILTIN_CASTERS["duration"] is to_duration
