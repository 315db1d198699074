"""Built-in scalar casters — the coercion service behind every scalar slot.

Each caster takes an arbitrary dynamic value and returns a value of its
primitive kind, raising ``TypeError`` for unsupported source types and
``ValueError`` for malformed input.  The scalar handlers wrap both into
``CoercionError``.

Exports
-------
BUILTIN_CASTERS
    Dictionary mapping kind names to caster functions.
    Kinds: bool, int, uint, float, str, duration, time.

parse_duration / format_duration
    Go-style duration strings (``"1h30m"``, ``"1.5s"``, ``"300ms"``).

Custom casters can be registered by passing a casters dict to
``build_default_binder(casters=...)``; entries replace the built-in caster
of the same kind.
"""

from __future__ import annotations

import enum
import math
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable

import regex
from dateutil import parser as dateparser

# ─────────────────────────────────────────────────────────────────────────────
# Durations
# ─────────────────────────────────────────────────────────────────────────────

_DURATION_PART = r"(?P<num>\d+(?:\.\d*)?|\.\d+)(?P<unit>ns|us|µs|μs|ms|s|m|h)"
_DURATION_RE = regex.compile(rf"[-+]?(?:{_DURATION_PART})+")
_DURATION_PART_RE = regex.compile(_DURATION_PART)
_NUMERIC_RE = regex.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")

_UNIT_MICROSECONDS = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ms": Decimal(1000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"", "0", "f", "F", "FALSE", "false", "False"}


def parse_duration(text: str) -> timedelta:
    """Parse a Go-style duration: ``"72h3m0.5s"``, ``"-1.5h"``, ``"300ms"``, ``"0"``.

    Precision is limited to microseconds (``timedelta``); nanoseconds are
    rounded.
    """
    s = text.strip()
    if s in ("0", "+0", "-0"):
        return timedelta(0)
    if not _DURATION_RE.fullmatch(s):
        raise ValueError(f"invalid duration {text!r}")

    total = sum(
        Decimal(m.group("num")) * _UNIT_MICROSECONDS[m.group("unit")]
        for m in _DURATION_PART_RE.finditer(s)
    )
    if s.startswith("-"):
        total = -total
    return timedelta(microseconds=int(total.to_integral_value()))


def _plain(d: Decimal) -> str:
    """Decimal without exponent or trailing zeros."""
    return format(d.normalize(), "f")


def format_duration(value: timedelta) -> str:
    """Inverse of ``parse_duration``: ``timedelta(minutes=90)`` → ``"1h30m0s"``."""
    us = value // timedelta(microseconds=1)
    if us == 0:
        return "0s"

    sign = "-" if us < 0 else ""
    us = abs(us)
    if us < 1000:
        return f"{sign}{us}us"
    if us < 1_000_000:
        return f"{sign}{_plain(Decimal(us) / 1000)}ms"

    hours, rest = divmod(us, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return out + f"{_plain(Decimal(rest) / 1_000_000)}s"


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def _text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return None


def _unsupported(value: Any, kind: str) -> TypeError:
    return TypeError(f"unsupported source type {type(value).__name__} for {kind}")


def _utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _from_timestamp(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


# ─────────────────────────────────────────────────────────────────────────────
# Built-in casters
# ─────────────────────────────────────────────────────────────────────────────


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        return value != 0
    s = _text(value)
    if s is not None:
        s = s.strip()
        if s in _TRUE:
            return True
        if s in _FALSE:
            return False
        raise ValueError(f"invalid boolean {value!r}")
    if isinstance(value, enum.Enum):
        return to_bool(value.value)
    raise _unsupported(value, "bool")


def to_int(value: Any) -> int:
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"cannot convert {value!r} to int")
        return int(value)
    if isinstance(value, Decimal):
        return int(value)
    s = _text(value)
    if s is not None:
        s = s.strip()
        try:
            return int(s, 10)
        except ValueError:
            pass
        try:
            return int(s, 0)
        except ValueError:
            pass
        return to_int(float(s))
    if isinstance(value, timedelta):
        return value // timedelta(milliseconds=1)
    if isinstance(value, datetime):
        return int(_utc(value).timestamp())
    if isinstance(value, enum.Enum):
        return to_int(value.value)
    raise _unsupported(value, "int")


def to_uint(value: Any) -> int:
    result = to_int(value)
    if result < 0:
        raise ValueError(f"cannot convert negative value {value!r} to uint")
    return result


def to_float(value: Any) -> float:
    if isinstance(value, (bool, int, float, Decimal)):
        return float(value)
    s = _text(value)
    if s is not None:
        return float(s.strip())
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, datetime):
        return _utc(value).timestamp()
    if isinstance(value, enum.Enum):
        return to_float(value.value)
    raise _unsupported(value, "float")


def to_str(value: Any) -> str:
    if isinstance(value, enum.Enum):
        return to_str(value.value)
    s = _text(value)
    if s is not None:
        return s
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        out = repr(value)
        return out[:-2] if out.endswith(".0") else out
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, BaseException):
        return str(value)
    raise _unsupported(value, "str")


def to_duration(value: Any) -> timedelta:
    """int → milliseconds, float → seconds, str → number or duration syntax."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise _unsupported(value, "duration")
    if isinstance(value, int):
        return timedelta(milliseconds=value)
    if isinstance(value, (float, Decimal)):
        return timedelta(seconds=float(value))
    s = _text(value)
    if s is not None:
        s = s.strip()
        if _NUMERIC_RE.fullmatch(s):
            try:
                return timedelta(milliseconds=int(s, 10))
            except ValueError:
                return timedelta(seconds=float(s))
        return parse_duration(s)
    raise _unsupported(value, "duration")


def to_time(value: Any) -> datetime:
    """Numbers are Unix timestamps (UTC); strings are ISO-8601 / RFC 3339."""
    if isinstance(value, datetime):
        return _utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, bool):
        raise _unsupported(value, "time")
    if isinstance(value, (int, float, Decimal)):
        return _from_timestamp(float(value))
    s = _text(value)
    if s is not None:
        s = s.strip()
        if _NUMERIC_RE.fullmatch(s):
            return _from_timestamp(float(s))
        return _utc(dateparser.isoparse(s))
    raise _unsupported(value, "time")


BUILTIN_CASTERS: dict[str, Callable[[Any], Any]] = {
    "bool": to_bool,
    "int": to_int,
    "uint": to_uint,
    "float": to_float,
    "str": to_str,
    "duration": to_duration,
    "time": to_time,
}
