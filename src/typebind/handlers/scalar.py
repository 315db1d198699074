"""Scalar handlers — bool, int, uint, float, str, duration and time slots.

Every scalar kind goes through the binder's caster of the same name
(``binder.casters["int"]`` …), so ``build_default_binder(casters=...)``
changes coercion for the whole tree.  Subclasses of the scalar types
(``class UserId(int)``, ``IntEnum`` …) are coerced through their base kind
and then constructed from the result.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from ..core import BindHandler, Binder
from ..errors import CoercionError
from ..shapes import record_class
from ..slots import Slot

_COERCION_ERRORS = (TypeError, ValueError, OverflowError, ArithmeticError)


def _construct(cls: type, value: Any) -> Any:
    if isinstance(value, datetime):
        return cls(
            value.year, value.month, value.day,
            value.hour, value.minute, value.second, value.microsecond,
            value.tzinfo,
        )
    if isinstance(value, timedelta):
        return cls(value.days, value.seconds, value.microseconds)
    return cls(value)


class ScalarHandler(BindHandler):
    """Coerce the source with the caster registered under *kind*.

    ::

        ScalarHandler("int")        # "42" → 42
        ScalarHandler("duration")   # "1m30s" → timedelta(seconds=90)
    """

    def __init__(self, kind: str) -> None:
        self._kind = kind

    def bind(self, slot: Slot, value: Any, binder: Binder) -> None:
        cls = record_class(slot.shape)
        try:
            result = binder.casters[self._kind](value)
            if type(result) is not cls:
                result = _construct(cls, result)
        except _COERCION_ERRORS as exc:
            raise CoercionError(slot.path, value, self._kind) from exc
        slot.set(result)
