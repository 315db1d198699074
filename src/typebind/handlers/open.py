"""Open-slot handler — unions, Protocols, abstract and member-less classes.

An open slot has no single shape to coerce toward:

* when it already holds a value, the source is bound into that value using
  the value's own class (in place for mutable records and escape-hatch
  instances, otherwise through a copy that replaces the held value);
* when it is empty, the source is stored only if it is directly
  assignable, otherwise ``IncompatibleValueError`` is raised.
"""

from __future__ import annotations

from typing import Any

from ..core import BindHandler, Binder, capability_of
from ..errors import IncompatibleValueError, located
from ..shapes import Kind, is_assignable, kind_of, shape_name
from ..slots import Ref, Slot


def _bindable(held: Any) -> bool:
    cls = type(held)
    return capability_of(cls) is not None or kind_of(cls) not in (Kind.OPEN, Kind.UNSUPPORTED)


class OpenHandler(BindHandler):
    def bind(self, slot: Slot, value: Any, binder: Binder) -> None:
        held = slot.get()
        if held is not None and _bindable(held):
            ref = Ref(type(held), held, path=slot.path)
            binder.bind_slot(ref, value)
            if ref.value is not held:
                slot.set(ref.value)
            return

        # a slot passed as the source stands for the value it holds
        if isinstance(value, Slot) and is_assignable(value.get(), slot.shape):
            value = value.get()

        if not is_assignable(value, slot.shape):
            raise IncompatibleValueError(located(
                f"cannot assign {type(value).__name__} to {shape_name(slot.shape)}", slot.path,
            ))
        slot.set(value)
