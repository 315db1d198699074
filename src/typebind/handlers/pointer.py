"""Optional handler — ``Optional[T]`` destinations.

A ``None`` slot is given a zero-valued ``T`` before the source is bound
into it, so a successful bind never leaves the slot empty.  A populated
slot is bound through its current value.
"""

from __future__ import annotations

from typing import Any

from ..core import BindHandler, Binder
from ..shapes import pointee, zero_value
from ..slots import Ref, Slot


class PointerHandler(BindHandler):
    def bind(self, slot: Slot, value: Any, binder: Binder) -> None:
        target = pointee(slot.shape)
        current = slot.get()
        ref = Ref(target, zero_value(target) if current is None else current, path=slot.path)
        binder.bind_slot(ref, value)
        if ref.value is not current:
            slot.set(ref.value)
