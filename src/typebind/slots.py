"""Addressable destination slots.

A ``Slot`` is the binder's notion of "a place a value can be written to": it
exposes the declared shape expected there, reads the current value and
writes a new one.  Handlers never touch objects directly, they go through
slots.

Exports
-------
Slot
    Abstract interface.

Ref
    Detached, always-writable box.  The public way to bind a scalar or a
    container at the top level, and the engine's freshly allocated slot for
    pointer targets, container elements and map keys / values::

        ref = Ref(list[int])
        bind(ref, ["1", "2"])
        ref.value            # [1, 2]

AttrSlot
    A member of a record instance.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .shapes import FieldInfo, shape_name, zero_value

_MISSING = object()


def join_path(parent: str, name: str) -> str:
    return f"{parent}.{name}" if parent else name


def index_path(parent: str, index: Any) -> str:
    return f"{parent}[{index!r}]"


class Slot(ABC):
    """Abstract addressable location.

    Attributes:
        shape: Declared annotation of the location.
        path:  Dotted / indexed location used in error messages
               (``"items[0].price"``); ``""`` for the root.
    """

    shape: Any
    path: str

    @property
    def writable(self) -> bool:
        return True

    @abstractmethod
    def get(self) -> Any:
        """Current value (``None`` when unset)."""

    @abstractmethod
    def set(self, value: Any) -> None:
        """Replace the current value."""

    def __repr__(self) -> str:
        where = f" at {self.path!r}" if self.path else ""
        return f"<{type(self).__name__} {shape_name(self.shape)}{where}>"


class Ref(Slot):
    """Free-standing slot holding a single value.

    Without an explicit *value* the slot starts at the zero value of *shape*
    (``0`` for ``int``, an empty list for ``list[int]``, ``None`` for
    ``Optional[...]`` …).
    """

    def __init__(self, shape: Any, value: Any = _MISSING, *, path: str = "") -> None:
        self.shape = shape
        self.path = path
        self.value = zero_value(shape) if value is _MISSING else value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value


class AttrSlot(Slot):
    """A record member, read and written with ``getattr`` / ``setattr``."""

    def __init__(self, obj: Any, info: FieldInfo, *, path: str = "") -> None:
        self.obj = obj
        self.info = info
        self.shape = info.shape
        self.path = join_path(path, info.name)

    @property
    def writable(self) -> bool:
        if not self.info.exported:
            return False
        attr = getattr(type(self.obj), self.info.name, None)
        if isinstance(attr, property):
            return attr.fset is not None
        return True

    def get(self) -> Any:
        return getattr(self.obj, self.info.name, None)

    def set(self, value: Any) -> None:
        setattr(self.obj, self.info.name, value)
