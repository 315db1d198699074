"""Core abstractions, the handler registry, and the Binder engine.

This module owns every *interface* of the dispatch system.  Nothing here
depends on a concrete handler — all handlers live in the ``handlers``
sub-package and are wired together by ``factory``.

Binding flow (``Binder.bind`` entry point)::

    dest, src
      │
      ▼
    root slot  (Slot as-is, or Ref around a mutable record)
      │
      ▼
    Binder.bind_slot(slot, src)                 ← once per node
        null source / unwritable slot           → no-op
        hook(slot, src)                         → replace src or stop
        slice_to_single                         → [x, …] becomes x
        Unmarshaler / Setter on the shape       → delegate entirely
        is_assignable(src, shape)               → store as-is
        HandlerRegistry.resolve(kind, shape)    → handler.bind(slot, src, binder)
                │
                └─ handlers recurse through binder.bind_slot(child, value)
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Mapping, Optional, Protocol, runtime_checkable

from .casters import BUILTIN_CASTERS
from .errors import UnsupportedKindError, UnwritableDestinationError, located
from .fields import FieldNameFunc, default_field_name
from .shapes import (
    FieldInfo, Kind, allocate, is_assignable, is_frozen, is_ordered_value, kind_of, pointee,
    record_class, shape_name,
)
from .slots import Ref, Slot

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Escape hatches
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class Unmarshaler(Protocol):
    """A type that populates itself from a dynamic value.

    Takes precedence over ``Setter`` when a class implements both.
    """

    def unmarshal_bind(self, value: Any) -> None: ...


@runtime_checkable
class Setter(Protocol):
    """A type that sets itself from a dynamic value."""

    def set(self, value: Any) -> None: ...


def capability_of(cls: Any) -> Optional[str]:
    """Name of the escape-hatch method a destination class implements, if any."""
    if not isinstance(cls, type) or cls is object:
        return None
    if getattr(cls, "_is_protocol", False) or inspect.isabstract(cls):
        return None
    for method in ("unmarshal_bind", "set"):
        if callable(getattr(cls, method, None)) and _takes_one_value(cls, method):
            return method
    return None


def _takes_one_value(cls: type, method: str) -> bool:
    """Can ``instance.<method>(value)`` be called with a single argument?

    Methods of the same name with another signature (``set(key, value)``)
    are not escape hatches.
    """
    func = getattr(cls, method)
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        # builtins without introspectable signatures
        return True
    static = isinstance(inspect.getattr_static(cls, method), (staticmethod, classmethod))
    args = (None,) if static or inspect.ismethod(func) else (None, None)
    try:
        sig.bind(*args)
    except TypeError:
        return False
    return True


#: ``hook(slot, value) -> value | None``; ``None`` means "node handled".
Hook = Callable[[Slot, Any], Any]


# ─────────────────────────────────────────────────────────────────────────────
# Handler system — kind-keyed dispatch table
# ─────────────────────────────────────────────────────────────────────────────


class ShapeMatcher(ABC):
    """Predicate: does this destination shape belong to the given node?

    Examples::

        KindMatcher(Kind.INT)   → kind is Kind.INT
        AlwaysMatcher()         → True
    """

    @abstractmethod
    def matches(self, kind: Kind, shape: Any) -> bool: ...


class BindHandler(ABC):
    """Bind one dynamic value into one slot.

    The handler is responsible for calling ``binder.bind_slot(...)`` for
    every child location it creates — there is no automatic recursion.
    """

    @abstractmethod
    def bind(self, slot: Slot, value: Any, binder: Binder) -> None:
        """Write *value* into *slot* or raise a ``BindError``."""


@dataclass
class HandlerNode:
    """Single entry in the dispatch table.

    Attributes:
        name:     Human-readable label (for debugging / introspection).
        priority: Higher = consulted first.  Built-ins use 10; the
                  unsupported-kind catch-all sits at -999.
        matcher:  Decides whether the node applies to a shape.
        handler:  Performs the bind.
    """

    name: str
    priority: int
    matcher: ShapeMatcher
    handler: BindHandler


class HandlerRegistry:
    """Priority-ordered, first-match dispatch table.

    ::

        registry.register(HandlerNode("int", 10, KindMatcher(Kind.INT), ScalarHandler("int")))
        handler = registry.resolve(Kind.INT, int)
    """

    def __init__(self) -> None:
        self._nodes: List[HandlerNode] = []

    # -- registration -------------------------------------------------------

    def register(self, node: HandlerNode) -> None:
        """Add a node.  Among equal priorities, earlier registrations win."""
        self._nodes.append(node)
        self._nodes.sort(key=lambda n: n.priority, reverse=True)

    def unregister(self, name: str) -> None:
        """Remove every node called *name*."""
        self._nodes = [n for n in self._nodes if n.name != name]

    # -- dispatch -----------------------------------------------------------

    def resolve(self, kind: Kind, shape: Any) -> Optional[BindHandler]:
        """Return the handler of the first matching node, or ``None``."""
        for node in self._nodes:
            if node.matcher.matches(kind, shape):
                return node.handler
        return None

    # -- introspection ------------------------------------------------------

    def nodes(self) -> List[HandlerNode]:
        """Return nodes sorted by descending priority."""
        return list(self._nodes)


# ─────────────────────────────────────────────────────────────────────────────
# Options
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BindOptions:
    """Immutable binder configuration.

    Attributes:
        field_name:      ``(FieldInfo) -> (name, arg)``.  ``None`` → the
                         ``json`` tag, falling back to the attribute name.
        hook:            Called before every node is bound.  Returning
                         ``None`` marks the node as handled; returning a value
                         (possibly the same one) continues with it.
        slice_to_single: Bind the first element of a sequence source into a
                         destination that does not hold a sequence.  An empty
                         sequence leaves the destination untouched.
        single_to_slice: Wrap a non-sequence source into a one-element list
                         when the destination holds a sequence.
    """

    field_name: Optional[FieldNameFunc] = None
    hook: Optional[Hook] = None
    slice_to_single: bool = True
    single_to_slice: bool = True


def _holds_sequence(kind: Kind, shape: Any) -> bool:
    if kind is Kind.POINTER:
        inner = pointee(shape)
        return _holds_sequence(kind_of(inner), inner)
    return kind in (Kind.LIST, Kind.ARRAY, Kind.OPEN)


def _in_place(value: Any) -> bool:
    """Can *value* be bound into without replacing the object itself?"""
    cls = type(value)
    if kind_of(cls) is Kind.RECORD and not is_frozen(cls):
        return True
    return capability_of(cls) is not None


# ─────────────────────────────────────────────────────────────────────────────
# Binder — orchestrator / public entry point
# ─────────────────────────────────────────────────────────────────────────────


class Binder:
    """Top-level orchestrator.  Holds the dispatch table, the scalar casters
    and the options, and walks one destination tree per ``bind`` call.

    A Binder keeps no per-call state, so one instance can serve any number
    of concurrent ``bind`` calls on disjoint destinations as long as its hook
    and field-name function are themselves free of shared mutable state.
    Use ``with_options`` to derive a differently configured binder.
    """

    def __init__(
            self,
            *,
            registry: HandlerRegistry,
            options: Optional[BindOptions] = None,
            casters: Optional[Mapping[str, Callable[[Any], Any]]] = None,
    ) -> None:
        self.registry = registry
        self.options = options or BindOptions()
        self.casters: dict[str, Callable[[Any], Any]] = {**BUILTIN_CASTERS, **(casters or {})}
        self._field_name = self.options.field_name or default_field_name

    def with_options(self, **changes: Any) -> Binder:
        """Return a new Binder sharing registry and casters, with *changes* applied."""
        return Binder(
            registry=self.registry,
            options=replace(self.options, **changes),
            casters=self.casters,
        )

    def field_name(self, info: FieldInfo) -> tuple[str, str]:
        return self._field_name(info)

    # -- public API ---------------------------------------------------------

    def bind(self, dest: Any, src: Any) -> None:
        """Bind *src* into *dest*.

        *dest* is either a ``Slot`` (``Ref(int)``, ``Ref(list[str])`` …) or a
        mutable record instance, which is populated in place.  Anything else
        raises ``UnwritableDestinationError``.
        """
        self.bind_slot(self._root(dest), src)

    def convert(self, shape: Any, src: Any) -> Any:
        """Bind *src* into a fresh ``Ref(shape)`` and return the result."""
        ref = Ref(shape)
        self.bind_slot(ref, src)
        return ref.value

    # -- engine -------------------------------------------------------------

    def _root(self, dest: Any) -> Slot:
        if isinstance(dest, Slot):
            if not dest.writable:
                raise UnwritableDestinationError(f"{dest!r} is not writable")
            return dest
        if dest is not None and _in_place(dest):
            return Ref(type(dest), dest)
        raise UnwritableDestinationError(
            f"{type(dest).__name__} must be a Slot or a mutable record instance"
        )

    def bind_slot(self, slot: Slot, src: Any) -> None:
        """Bind *src* into *slot*; the per-node dispatch algorithm."""
        if src is None:
            return

        if not slot.writable:
            held = slot.get()
            if held is None or not _in_place(held):
                logger.debug("skip unwritable slot %r", slot)
                return
            slot = Ref(type(held), held, path=slot.path)

        if self.options.hook is not None:
            src = self.options.hook(slot, src)
            if src is None:
                logger.debug("hook handled %r", slot)
                return

        kind = kind_of(slot.shape)

        if self.options.slice_to_single and not _holds_sequence(kind, slot.shape):
            if is_ordered_value(src):
                if not src:
                    return
                src = src[0]
                if src is None:
                    return

        if self._delegate(slot, src):
            return

        if is_assignable(src, slot.shape):
            slot.set(src)
            return

        handler = self.registry.resolve(kind, slot.shape)
        if handler is None:
            raise UnsupportedKindError(
                located(f"unsupported destination kind {shape_name(slot.shape)}", slot.path)
            )
        handler.bind(slot, src, self)

    def _delegate(self, slot: Slot, src: Any) -> bool:
        """Hand the node over to ``unmarshal_bind`` / ``set`` when the shape has one."""
        cls = record_class(slot.shape)
        method = capability_of(cls)
        if method is None:
            return False

        held = slot.get()
        target = held if isinstance(held, cls) else allocate(cls)
        logger.debug("delegate %r to %s.%s", slot, cls.__qualname__, method)
        getattr(target, method)(src)
        if target is not held:
            slot.set(target)
        return True
