"""Binder factory — the single place where all pieces are assembled.

``build_default_binder`` is the recommended entry point for users who want a
fully functional Binder without hand-wiring the registry.

Customisation points:

* **tag / field_name** – how record members map to source keys.
* **hook**             – called before every node is bound.
* **casters**          – per-kind replacements for ``BUILTIN_CASTERS``.
* **slice_to_single / single_to_slice** – sequence ↔ scalar policies.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .core import BindOptions, Binder, HandlerNode, HandlerRegistry, Hook
from .fields import DEFAULT_TAG, FieldNameFunc, field_name_with_tag
from .handlers import (
    ArrayHandler, ListHandler, MapHandler, OpenHandler, PointerHandler,
    RecordHandler, ScalarHandler, UnsupportedHandler,
)
from .matchers import AlwaysMatcher, KindMatcher
from .shapes import Kind

_SCALAR_KINDS = (
    Kind.BOOL, Kind.INT, Kind.UINT, Kind.FLOAT, Kind.STR, Kind.DURATION, Kind.TIME,
)


def build_default_registry() -> HandlerRegistry:
    """Registry with one node per destination kind plus the catch-all."""
    registry = HandlerRegistry()

    for kind in _SCALAR_KINDS:
        registry.register(HandlerNode(
            name=kind.value, priority=10,
            matcher=KindMatcher(kind),
            handler=ScalarHandler(kind.value),
        ))

    registry.register(HandlerNode(
        name="pointer", priority=10,
        matcher=KindMatcher(Kind.POINTER),
        handler=PointerHandler(),
    ))
    registry.register(HandlerNode(
        name="open", priority=10,
        matcher=KindMatcher(Kind.OPEN),
        handler=OpenHandler(),
    ))
    registry.register(HandlerNode(
        name="record", priority=10,
        matcher=KindMatcher(Kind.RECORD),
        handler=RecordHandler(),
    ))
    registry.register(HandlerNode(
        name="array", priority=10,
        matcher=KindMatcher(Kind.ARRAY),
        handler=ArrayHandler(),
    ))
    registry.register(HandlerNode(
        name="list", priority=10,
        matcher=KindMatcher(Kind.LIST),
        handler=ListHandler(),
    ))
    registry.register(HandlerNode(
        name="map", priority=10,
        matcher=KindMatcher(Kind.MAP),
        handler=MapHandler(),
    ))
    registry.register(HandlerNode(
        name="unsupported", priority=-999,
        matcher=AlwaysMatcher(),
        handler=UnsupportedHandler(),
    ))
    return registry


def build_default_binder(
        *,
        tag: str = DEFAULT_TAG,
        field_name: FieldNameFunc | None = None,
        hook: Hook | None = None,
        casters: Mapping[str, Callable[[Any], Any]] | None = None,
        slice_to_single: bool = True,
        single_to_slice: bool = True,
) -> Binder:
    """Assemble a Binder with the standard handlers.

    What gets wired
    ---------------
    registry
        * ``ScalarHandler``      (priority 10) – bool, int, uint, float, str,
          duration, time; each through the caster of the same name.
        * ``PointerHandler``     (priority 10) – ``Optional[T]``.
        * ``OpenHandler``        (priority 10) – unions, Protocols, abstract
          and member-less classes.
        * ``RecordHandler``      (priority 10) – dataclasses, NamedTuples,
          annotated classes.
        * ``ArrayHandler``       (priority 10) – ``tuple[A, B, …]``.
        * ``ListHandler``        (priority 10) – lists, sets, ``tuple[T, ...]``.
        * ``MapHandler``         (priority 10) – dicts and mappings.
        * ``UnsupportedHandler`` (priority -999, catch-all).

    Args:
        tag:             Tag read for member names.  Ignored when
                         *field_name* is given.
        field_name:      Custom ``(FieldInfo) -> (name, arg)`` resolver.
        hook:            ``hook(slot, value) -> value | None`` run before
                         every node.
        casters:         Replacement casters keyed by kind name (``"int"``,
                         ``"duration"`` …).  ``None`` → ``BUILTIN_CASTERS``.
        slice_to_single: Bind the first element of a sequence source into a
                         non-sequence destination.
        single_to_slice: Wrap a non-sequence source into a one-element list
                         for a sequence destination.

    Returns:
        Fully wired ``Binder`` ready for use.

    Example::

        binder = build_default_binder(tag="query")
        ref = Ref(list[int])
        binder.bind(ref, ["1", "2"])
        # ref.value → [1, 2]
    """
    options = BindOptions(
        field_name=field_name or field_name_with_tag(tag),
        hook=hook,
        slice_to_single=slice_to_single,
        single_to_slice=single_to_slice,
    )
    return Binder(registry=build_default_registry(), options=options, casters=casters)
