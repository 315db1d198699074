"""Ordered-container handlers — growable (``list[T]``, ``set[T]``,
``tuple[T, ...]`` …) and fixed-size (``tuple[A, B, C]``) destinations.

Accepted sources are sequences other than ``str`` / ``bytes``, sets, and
any non-mapping object with ``__len__`` + ``__getitem__``.  Any other
source is wrapped into a one-element list when ``single_to_slice`` is
enabled and rejected with ``ShapeMismatchError`` otherwise.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
from typing import Any, List

from ..core import BindHandler, Binder
from ..errors import ShapeMismatchError, located
from ..shapes import (
    array_shapes, container_factory, element_shape, is_sequence_value, shape_name,
    zero_value,
)
from ..slots import Ref, Slot, index_path

logger = logging.getLogger(__name__)


def _elements(slot: Slot, value: Any, binder: Binder) -> List[Any]:
    if not is_sequence_value(value):
        if not binder.options.single_to_slice:
            raise ShapeMismatchError(located(
                f"cannot bind sequence to non-sequence source {type(value).__name__}", slot.path,
            ))
        return [value]
    if isinstance(value, (cabc.Sequence, cabc.Set)):
        return list(value)
    return [value[i] for i in range(len(value))]


class ListHandler(BindHandler):
    """Always builds a new container of the destination's own type, one
    element per source item (an empty source gives an empty container)."""

    def bind(self, slot: Slot, value: Any, binder: Binder) -> None:
        items = _elements(slot, value, binder)
        elem = element_shape(slot.shape)

        out = []
        for i, item in enumerate(items):
            ref = Ref(elem, path=index_path(slot.path, i))
            binder.bind_slot(ref, item)
            out.append(ref.value)
        try:
            container = container_factory(slot.shape)(out)
        except TypeError as exc:
            raise ShapeMismatchError(located(
                f"cannot build {shape_name(slot.shape)} from bound elements: {exc}", slot.path,
            )) from exc
        slot.set(container)


class ArrayHandler(BindHandler):
    """Binds ``min(len(destination), len(source))`` positions.

    Extra source items are dropped; destination positions beyond the source
    keep their current values.  A zero-length tuple is left alone.
    """

    def bind(self, slot: Slot, value: Any, binder: Binder) -> None:
        items = _elements(slot, value, binder)
        shapes = tuple(s for s in array_shapes(slot.shape) if s != ())
        if not shapes:
            return

        current = slot.get()
        if isinstance(current, tuple) and len(current) == len(shapes):
            values = list(current)
        else:
            values = [zero_value(s) for s in shapes]

        if len(items) > len(shapes):
            logger.debug(
                "truncating %d source items to %d at %r", len(items), len(shapes), slot.path,
            )
        for i, item in enumerate(items[:len(shapes)]):
            ref = Ref(shapes[i], values[i], path=index_path(slot.path, i))
            binder.bind_slot(ref, item)
            values[i] = ref.value
        slot.set(tuple(values))
