"""Associative-container handler — ``dict[K, V]``, ``Mapping[K, V]`` and
``dict`` subclasses.

A new container is always built.  Each entry's key and value are bound into
fresh ``K`` / ``V`` slots through the full engine, so both sides are
coerced like any other node.
"""

from __future__ import annotations

from typing import Any, Dict

from ..core import BindHandler, Binder
from ..errors import ShapeMismatchError, located
from ..shapes import container_factory, is_mapping_value, map_shapes
from ..slots import Ref, Slot, index_path


class MapHandler(BindHandler):
    def bind(self, slot: Slot, value: Any, binder: Binder) -> None:
        if not is_mapping_value(value):
            raise ShapeMismatchError(located(
                f"cannot bind map to non-map source {type(value).__name__}", slot.path,
            ))

        key_shape, value_shape = map_shapes(slot.shape)
        out: Dict[Any, Any] = {}
        for key in value.keys():
            path = index_path(slot.path, key)
            key_ref = Ref(key_shape, path=path)
            binder.bind_slot(key_ref, key)
            value_ref = Ref(value_shape, path=path)
            binder.bind_slot(value_ref, value[key])
            try:
                out[key_ref.value] = value_ref.value
            except TypeError as exc:
                raise ShapeMismatchError(located(
                    f"cannot use {type(key_ref.value).__name__} as a map key: {exc}", path,
                )) from exc
        slot.set(container_factory(slot.shape)(out))
