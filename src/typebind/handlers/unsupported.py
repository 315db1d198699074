"""Unsupported-kind handler — the bottom of the dispatch table."""

from __future__ import annotations

from typing import Any

from ..core import BindHandler, Binder
from ..errors import UnsupportedKindError, located
from ..shapes import shape_name
from ..slots import Slot


class UnsupportedHandler(BindHandler):
    """Reject the node.

    Mounted at the lowest priority (-999) so that every shape no other node
    claims (``complex``, callables …) fails with ``UnsupportedKindError``.
    """

    def bind(self, slot: Slot, value: Any, binder: Binder) -> None:
        raise UnsupportedKindError(
            located(f"unsupported destination kind {shape_name(slot.shape)}", slot.path)
        )
