"""Exception taxonomy for the binding engine.

Every error is terminal for the enclosing ``bind`` call: the engine stops at
the first failing node and leaves whatever was already written in place.

Exports
-------
BindError
    Common base class.

UnwritableDestinationError
    The top-level destination is neither a ``Slot`` nor a mutable record.

UnsupportedKindError
    The destination shape has no registered handler (``complex``, callables …).

ShapeMismatchError
    Sequence / map / record destination fed an incompatible source.

CoercionError
    The scalar coercion service rejected the source; the original error is
    chained as ``__cause__``.

IncompatibleValueError
    An empty open slot cannot hold the source value as-is.
"""

from __future__ import annotations

from typing import Any


class BindError(Exception):
    """Base class for every error raised by the binder."""


class UnwritableDestinationError(BindError, TypeError):
    """The destination cannot be written to."""


class UnsupportedKindError(BindError, TypeError):
    """No handler is able to bind the destination shape."""


class ShapeMismatchError(BindError, TypeError):
    """The source value has the wrong structure for the destination."""


class IncompatibleValueError(BindError, TypeError):
    """An open slot cannot directly accept the source value."""


class CoercionError(BindError, ValueError):
    """A scalar conversion failed.

    Attributes:
        path:  Location of the failing node (``""`` for the root).
        value: The rejected source value.
        kind:  Name of the caster that was used (``"int"``, ``"duration"`` …).
    """

    def __init__(self, path: str, value: Any, kind: str) -> None:
        self.path = path
        self.value = value
        self.kind = kind
        super().__init__(located(f"cannot convert {type(value).__name__} {value!r} to {kind}", path))


def located(message: str, path: str) -> str:
    """Append the node location to *message* (``"... at 'items[0]'"``)."""
    return f"{message} at {path!r}" if path else message
