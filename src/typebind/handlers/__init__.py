"""Handlers sub-package — concrete BindHandler implementations, one module
per destination kind.

scalar      – bool, int, uint, float, str, duration and time slots
pointer     – ``Optional[T]``
open        – unions, Protocols, abstract and member-less classes
record      – dataclasses, NamedTuples, annotated classes
sequence    – growable and fixed-size ordered containers
mapping     – associative containers
unsupported – catch-all rejecting every other shape
"""

from .mapping import MapHandler
from .open import OpenHandler
from .pointer import PointerHandler
from .record import RecordHandler
from .scalar import ScalarHandler
from .sequence import ArrayHandler, ListHandler
from .unsupported import UnsupportedHandler

__all__ = [
    "ScalarHandler",
    "PointerHandler",
    "OpenHandler",
    "RecordHandler",
    "ListHandler",
    "ArrayHandler",
    "MapHandler",
    "UnsupportedHandler",
]
