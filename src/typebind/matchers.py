"""Shared ShapeMatcher implementations.

Exports
-------
KindMatcher
    Match by the structural ``Kind`` of the destination shape.  Every
    built-in handler node uses one.

TypeMatcher
    Match destination classes that subclass one of the given classes.  The
    usual way to mount a custom handler for a user type.

AlwaysMatcher
    Unconditional match — catch-all / fallback sentinel.
"""

from __future__ import annotations

from typing import Any

from .core import ShapeMatcher
from .shapes import Kind, record_class


class KindMatcher(ShapeMatcher):
    """Match a shape by its structural kind.

    ::

        KindMatcher(Kind.INT).matches(Kind.INT, int)                 # True
        KindMatcher(Kind.LIST, Kind.ARRAY).matches(Kind.MAP, dict)   # False
    """

    def __init__(self, *kinds: Kind) -> None:
        self._kinds = frozenset(kinds)

    def matches(self, kind: Kind, shape: Any) -> bool:
        return kind in self._kinds


class TypeMatcher(ShapeMatcher):
    """Match a shape whose class is a subclass of one of *classes*.

    Parametrised shapes match through their origin (``Box[int]`` → ``Box``).

    ::

        TypeMatcher(Decimal).matches(Kind.OPEN, Decimal)   # True
    """

    def __init__(self, *classes: type) -> None:
        self._classes = classes

    def matches(self, kind: Kind, shape: Any) -> bool:
        cls = record_class(shape)
        return isinstance(cls, type) and issubclass(cls, self._classes)


class AlwaysMatcher(ShapeMatcher):
    """Unconditional match — use as a catch-all / fallback node."""

    def matches(self, kind: Kind, shape: Any) -> bool:
        return True
