"""Runtime introspection of destination shapes.

The binder never knows its destination type statically; everything it needs
is derived here from ordinary Python annotations:

* ``kind_of``       – classify an annotation into a structural ``Kind``.
* ``fields_of``     – list the members of a record class (``FieldInfo``).
* ``zero_value``    – the value a freshly allocated slot starts with.
* ``is_assignable`` – can a source value be stored as-is, without coercion?

Plus small helpers for containers (element / key / value shapes and the
concrete constructor used to rebuild them) and for frozen records.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import enum
import inspect
import types
import typing
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Callable, Mapping, Tuple, Union

__all__ = [
    "Kind",
    "Unsigned",
    "FieldInfo",
    "kind_of",
    "strip_annotated",
    "pointee",
    "element_shape",
    "array_shapes",
    "map_shapes",
    "container_factory",
    "record_class",
    "fields_of",
    "zero_value",
    "allocate",
    "is_frozen",
    "rebuild",
    "is_assignable",
    "shape_name",
    "is_mapping_value",
    "is_ordered_value",
    "is_sequence_value",
]


class Kind(enum.Enum):
    """Structural kinds the dispatcher knows about."""

    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STR = "str"
    DURATION = "duration"
    TIME = "time"
    POINTER = "pointer"
    OPEN = "open"
    RECORD = "record"
    ARRAY = "array"
    LIST = "list"
    MAP = "map"
    UNSUPPORTED = "unsupported"


class Unsigned(int):
    """Non-negative integer.  Annotate a member with it to get unsigned coercion."""

    def __new__(cls, value: Any = 0) -> "Unsigned":
        obj = super().__new__(cls, value)
        if obj < 0:
            raise ValueError(f"{cls.__name__} cannot be negative: {value!r}")
        return obj


@dataclass(frozen=True)
class FieldInfo:
    """One declared member of a record class.

    Attributes:
        name:  Attribute name.
        shape: Declared annotation (``Annotated`` stripped).
        tags:  ``{tag_name: tag_value}`` collected from dataclass field
               metadata and ``Annotated[..., tag(...)]`` markers.
        owner: The record class that was introspected.
        init:  False for dataclass fields declared ``init=False``; such
               members cannot be passed to ``dataclasses.replace``.
    """

    name: str
    shape: Any
    tags: Mapping[str, str] = field(default_factory=dict)
    owner: Any = None
    init: bool = True

    @property
    def exported(self) -> bool:
        """Underscore-prefixed members are private and never written."""
        return not self.name.startswith("_")


# ─────────────────────────────────────────────────────────────────────────────
# Classification
# ─────────────────────────────────────────────────────────────────────────────

_NONE = type(None)
_SCALAR_BASES = (int, float, str, bytes)
_SEQUENCE_ORIGINS = (cabc.Sequence, cabc.Set)


def strip_annotated(shape: Any) -> Any:
    """``Annotated[T, ...]`` → ``T``."""
    while typing.get_origin(shape) is typing.Annotated:
        shape = typing.get_args(shape)[0]
    return shape


def _is_union(shape: Any) -> bool:
    return typing.get_origin(shape) in (Union, types.UnionType)


def _is_protocol(cls: type) -> bool:
    return bool(getattr(cls, "_is_protocol", False))


def _is_namedtuple(cls: type) -> bool:
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


def _declares_members(cls: type) -> bool:
    if dataclasses.is_dataclass(cls):
        return True
    return any(inspect.get_annotations(klass) for klass in cls.__mro__ if klass is not object)


def kind_of(shape: Any) -> Kind:
    """Classify *shape* into the structural ``Kind`` the dispatcher routes on."""
    shape = strip_annotated(shape)

    if shape is Any or shape is object or isinstance(shape, typing.TypeVar):
        return Kind.OPEN
    if _is_union(shape):
        return Kind.POINTER if _NONE in typing.get_args(shape) else Kind.OPEN

    origin = typing.get_origin(shape)
    if origin is not None:
        if origin is typing.Literal:
            return Kind.OPEN
        if origin is tuple:
            args = typing.get_args(shape)
            return Kind.LIST if len(args) == 2 and args[1] is Ellipsis else Kind.ARRAY
        if origin is cabc.Callable:
            return Kind.UNSUPPORTED
        if isinstance(origin, type):
            if issubclass(origin, cabc.Mapping):
                return Kind.MAP
            if issubclass(origin, _SEQUENCE_ORIGINS):
                return Kind.LIST
            return kind_of(origin)
        return Kind.UNSUPPORTED

    if not isinstance(shape, type):
        return Kind.UNSUPPORTED
    if issubclass(shape, bool):
        return Kind.BOOL
    if issubclass(shape, Unsigned):
        return Kind.UINT
    if issubclass(shape, int):
        return Kind.INT
    if issubclass(shape, float):
        return Kind.FLOAT
    if issubclass(shape, str):
        return Kind.STR
    if issubclass(shape, timedelta):
        return Kind.DURATION
    if issubclass(shape, datetime):
        return Kind.TIME
    if issubclass(shape, (bytes, bytearray, complex)) or shape is cabc.Callable:
        return Kind.UNSUPPORTED
    if issubclass(shape, cabc.Mapping):
        return Kind.MAP
    if _is_namedtuple(shape):
        return Kind.RECORD
    if issubclass(shape, _SEQUENCE_ORIGINS):
        return Kind.LIST
    if _is_protocol(shape) or inspect.isabstract(shape):
        return Kind.OPEN
    if _declares_members(shape):
        return Kind.RECORD
    return Kind.OPEN


# ─────────────────────────────────────────────────────────────────────────────
# Shape components
# ─────────────────────────────────────────────────────────────────────────────


def pointee(shape: Any) -> Any:
    """``Optional[T]`` → ``T`` (``Optional[A | B]`` → ``A | B``)."""
    args = tuple(a for a in typing.get_args(strip_annotated(shape)) if a is not _NONE)
    return args[0] if len(args) == 1 else Union[args]


def _generic_base_args(cls: type, base: type) -> Tuple[Any, ...]:
    """Type arguments a subclass passed to its generic *base* (``class Ints(list[int])``)."""
    for klass in cls.__mro__:
        for orig in getattr(klass, "__orig_bases__", ()):
            origin = typing.get_origin(orig)
            if isinstance(origin, type) and issubclass(origin, base):
                return typing.get_args(orig)
    return ()


def element_shape(shape: Any) -> Any:
    """Element annotation of a growable sequence shape (``Any`` when bare)."""
    shape = strip_annotated(shape)
    args = typing.get_args(shape)
    if args:
        return args[0]
    if isinstance(shape, type):
        base_args = _generic_base_args(shape, cabc.Iterable)
        if base_args:
            return base_args[0]
    return Any


def array_shapes(shape: Any) -> Tuple[Any, ...]:
    """Per-position annotations of a fixed-size ``tuple[A, B, C]``."""
    return typing.get_args(strip_annotated(shape))


def map_shapes(shape: Any) -> Tuple[Any, Any]:
    """``(key_shape, value_shape)`` of a mapping shape."""
    shape = strip_annotated(shape)
    args = typing.get_args(shape)
    if len(args) == 2:
        return args[0], args[1]
    if isinstance(shape, type):
        base_args = _generic_base_args(shape, cabc.Mapping)
        if len(base_args) == 2:
            return base_args[0], base_args[1]
    return Any, Any


def container_factory(shape: Any) -> Callable[[Any], Any]:
    """Concrete constructor used to rebuild a LIST or MAP destination."""
    shape = strip_annotated(shape)
    cls = typing.get_origin(shape) or shape
    if not isinstance(cls, type) or inspect.isabstract(cls):
        if isinstance(cls, type) and issubclass(cls, cabc.Mapping):
            return dict
        if isinstance(cls, type) and issubclass(cls, cabc.Set):
            return set
        return list
    return cls


def record_class(shape: Any) -> type:
    """The class behind a record shape (``Box[int]`` → ``Box``)."""
    shape = strip_annotated(shape)
    return typing.get_origin(shape) or shape


# ─────────────────────────────────────────────────────────────────────────────
# Record members
# ─────────────────────────────────────────────────────────────────────────────


def _tags_of(extras: Tuple[Any, ...], metadata: Mapping[str, Any]) -> dict[str, str]:
    tags = {k: v for k, v in metadata.items() if isinstance(k, str) and isinstance(v, str)}
    for extra in extras:
        if isinstance(extra, Mapping):
            tags.update((k, v) for k, v in extra.items() if isinstance(v, str))
    return tags


def _split(hint: Any) -> Tuple[Any, Tuple[Any, ...]]:
    if typing.get_origin(hint) is typing.Annotated:
        return strip_annotated(hint), typing.get_args(hint)[1:]
    return hint, ()


@lru_cache(maxsize=None)
def fields_of(cls: type) -> Tuple[FieldInfo, ...]:
    """Declared members of a record class, inherited members first.

    Dataclasses report their ``dataclasses.fields``; NamedTuples their
    ``_fields``; any other class every non-``ClassVar`` annotation along its
    MRO.
    """
    hints = typing.get_type_hints(cls, include_extras=True)

    if dataclasses.is_dataclass(cls):
        members = [(f.name, f.metadata, f.init) for f in dataclasses.fields(cls)]
    elif _is_namedtuple(cls):
        members = [(name, {}, True) for name in cls._fields]
    else:
        members = [
            (name, {}, True) for name, hint in hints.items()
            if typing.get_origin(hint) is not typing.ClassVar
        ]

    out = []
    for name, metadata, init in members:
        shape, extras = _split(hints.get(name, Any))
        out.append(FieldInfo(
            name=name, shape=shape, tags=_tags_of(extras, metadata), owner=cls, init=init,
        ))
    return tuple(out)


def is_frozen(cls: Any) -> bool:
    """Records whose members cannot be assigned one by one."""
    if not isinstance(cls, type):
        return False
    if _is_namedtuple(cls):
        return True
    params = getattr(cls, "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


def rebuild(target: Any, changes: Mapping[str, Any]) -> Any:
    """Return a copy of a frozen record with *changes* applied."""
    if _is_namedtuple(type(target)):
        return target._replace(**changes)
    return dataclasses.replace(target, **changes)


# ─────────────────────────────────────────────────────────────────────────────
# Zero values
# ─────────────────────────────────────────────────────────────────────────────


def allocate(cls: type) -> Any:
    """Build a zero-valued instance of a record (or escape-hatch) class.

    Members without a default receive ``zero_value`` of their annotation.
    Classes whose constructor still refuses to run are created with
    ``__new__`` and have their annotated members filled in directly.
    """
    if dataclasses.is_dataclass(cls):
        hints = {f.name: f.shape for f in fields_of(cls)}
        kwargs = {
            f.name: zero_value(hints[f.name])
            for f in dataclasses.fields(cls)
            if f.init and f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        }
        return cls(**kwargs)

    if _is_namedtuple(cls):
        defaults = cls._field_defaults
        return cls(**{
            f.name: defaults[f.name] if f.name in defaults else zero_value(f.shape)
            for f in fields_of(cls)
        })

    try:
        return cls()
    except TypeError:
        obj = cls.__new__(cls)
        for info in fields_of(cls):
            if not hasattr(obj, info.name):
                setattr(obj, info.name, zero_value(info.shape))
        return obj


def zero_value(shape: Any) -> Any:
    """Initial value of a freshly allocated slot of *shape*."""
    shape = strip_annotated(shape)
    kind = kind_of(shape)

    if kind in (Kind.BOOL, Kind.INT, Kind.UINT, Kind.FLOAT, Kind.STR):
        if issubclass(shape, enum.Enum):
            return None
        return shape()
    if kind is Kind.DURATION:
        return timedelta(0)
    if kind is Kind.RECORD:
        return allocate(record_class(shape))
    if kind is Kind.ARRAY:
        return tuple(zero_value(a) for a in array_shapes(shape))
    if kind in (Kind.LIST, Kind.MAP):
        return container_factory(shape)()
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Direct assignability
# ─────────────────────────────────────────────────────────────────────────────


def _isinstance(value: Any, cls: type) -> bool:
    try:
        return isinstance(value, cls)
    except TypeError:
        # non-runtime-checkable Protocols refuse isinstance()
        return False


def is_assignable(value: Any, shape: Any) -> bool:
    """Can *value* be stored into a slot of *shape* without any conversion?

    Scalars must match the destination class exactly (``True`` is not an
    ``int`` here); parametrised containers must match their container type
    and every element, key and value recursively.
    """
    shape = strip_annotated(shape)

    if shape is Any or shape is object:
        return True
    if isinstance(shape, typing.TypeVar):
        bound = shape.__bound__
        return bound is None or is_assignable(value, bound)
    if _is_union(shape):
        return any(is_assignable(value, arg) for arg in typing.get_args(shape))

    origin = typing.get_origin(shape)
    if origin is None:
        if shape is _NONE:
            return value is None
        if not isinstance(shape, type):
            return False
        if issubclass(shape, _SCALAR_BASES):
            return type(value) is shape
        return _isinstance(value, shape)

    if origin is typing.Literal:
        return any(type(value) is type(a) and value == a for a in typing.get_args(shape))
    if not isinstance(origin, type):
        return False
    if inspect.isabstract(origin):
        if not _isinstance(value, origin) or isinstance(value, (str, bytes)):
            return False
    elif type(value) is not origin:
        return False

    args = typing.get_args(shape)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return all(is_assignable(v, args[0]) for v in value)
        return len(value) == len(args) and all(
            is_assignable(v, a) for v, a in zip(value, args)
        )
    if issubclass(origin, cabc.Mapping):
        key, val = args if len(args) == 2 else (Any, Any)
        return all(is_assignable(k, key) and is_assignable(v, val) for k, v in value.items())
    if issubclass(origin, _SEQUENCE_ORIGINS):
        elem = args[0] if args else Any
        return all(is_assignable(v, elem) for v in value)
    return True


def shape_name(shape: Any) -> str:
    """Human-readable name used in error messages."""
    shape = strip_annotated(shape)
    if isinstance(shape, type) and typing.get_origin(shape) is None:
        return shape.__qualname__
    return repr(shape).replace("typing.", "")


# ─────────────────────────────────────────────────────────────────────────────
# Source classification
# ─────────────────────────────────────────────────────────────────────────────

_TEXT = (str, bytes, bytearray)


def is_mapping_value(value: Any) -> bool:
    """Associative source: any ``Mapping`` or an object with ``keys()`` + ``__getitem__``."""
    if isinstance(value, cabc.Mapping):
        return True
    return callable(getattr(value, "keys", None)) and hasattr(value, "__getitem__")


def is_ordered_value(value: Any) -> bool:
    """Ordered sequence source, as considered for collapsing to a single element."""
    return (
        isinstance(value, cabc.Sequence)
        and not isinstance(value, _TEXT)
        and not _is_namedtuple(type(value))
    )


def is_sequence_value(value: Any) -> bool:
    """Source a container binder can iterate: sequences, sets, and indexables."""
    if isinstance(value, _TEXT) or is_mapping_value(value):
        return False
    if isinstance(value, (cabc.Sequence, cabc.Set)):
        return True
    return hasattr(value, "__len__") and hasattr(value, "__getitem__")
