"""typebind — bind loosely-typed dynamic values into annotated Python types.

::

    @dataclass
    class Query:
        page: int = 0
        tags: list[str] = field(default_factory=list)

    q = Query()
    bind(q, {"page": "2", "tags": "a"})
    # Query(page=2, tags=['a'])
"""

from .adapters import (
    bind_struct_to_headers,
    bind_struct_to_map,
    bind_struct_to_query,
    bind_struct_to_string_map,
    canonical_header_key,
)
from .api import bind, bind_with_tag, get_default_binder, set_default_binder
from .casters import BUILTIN_CASTERS, format_duration, parse_duration
from .core import (
    BindHandler,
    BindOptions,
    Binder,
    HandlerNode,
    HandlerRegistry,
    Hook,
    Setter,
    ShapeMatcher,
    Unmarshaler,
)
from .errors import (
    BindError,
    CoercionError,
    IncompatibleValueError,
    ShapeMismatchError,
    UnsupportedKindError,
    UnwritableDestinationError,
)
from .factory import build_default_binder, build_default_registry
from .fields import (
    FieldNameFunc,
    Tags,
    default_field_name,
    field_name_with_tag,
    field_name_with_tags,
    tag,
)
from .matchers import AlwaysMatcher, KindMatcher, TypeMatcher
from .shapes import FieldInfo, Kind, Unsigned, fields_of, kind_of
from .slots import AttrSlot, Ref, Slot

__all__ = [
    # entry points
    "bind",
    "bind_with_tag",
    "get_default_binder",
    "set_default_binder",
    "build_default_binder",
    "build_default_registry",
    # engine
    "Binder",
    "BindOptions",
    "Hook",
    "HandlerRegistry",
    "HandlerNode",
    "ShapeMatcher",
    "BindHandler",
    "KindMatcher",
    "TypeMatcher",
    "AlwaysMatcher",
    # escape hatches
    "Setter",
    "Unmarshaler",
    # slots and shapes
    "Slot",
    "Ref",
    "AttrSlot",
    "Kind",
    "Unsigned",
    "FieldInfo",
    "fields_of",
    "kind_of",
    # field names
    "FieldNameFunc",
    "Tags",
    "tag",
    "default_field_name",
    "field_name_with_tag",
    "field_name_with_tags",
    # casters
    "BUILTIN_CASTERS",
    "parse_duration",
    "format_duration",
    # adapters
    "bind_struct_to_map",
    "bind_struct_to_string_map",
    "bind_struct_to_query",
    "bind_struct_to_headers",
    "canonical_header_key",
    # errors
    "BindError",
    "UnwritableDestinationError",
    "UnsupportedKindError",
    "ShapeMismatchError",
    "CoercionError",
    "IncompatibleValueError",
]
