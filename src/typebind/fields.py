"""Field-name resolution — how a record member maps to a source key.

A *field name function* receives a ``FieldInfo`` and returns
``(name, arg)``:

* ``name == ""``   → the member is ignored.
* ``"squash"`` in ``arg`` → the member's own members are bound from the
  parent's source, as if flattened into the parent.

Tags are written ``"name,arg1,arg2"`` and attached either through dataclass
field metadata or through ``Annotated``::

    @dataclass
    class Query:
        page: int = field(default=1, metadata={"json": "p"})
        token: Annotated[str, tag(json="-")] = ""
        paging: Paging = field(default_factory=Paging, metadata={"json": ",squash"})

Exports
-------
tag, Tags                 – ``Annotated`` marker carrying tag values.
parse_tag                 – ``"name,arg"`` → ``("name", "arg")``.
is_squash                 – does an ``arg`` string request flattening?
field_name_with_tag       – resolver reading a single tag.
field_name_with_tags      – resolver trying several tags, first present wins.
default_field_name        – resolver for the ``json`` tag.
"""

from __future__ import annotations

from typing import Callable, Iterator, Mapping, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .shapes import FieldInfo

#: ``(FieldInfo) -> (name, arg)``
FieldNameFunc = Callable[["FieldInfo"], Tuple[str, str]]

SQUASH = "squash"
DEFAULT_TAG = "json"


class Tags(Mapping[str, str]):
    """Tag values attached to a member via ``Annotated[T, tag(...)]``.

    Immutable and hashable, since ``Annotated`` metadata may be hashed by
    ``typing`` when the annotation is nested inside a ``Union``.
    """

    def __init__(self, tags: Mapping[str, str]) -> None:
        self._tags = dict(tags)

    def __getitem__(self, key: str) -> str:
        return self._tags[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __hash__(self) -> int:
        return hash(frozenset(self._tags.items()))

    def __repr__(self) -> str:
        return f"tag({', '.join(f'{k}={v!r}' for k, v in self._tags.items())})"


def tag(**tags: str) -> Tags:
    """Build an ``Annotated`` marker: ``Annotated[int, tag(json="id", query="id")]``."""
    return Tags(tags)


def parse_tag(value: str) -> Tuple[str, str]:
    """Split a tag value into its name and the remaining argument string."""
    name, _, arg = value.partition(",")
    return name.strip(), arg.strip()


def is_squash(arg: str) -> bool:
    return SQUASH in (a.strip() for a in arg.split(","))


def field_name_with_tags(*tags: str) -> FieldNameFunc:
    """Resolver that reads the first of *tags* present on a member.

    Without any tag the member's attribute name is the key; a tag name of
    ``"-"`` ignores the member.
    """

    def get_field_name(info: FieldInfo) -> Tuple[str, str]:
        name, arg = "", ""
        for t in tags:
            if t in info.tags:
                name, arg = parse_tag(info.tags[t])
                break

        if name == "":
            name = info.name
        elif name == "-":
            name = ""
        return name, arg

    return get_field_name


def field_name_with_tag(tag_name: str) -> FieldNameFunc:
    return field_name_with_tags(tag_name)


default_field_name: FieldNameFunc = field_name_with_tag(DEFAULT_TAG)
