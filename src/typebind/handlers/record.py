"""Record handler — dataclasses, NamedTuples and annotated classes.

Members are visited in declaration order (inherited members first, which is
how Python flattens a base record into its subclass).  For each member:

1. private (``_name``) members are skipped;
2. the field-name function yields ``(name, arg)``; an empty name ignores
   the member;
3. a record member tagged ``squash`` is bound from the *same* source, as if
   its members were declared on the parent (errors report the parent's path);
4. otherwise the source must be a mapping and ``source[name]``, when
   present, is bound into the member.

Mutable records are populated in place.  Frozen dataclasses and NamedTuples
are rebuilt with ``dataclasses.replace`` / ``_replace`` once all members
are bound; their ``init=False`` fields are left alone.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..core import BindHandler, Binder
from ..errors import ShapeMismatchError, located
from ..fields import is_squash
from ..shapes import (
    FieldInfo, Kind, allocate, fields_of, is_frozen, is_mapping_value, kind_of,
    rebuild, record_class, shape_name,
)
from ..slots import AttrSlot, Ref, Slot, join_path


class RecordHandler(BindHandler):
    def bind(self, slot: Slot, value: Any, binder: Binder) -> None:
        self._bind_record(slot, value, binder, slot.path)

    def _bind_record(self, slot: Slot, value: Any, binder: Binder, path: str) -> None:
        # *path* is the location members report; squashed records share their parent's
        cls = record_class(slot.shape)
        target = slot.get()
        if not isinstance(target, cls):
            target = allocate(cls)
            if not is_frozen(cls):
                slot.set(target)

        if not is_frozen(cls):
            self._bind_members(target, cls, value, binder, path, None)
            return

        changes: Dict[str, Any] = {}
        self._bind_members(target, cls, value, binder, path, changes)
        updated = rebuild(target, changes) if changes else target
        if updated is not slot.get():
            slot.set(updated)

    def _member(self, target: Any, info: FieldInfo, path: str, frozen: bool) -> Slot:
        if frozen:
            return Ref(info.shape, getattr(target, info.name, None), path=join_path(path, info.name))
        return AttrSlot(target, info, path=path)

    def _bind_members(
            self,
            target: Any,
            cls: type,
            value: Any,
            binder: Binder,
            path: str,
            changes: Optional[Dict[str, Any]],
    ) -> None:
        frozen = changes is not None
        for info in fields_of(cls):
            if not info.exported or (frozen and not info.init):
                continue
            name, arg = binder.field_name(info)
            if not name:
                continue

            member = self._member(target, info, path, frozen)
            if not member.writable:
                continue
            before = member.get()

            if is_squash(arg) and kind_of(info.shape) is Kind.RECORD:
                self._bind_record(member, value, binder, path)
            else:
                if not is_mapping_value(value):
                    raise ShapeMismatchError(located(
                        f"cannot bind record {shape_name(cls)} to non-associative source "
                        f"{type(value).__name__}",
                        path,
                    ))
                if name not in value.keys():
                    continue
                binder.bind_slot(member, value[name])

            if frozen and member.get() is not before:
                changes[info.name] = member.get()
