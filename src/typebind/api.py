"""Process-level convenience functions.

The default Binder is built lazily by ``build_default_binder()`` on first
use; an application may install its own with ``set_default_binder``.  Code
that needs a specific configuration should hold its own Binder instead.
"""

from __future__ import annotations

import threading
from typing import Any, Optional

from .core import Binder
from .factory import build_default_binder
from .fields import field_name_with_tag

_default: Optional[Binder] = None
_lock = threading.Lock()


def get_default_binder() -> Binder:
    global _default
    if _default is None:
        with _lock:
            if _default is None:
                _default = build_default_binder()
    return _default


def set_default_binder(binder: Binder) -> None:
    """Replace the process default used by ``bind`` and the adapters."""
    global _default
    if not isinstance(binder, Binder):
        raise TypeError(f"expected a Binder, got {type(binder).__name__}")
    with _lock:
        _default = binder


def bind(dest: Any, src: Any, *, binder: Optional[Binder] = None) -> None:
    """Bind *src* into *dest* with *binder*, or the process default."""
    (binder or get_default_binder()).bind(dest, src)


def bind_with_tag(dest: Any, src: Any, tag: str, *, binder: Optional[Binder] = None) -> None:
    """Like ``bind``, but member names are read from *tag* instead."""
    base = binder or get_default_binder()
    base.with_options(field_name=field_name_with_tag(tag)).bind(dest, src)
