"""Binding of already-extracted transport data into records.

Each helper binds one of the common request-data shapes with member names
read from *tag*:

* ``bind_struct_to_map``        – ``{"name": value}`` (decoded JSON, form dicts)
* ``bind_struct_to_string_map`` – ``{"name": "text"}`` (path parameters)
* ``bind_struct_to_query``      – ``{"name": ["v1", "v2"]}``
  (``urllib.parse.parse_qs`` output); single-value members take the first
  value
* ``bind_struct_to_headers``    – like the query form, matched on canonical
  header names (``x-request-id`` and ``X-REQUEST-ID`` both become
  ``X-Request-Id``)
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

import regex

from .api import get_default_binder
from .core import Binder
from .fields import field_name_with_tag
from .shapes import FieldInfo

_TOKEN_RE = regex.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def canonical_header_key(key: str) -> str:
    """``"content-type"`` → ``"Content-Type"``.

    Keys that are not valid header tokens (spaces, colons …) are returned
    unchanged.
    """
    if not _TOKEN_RE.fullmatch(key):
        return key
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


def _tagged(tag: str, binder: Optional[Binder]) -> Binder:
    return (binder or get_default_binder()).with_options(field_name=field_name_with_tag(tag))


def bind_struct_to_map(
        obj: Any, tag: str, data: Mapping[str, Any], *, binder: Optional[Binder] = None,
) -> None:
    _tagged(tag, binder).bind(obj, data)


def bind_struct_to_string_map(
        obj: Any, tag: str, data: Mapping[str, str], *, binder: Optional[Binder] = None,
) -> None:
    _tagged(tag, binder).bind(obj, data)


def bind_struct_to_query(
        obj: Any, tag: str, data: Mapping[str, Sequence[str]], *, binder: Optional[Binder] = None,
) -> None:
    _tagged(tag, binder).bind(obj, data)


def bind_struct_to_headers(
        obj: Any, tag: str, data: Mapping[str, Sequence[str]], *, binder: Optional[Binder] = None,
) -> None:
    """Bind header values; both member names and *data* keys are canonicalised."""
    resolve = field_name_with_tag(tag)

    def header_name(info: FieldInfo) -> Tuple[str, str]:
        name, arg = resolve(info)
        return (canonical_header_key(name) if name else ""), arg

    headers = {canonical_header_key(k): v for k, v in data.items()}
    (binder or get_default_binder()).with_options(field_name=header_name).bind(obj, headers)
