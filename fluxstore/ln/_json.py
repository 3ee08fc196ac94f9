from collections.abc import Mapping
from typing import Any
from uuid import UUID

import orjson

__all__ = (
    "json_copy",
    "json_dumpb",
    "json_dumps",
)


def _default(obj: Any) -> Any:
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    if hasattr(obj, "serialize") and callable(obj.serialize):
        return obj.serialize()
    if isinstance(obj, Mapping):
        return dict(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def json_dumpb(obj: Any, *, sort_keys: bool = False) -> bytes:
    """Dump ``obj`` to JSON bytes with orjson."""
    option = orjson.OPT_NON_STR_KEYS
    if sort_keys:
        option |= orjson.OPT_SORT_KEYS
    return orjson.dumps(obj, default=_default, option=option)


def json_dumps(obj: Any, *, sort_keys: bool = False) -> str:
    return json_dumpb(obj, sort_keys=sort_keys).decode("utf-8")


def json_copy(obj: Any) -> Any:
    """Deep copy through a JSON round trip.

    The copy shares nothing with ``obj`` and only holds JSON types, which is
    what a serialized snapshot must look like.
    """
    return orjson.loads(json_dumpb(obj))
