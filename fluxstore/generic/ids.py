import itertools
from collections.abc import Mapping
from typing import Any

from ._concepts import Observable

__all__ = (
    "next_client_id",
    "resolve_identity",
)

_client_ids = itertools.count(1)


def next_client_id(prefix: str = "c") -> str:
    """Return a client id that is unique for the life of the process."""
    return f"{prefix}{next(_client_ids)}"


def resolve_identity(item: Any) -> Any:
    """The domain ``id`` of a record or raw payload, else its client id.

    Raw payloads carry the client id under ``"clientId"``, which is the key
    they are serialized with. Returns None when neither is present.
    """
    if isinstance(item, Observable):
        return item.id or item.client_id
    if isinstance(item, Mapping):
        return item.get("id") or item.get("clientId")
    return None
