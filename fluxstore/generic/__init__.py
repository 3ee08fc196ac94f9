from ._concepts import Handler, Observable, WildcardHandler
from .emitter import Canceler, EventEmitter
from .ids import next_client_id, resolve_identity

__all__ = (
    "Canceler",
    "EventEmitter",
    "Handler",
    "Observable",
    "WildcardHandler",
    "next_client_id",
    "resolve_identity",
)
