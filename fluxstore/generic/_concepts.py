from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, TypeAlias

__all__ = (
    "Observable",
    "Handler",
    "WildcardHandler",
)

Handler: TypeAlias = Callable[..., Any]
"""A named-event listener, called with the emitted arguments."""

WildcardHandler: TypeAlias = Callable[..., Any]
"""A wildcard listener, called with the event name then the arguments."""


class Observable(ABC):
    """A marker interface for entities that can be subscribed to."""

    @abstractmethod
    def subscribe(self, event_names: Any, handler: Handler) -> Any: ...

    @abstractmethod
    def subscribe_all(self, handler: WildcardHandler) -> Any: ...
