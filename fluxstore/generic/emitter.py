# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Literal

from .._errors import ValidationError
from ..config import settings
from ._concepts import Handler

__all__ = ("Canceler", "EventEmitter")

logger = logging.getLogger(__name__)


class _Listener:
    __slots__ = ("handler", "active")

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.active = True


class Canceler:
    """Handle returned by :meth:`EventEmitter.on`.

    Calling it unregisters the listener from every event name it was
    registered under. Calling it again is a no-op.
    """

    __slots__ = ("_emitter", "_entries")

    def __init__(
        self,
        emitter: EventEmitter,
        entries: list[tuple[str, _Listener]],
    ) -> None:
        self._emitter = emitter
        self._entries = entries

    @property
    def active(self) -> bool:
        return any(listener.active for _, listener in self._entries)

    def __call__(self) -> bool:
        """Unsubscribe. Returns True if anything was still registered."""
        removed = False
        for event_name, listener in self._entries:
            if listener.active:
                self._emitter._detach(event_name, listener)
                removed = True
        return removed

    def __repr__(self) -> str:
        names = [name for name, _ in self._entries]
        return f"Canceler(events={names}, active={self.active})"


class EventEmitter:
    """Synchronous, per-instance pub/sub.

    Listeners registered under the wildcard name receive every event as
    ``handler(event_name, *args)``; named listeners receive ``handler(*args)``.
    Dispatch iterates over a snapshot, so a listener added while an event is
    being emitted first fires on the next emit, while a listener canceled
    mid-dispatch is skipped right away.

    With ``listener_errors="log"`` a failing listener is logged and the
    remaining listeners still run, as a broadcaster would; the default
    ``"raise"`` lets the exception reach the caller of :meth:`emit`.
    """

    __slots__ = ("_listeners", "_wildcard", "_listener_errors")

    def __init__(
        self,
        *,
        wildcard: str | None = None,
        listener_errors: Literal["raise", "log"] | None = None,
    ) -> None:
        self._listeners: dict[str, list[_Listener]] = {}
        self._wildcard = wildcard or settings.WILDCARD_EVENT
        self._listener_errors = listener_errors or settings.LISTENER_ERRORS

    @property
    def wildcard(self) -> str:
        return self._wildcard

    def on(self, event_names: str | Iterable[str], handler: Handler) -> Canceler:
        """Register ``handler`` for one or more event names."""
        if not callable(handler):
            raise ValidationError.from_value(handler, expected="callable")
        names = [event_names] if isinstance(event_names, str) else list(event_names)
        if not names or not all(isinstance(n, str) and n for n in names):
            raise ValidationError.from_value(
                event_names, expected="non-empty event name(s)"
            )

        entries = []
        for name in names:
            listener = _Listener(handler)
            self._listeners.setdefault(name, []).append(listener)
            entries.append((name, listener))
        return Canceler(self, entries)

    def on_any(self, handler: Handler) -> Canceler:
        return self.on(self._wildcard, handler)

    def _detach(self, event_name: str, listener: _Listener) -> None:
        listener.active = False
        bucket = self._listeners.get(event_name)
        if bucket is None:
            return
        # identity, handlers may compare equal
        bucket[:] = [x for x in bucket if x is not listener]
        if not bucket:
            del self._listeners[event_name]

    def emit(self, event_name: str, *args) -> None:
        if event_name == self._wildcard:
            raise ValidationError(
                f"Cannot emit the wildcard event {event_name!r}",
                details={"event": event_name},
            )
        named = list(self._listeners.get(event_name, ()))
        wild = list(self._listeners.get(self._wildcard, ()))

        for listener in named:
            if listener.active:
                self._dispatch(event_name, listener, args)
        for listener in wild:
            if listener.active:
                self._dispatch(event_name, listener, (event_name, *args))

    def trigger_events(self, event_names: Iterable[str], *args) -> None:
        """Emit each name in order with the same arguments."""
        for name in event_names:
            self.emit(name, *args)

    def _dispatch(self, event_name: str, listener: _Listener, args: tuple) -> None:
        if self._listener_errors == "raise":
            listener.handler(*args)
            return
        try:
            listener.handler(*args)
        except Exception as e:
            logger.error(
                f"Error in listener for event {event_name!r}: {e}",
                exc_info=True,
            )

    def listener_count(self, event_name: str | None = None) -> int:
        """Count listeners for one event name, or for all names."""
        if event_name is not None:
            return len(self._listeners.get(event_name, ()))
        return sum(len(bucket) for bucket in self._listeners.values())

    def clear(self) -> None:
        for bucket in self._listeners.values():
            for listener in bucket:
                listener.active = False
        self._listeners.clear()
