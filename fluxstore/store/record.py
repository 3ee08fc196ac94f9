# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from .._errors import ValidationError
from ..generic._concepts import Handler, Observable, WildcardHandler
from ..generic.emitter import Canceler, EventEmitter
from ..generic.ids import next_client_id
from ..ln import json_copy, json_dumps, strict_equal

__all__ = ("Record",)

CLIENT_ID_KEY = "clientId"
_MISSING = object()


class Record(BaseModel, Observable):
    """A single observable entity: a ``data`` mapping plus an event emitter.

    Identity is the domain ``id`` stored in ``data`` when there is one,
    otherwise the ``client_id`` assigned at construction.

    Updates go through :meth:`apply_update`, which emits ``"change:<key>"``
    with ``(new, old)`` for every key whose value changed and then a single
    ``"change"`` carrying the changed keys.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        extra="forbid",
        validate_assignment=True,
    )

    client_id: str = Field(
        default_factory=next_client_id, frozen=True, alias=CLIENT_ID_KEY
    )
    """Process-unique identifier, serialized as ``clientId``."""

    data: dict[str, Any] = Field(default_factory=dict)
    """The record's attributes."""

    _emitter: EventEmitter = PrivateAttr(default_factory=EventEmitter)

    @field_validator("data", mode="before")
    def _validate_data(cls, value: Any) -> dict[str, Any]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError(
                f"Record data must be a mapping, not {type(value).__name__}"
            )
        # clientId belongs to the record, not to its attributes
        return {k: v for k, v in value.items() if k != CLIENT_ID_KEY}

    @classmethod
    def create(cls, data: Mapping[str, Any] | None = None, **config: Any):
        """Build a record from raw attribute data and base configuration."""
        return cls(data=dict(data or {}), **config)

    @property
    def id(self) -> Any:
        """The domain identifier, or None for records not yet saved."""
        return self.data.get("id")

    def __bool__(self) -> bool:
        """Records are always considered truthy."""
        return True

    def __hash__(self) -> int:
        return hash(self.client_id)

    # events

    def subscribe(
        self, event_names: str | Iterable[str], handler: Handler
    ) -> Canceler:
        return self._emitter.on(event_names, handler)

    on = subscribe

    def subscribe_all(self, handler: WildcardHandler) -> Canceler:
        """Subscribe to every event; ``handler(event_name, *args)``."""
        return self._emitter.on_any(handler)

    def emit(self, event_name: str, *args: Any) -> None:
        self._emitter.emit(event_name, *args)

    def trigger_events(self, event_names: Iterable[str], *args: Any) -> None:
        self._emitter.trigger_events(event_names, *args)

    def listener_count(self, event_name: str | None = None) -> int:
        return self._emitter.listener_count(event_name)

    # attributes

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def apply_update(
        self, fields: Mapping[str, Any] | None = None, /, **kwargs: Any
    ) -> dict[str, Any]:
        """Merge ``fields`` into ``data`` and emit change events.

        Returns:
            The keys whose value actually changed, mapped to their new value.
        """
        if fields is not None and not isinstance(fields, Mapping):
            raise ValidationError.from_value(fields, expected="mapping")

        changed: dict[str, Any] = {}
        previous: dict[str, Any] = {}
        for key, value in {**(fields or {}), **kwargs}.items():
            if key == CLIENT_ID_KEY:
                continue
            old = self.data.get(key, _MISSING)
            if old is not _MISSING and strict_equal(old, value):
                continue
            self.data[key] = value
            changed[key] = value
            previous[key] = None if old is _MISSING else old

        self._emit_changes(changed, previous)
        return changed

    def set_attribute(self, key: str, value: Any) -> dict[str, Any]:
        return self.apply_update({key: value})

    def unset_attribute(self, key: str) -> dict[str, Any]:
        """Remove ``key`` from ``data``; emits with a new value of None."""
        if key not in self.data:
            return {}
        old = self.data.pop(key)
        changed = {key: None}
        self._emit_changes(changed, {key: old})
        return changed

    def _emit_changes(
        self, changed: dict[str, Any], previous: dict[str, Any]
    ) -> None:
        if not changed:
            return
        for key, value in changed.items():
            self.emit(f"change:{key}", value, previous[key])
        self.emit("change", dict(changed))

    # serialization

    def serialize(self) -> dict[str, Any]:
        """A JSON-safe deep copy of ``data`` with ``clientId`` merged in."""
        out = json_copy(self.data)
        out[CLIENT_ID_KEY] = self.client_id
        return out

    def to_json(self) -> str:
        return json_dumps(self.serialize())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client_id={self.client_id!r}, id={self.id!r})"
