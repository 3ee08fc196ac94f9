# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from functools import cmp_to_key
from typing import Any

from pydantic import Field, PrivateAttr

from .._errors import ItemNotFoundError, SubscriptionLeakError, ValidationError
from ..config import settings
from ..generic.emitter import Canceler
from ..generic.ids import resolve_identity
from ..ln import json_copy, strict_equal
from .record import CLIENT_ID_KEY, Record

__all__ = ("CollectionStore",)

logger = logging.getLogger(__name__)

_MISSING = object()


class CollectionStore(Record):
    """An ordered collection of uniquely identified records.

    The collection is a record itself: ``data`` holds collection-level
    attributes and it emits its own events. Every event a member emits is
    re-emitted here as ``"stores:<event name>"`` with the same arguments,
    and structural changes emit ``"add"`` / ``"remove"`` followed by
    ``"change"``.

    Each member has exactly one proxy subscription, tracked by client id
    and canceled when the member leaves the collection.

    Example::

        todos = CollectionStore(
            items=[{"id": 1, "title": "write"}, {"id": 2, "title": "ship"}],
            comparator=lambda a, b: a.data["id"] - b.data["id"],
        )
        todos.on("stores:change", render)
        todos.find(1).set_attribute("done", True)
    """

    comparator: Callable[[Any, Any], int] | None = Field(
        default=None, exclude=True
    )
    """cmp-style ordering; when set, items are re-sorted after every insert."""

    record_type: type[Record] = Field(default=Record, exclude=True)
    """Class used to build records from raw payloads."""

    record_defaults: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Base configuration merged into every record built from a payload."""

    proxy_prefix: str = Field(
        default_factory=lambda: settings.PROXY_EVENT_PREFIX, exclude=True
    )

    _items: list[Record] = PrivateAttr(default_factory=list)
    _cancelers: dict[str, Canceler] = PrivateAttr(default_factory=dict)

    def __init__(self, items: Iterable[Any] | None = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.initialize(items or [])

    def initialize(self, items: Iterable[Any] = ()) -> None:
        """Start over from empty state, then bulk sync ``items``.

        Subscriptions held for the previous items are dropped, not canceled;
        use :meth:`reset` to replace the contents of a live collection.
        """
        self._items = []
        self._cancelers = {}
        self.set_items(items)

    # mutation

    def add_many(self, items: Iterable[Any]) -> list[Record]:
        """Add each item in order. Items added before a failure stay added."""
        return [self.add(item) for item in items]

    def add(self, item: Record | Mapping[str, Any]) -> Record:
        """Add a record or a raw payload.

        If a member already has the same ``id`` it is returned unchanged and
        no event fires. Records without an ``id`` never count as duplicates.
        """
        return self._insert(self._to_record(item))

    def adopt(self, record: Record) -> Record:
        """Add an already constructed record."""
        if not isinstance(record, Record):
            raise ValidationError.from_value(record, expected="Record")
        return self._insert(record)

    def set_items(self, items: Iterable[Any]) -> None:
        """Update the members matching ``items`` and add the rest.

        A match is found by ``id`` or else client id, and the matched member
        is updated in place, keeping its identity and subscription. Members
        absent from ``items`` are left alone. In-place updates do not
        re-sort; call :meth:`resort` if they changed the sort keys.
        """
        for item in items:
            if isinstance(item, Record):
                payload = item.data
            elif isinstance(item, Mapping):
                payload = item
            else:
                raise ValidationError.from_value(
                    item, expected="Record or mapping"
                )

            existing = self.find(resolve_identity(item))
            if existing is None:
                self.add(item)
            elif existing is not item:
                existing.apply_update(payload)

    def reset(self, items: Iterable[Any]) -> list[Record]:
        """Replace every member with ``items``."""
        self.remove_all()
        return self.add_many(items)

    def remove_all(self) -> None:
        """Cancel every member's subscription and empty the collection.

        Every cancellation is attempted even when some fail. If any did, the
        collection is still emptied and :class:`SubscriptionLeakError` is
        raised instead of emitting events.
        """
        failures: list[Exception] = []
        for record in reversed(self._items):
            try:
                self._cancel(record)
            except Exception as e:
                failures.append(e)

        for client_id, canceler in list(self._cancelers.items()):
            canceler()
            failures.append(
                SubscriptionLeakError(
                    f"Subscription held for non-member {client_id!r}",
                    details={"client_id": client_id},
                )
            )

        count = len(self._items)
        self._items = []
        self._cancelers = {}

        if failures:
            raise SubscriptionLeakError(
                f"{len(failures)} subscription(s) could not be released",
                details={"removed": count, "failures": len(failures)},
                cause=(
                    failures[0]
                    if len(failures) == 1
                    else ExceptionGroup("subscription release failures", failures)
                ),
            )

        logger.debug(f"Removed all {count} record(s) from {self.client_id}")
        self.trigger_events(("remove", "change"))

    def remove(self, record: Record | Any) -> Record | None:
        """Remove a member, given as a record or an ``id``/client id.

        Returns the removed record, or None when it is not a member. A member
        without a live subscription is still removed, then
        :class:`SubscriptionLeakError` is raised instead of emitting events.
        """
        target = record if isinstance(record, Record) else self.find(record)
        if target is None:
            return None

        index = self._index_of(target)
        if index is None:
            return None

        try:
            self._cancel(target)
        finally:
            # the member leaves even when its subscription was already gone
            del self._items[index]

        logger.debug(f"Removed {target!r} from {self.client_id}")
        self.trigger_events(("remove", "change"))
        return target

    def resort(self) -> None:
        """Re-apply the comparator, e.g. after in-place updates to sort keys."""
        if self.comparator is None:
            return
        self._sort()
        self.emit("sort")

    # queries

    def find(self, identity: Any) -> Record | None:
        """Find a member by ``id``, falling back to client id."""
        if not identity:
            return None
        found = self.find_where({"id": identity})
        if found is not None:
            return found
        for record in self._items:
            if record.client_id == identity:
                return record
        return None

    def find_where(self, criteria: Mapping[str, Any] | None) -> Record | None:
        found = self.where(criteria, True)
        return found[0] if found else None

    def where(
        self,
        criteria: Mapping[str, Any] | None,
        stop_on_first_match: bool = False,
    ) -> list[Record]:
        """Members whose data matches every key/value pair of ``criteria``.

        Empty or missing criteria match nothing.
        """
        if not criteria:
            return []

        found = []
        for record in self._items:
            if all(
                strict_equal(record.data.get(key, _MISSING), value)
                for key, value in criteria.items()
            ):
                found.append(record)
                if stop_on_first_match:
                    break
        return found

    # serialization

    def serialize_items(self) -> list[Any]:
        return [record.serialize() for record in self._items]

    def serialize(self) -> dict[str, Any]:
        """Snapshot as ``{"data": {..., "clientId"}, "stores": [...]}``."""
        data = json_copy(self.data)
        data[CLIENT_ID_KEY] = self.client_id
        return {"data": data, "stores": self.serialize_items()}

    # container protocol

    @property
    def items(self) -> list[Record]:
        return list(self._items)

    @property
    def subscription_count(self) -> int:
        return len(self._cancelers)

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._items))

    def __contains__(self, item: Any) -> bool:
        if isinstance(item, Record):
            return self._index_of(item) is not None
        return self.find(item) is not None

    def __getitem__(self, key: int | slice) -> Record | list[Record]:
        if not isinstance(key, (int, slice)):
            raise TypeError(
                f"indices must be integers or slices, not {key.__class__.__name__}"
            )
        try:
            return self._items[key]
        except IndexError as e:
            raise ItemNotFoundError(
                f"No item at index {key}", details={"index": key}, cause=e
            ) from e

    def __repr__(self) -> str:
        return f"CollectionStore(client_id={self.client_id!r}, items={len(self._items)})"

    # internals

    def _to_record(self, item: Any) -> Record:
        if isinstance(item, Record):
            return item
        if isinstance(item, Mapping):
            defaults = dict(self.record_defaults)
            data = {**defaults.pop("data", {}), **item}
            return self.record_type.create(data, **defaults)
        raise ValidationError.from_value(item, expected="Record or mapping")

    def _insert(self, record: Record) -> Record:
        existing = self.find(record.id)
        if existing is not None:
            return existing
        for member in self._items:
            # the same record, added twice
            if member.client_id == record.client_id:
                return member

        self._items.append(record)
        self._cancelers[record.client_id] = record.subscribe_all(
            self._proxy_event
        )
        if self.comparator is not None:
            self._sort()

        logger.debug(f"Added {record!r} to {self.client_id}")
        self.trigger_events(("add", "change"))
        return record

    def _proxy_event(self, event_name: str, *args: Any) -> None:
        self.emit(f"{self.proxy_prefix}{event_name}", *args)

    def _cancel(self, record: Record) -> None:
        canceler = self._cancelers.pop(record.client_id, None)
        if canceler is None or not canceler():
            logger.error(
                f"No live subscription for {record!r} in {self.client_id}"
            )
            raise SubscriptionLeakError(
                f"No live subscription for record {record.client_id!r}",
                details={"client_id": record.client_id},
            )

    def _index_of(self, record: Record) -> int | None:
        for index, member in enumerate(self._items):
            if member is record:
                return index
        return None

    def _sort(self) -> None:
        self._items.sort(key=cmp_to_key(self.comparator))
