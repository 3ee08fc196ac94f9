# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import pytest

from fluxstore import CollectionStore, Record


class EventLog:
    """Records every event emitted by an observable, in order."""

    def __init__(self, target):
        self.events = []
        self.cancel = target.subscribe_all(self._record)

    def _record(self, name, *args):
        self.events.append((name, args))

    @property
    def names(self):
        return [name for name, _ in self.events]

    def clear(self):
        self.events.clear()


@pytest.fixture
def collection():
    return CollectionStore()


@pytest.fixture
def people():
    return CollectionStore(
        items=[
            {"id": 1, "name": "Ada", "team": "core"},
            {"id": 2, "name": "Grace", "team": "compilers"},
            {"id": 3, "name": "Linus", "team": "core"},
        ]
    )


@pytest.fixture
def event_log():
    def _watch(target):
        return EventLog(target)

    return _watch


@pytest.fixture
def record_factory():
    def _make(**data):
        return Record(data=data)

    return _make
