# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for Record."""

import json

import pydantic
import pytest

from fluxstore import Canceler, Record, ValidationError


class TestRecordCreation:
    def test_defaults(self):
        record = Record()
        assert record.data == {}
        assert record.id is None
        assert record.client_id.startswith("c")

    def test_client_ids_are_unique(self):
        ids = {Record().client_id for _ in range(50)}
        assert len(ids) == 50

    def test_create(self):
        record = Record.create({"id": 7, "name": "Ada"})
        assert record.id == 7
        assert record.data == {"id": 7, "name": "Ada"}

    def test_create_copies_payload(self):
        payload = {"id": 7}
        record = Record.create(payload)
        record.set_attribute("name", "Ada")
        assert payload == {"id": 7}

    def test_client_id_is_frozen(self):
        record = Record()
        with pytest.raises(pydantic.ValidationError):
            record.client_id = "other"

    def test_client_id_alias(self):
        record = Record(clientId="c-fixed")
        assert record.client_id == "c-fixed"

    def test_client_id_key_dropped_from_data(self):
        record = Record(data={"clientId": "c1", "name": "Ada"})
        assert record.data == {"name": "Ada"}

    def test_data_must_be_mapping(self):
        with pytest.raises(pydantic.ValidationError):
            Record(data=[1, 2])

    def test_always_truthy_and_hashable(self):
        record = Record()
        assert record
        assert {record: 1}[record] == 1


class TestApplyUpdate:
    def test_emits_per_key_then_change(self, event_log):
        record = Record(data={"name": "Ada", "team": "core"})
        log = event_log(record)

        changed = record.apply_update({"name": "Grace", "team": "core", "age": 3})

        assert changed == {"name": "Grace", "age": 3}
        assert record.data == {"name": "Grace", "team": "core", "age": 3}
        assert log.events == [
            ("change:name", ("Grace", "Ada")),
            ("change:age", (3, None)),
            ("change", ({"name": "Grace", "age": 3},)),
        ]

    def test_no_change_no_events(self, event_log):
        record = Record(data={"name": "Ada"})
        log = event_log(record)
        assert record.apply_update({"name": "Ada"}) == {}
        assert log.events == []

    @pytest.mark.parametrize("old, new", [(0, False), (1, True), (True, 1.0)])
    def test_bool_and_number_are_different_values(self, event_log, old, new):
        record = Record(data={"flag": old})
        log = event_log(record)

        assert record.apply_update({"flag": new}) == {"flag": new}

        assert record.data["flag"] is new
        assert log.events[0] == ("change:flag", (new, old))

    def test_keyword_fields(self):
        record = Record()
        record.apply_update(name="Ada")
        assert record.data == {"name": "Ada"}

    def test_client_id_is_ignored(self):
        record = Record()
        record.apply_update({"clientId": "other", "name": "Ada"})
        assert record.data == {"name": "Ada"}
        assert record.client_id != "other"

    def test_rejects_non_mapping(self):
        with pytest.raises(ValidationError):
            Record().apply_update(["name"])

    def test_unset_attribute(self, event_log):
        record = Record(data={"name": "Ada"})
        log = event_log(record)

        assert record.unset_attribute("name") == {"name": None}
        assert record.unset_attribute("name") == {}
        assert record.data == {}
        assert log.events == [
            ("change:name", (None, "Ada")),
            ("change", ({"name": None},)),
        ]


class TestRecordEvents:
    def test_named_subscription(self):
        record = Record()
        received = []
        cancel = record.subscribe("ping", lambda *args: received.append(args))

        record.emit("ping", 1, 2)
        record.emit("pong")

        assert isinstance(cancel, Canceler)
        assert received == [(1, 2)]

    def test_subscribe_to_several_names(self):
        record = Record()
        received = []
        cancel = record.on(["a", "b"], lambda: received.append(1))

        record.trigger_events(["a", "b", "c"])
        cancel()
        record.trigger_events(["a", "b"])

        assert received == [1, 1]
        assert record.listener_count() == 0

    def test_subscribe_all(self):
        record = Record()
        received = []
        record.subscribe_all(lambda name, *args: received.append((name, args)))

        record.emit("rename", {"old": "A"})

        assert received == [("rename", ({"old": "A"},))]


class TestRecordSerialization:
    def test_serialize(self):
        record = Record(data={"id": 1, "tags": ["a"]})
        assert record.serialize() == {
            "id": 1,
            "tags": ["a"],
            "clientId": record.client_id,
        }

    def test_serialize_is_a_copy(self):
        record = Record(data={"tags": ["a"]})
        record.serialize()["tags"].append("b")
        assert record.data == {"tags": ["a"]}

    def test_to_json(self):
        record = Record(data={"id": 1})
        assert json.loads(record.to_json()) == record.serialize()
