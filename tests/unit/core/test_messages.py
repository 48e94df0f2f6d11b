"""Unit tests for core/messages.py — message persistence and listing."""
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest

from core.exceptions import ValidationOrPersistenceFailure
from core.messages import Creator, MessageStore

CREATOR = Creator(id="u1", name="Alice", avatar_url="https://avatar.test/a.png")


@pytest.fixture
def store(db) -> MessageStore:
    return MessageStore(db, max_text_length=20)


class TestCreate:
    def test_persists_and_returns_model(self, store: MessageStore):
        msg = store.create(CREATOR, "hello", {"city": "Paris"})
        assert msg.text == "hello"
        assert msg.creator == CREATOR
        assert msg.geo == {"city": "Paris"}
        assert store.get(msg.id) == msg

    def test_geo_defaults_to_empty(self, store: MessageStore):
        assert store.create(CREATOR, "hello").geo == {}

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_missing_or_blank_text(self, store: MessageStore, text):
        with pytest.raises(ValidationOrPersistenceFailure) as info:
            store.create(CREATOR, text)
        assert info.value.errors[0]["loc"] == ["text"]
        assert store.list_recent() == []

    def test_text_over_limit(self, store: MessageStore):
        with pytest.raises(ValidationOrPersistenceFailure) as info:
            store.create(CREATOR, "x" * 21)
        assert info.value.errors[0]["type"] == "string_too_long"

    def test_non_object_geo(self, store: MessageStore):
        with pytest.raises(ValidationOrPersistenceFailure):
            store.create(CREATOR, "hello", ["not", "a", "dict"])

    def test_failure_payload_shape(self, store: MessageStore):
        with pytest.raises(ValidationOrPersistenceFailure) as info:
            store.create(CREATOR, "")
        payload = info.value.to_dict()
        assert payload["name"] == "ValidationError"
        assert payload["errors"]


class TestListRecent:
    def test_newest_first(self, store: MessageStore):
        ids = [store.create(CREATOR, f"m{i}").id for i in range(3)]
        assert [m.id for m in store.list_recent()] == list(reversed(ids))

    def test_pagination(self, store: MessageStore):
        texts = [f"m{i}" for i in range(12)]
        for t in texts:
            store.create(CREATOR, t)
        first = store.list_recent(0, 10)
        second = store.list_recent(1, 10)
        assert [m.text for m in first] == list(reversed(texts))[:10]
        assert [m.text for m in second] == ["m1", "m0"]
        assert store.list_recent(2, 10) == []

    def test_invalid_paging(self, store: MessageStore):
        with pytest.raises(ValueError):
            store.list_recent(-1, 10)
        with pytest.raises(ValueError):
            store.list_recent(0, 0)

    def test_get_unknown(self, store: MessageStore):
        assert store.get("missing") is None


def test_numeric_text_is_stored_as_string(store: MessageStore):
    assert store.create(CREATOR, 5).text == "5"
