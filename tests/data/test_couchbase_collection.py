# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the Couchbase collection key-value helpers using an in-memory fake collection."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

import pytest

from simplemapper.data.adapters.couchbase import collection as kv
from simplemapper.data.adapters.couchbase.collection import CouchbaseKeyValueAdapter
from simplemapper.data.ports.outbound import KeyValuePort
from simplemapper.kernel.exceptions import DocumentNotFoundException


class Plan(enum.Enum):
    FREE = 0
    PRO = 1


@dataclass
class Member:
    id: str
    display_name: str
    plan: Plan = Plan.FREE


class FakeGetResult:
    def __init__(self, content: dict[str, Any]) -> None:
        self.content_as = {dict: content}


class FakeCollection:
    """Dict-backed stand-in for an acouchbase collection."""

    def __init__(self) -> None:
        self.docs: dict[str, dict[str, Any]] = {}

    async def get(self, key: str) -> FakeGetResult:
        if key not in self.docs:
            raise DocumentNotFoundException(key)
        return FakeGetResult(self.docs[key])

    async def insert(self, key: str, value: dict[str, Any]) -> None:
        if key in self.docs:
            raise KeyError(f"document exists: {key}")
        self.docs[key] = value

    async def upsert(self, key: str, value: dict[str, Any]) -> None:
        self.docs[key] = value

    async def replace(self, key: str, value: dict[str, Any]) -> None:
        if key not in self.docs:
            raise DocumentNotFoundException(key)
        self.docs[key] = value

    async def remove(self, key: str) -> None:
        if key not in self.docs:
            raise DocumentNotFoundException(key)
        del self.docs[key]


@pytest.fixture
def collection() -> FakeCollection:
    return FakeCollection()


class TestCollectionHelpers:
    @pytest.mark.asyncio
    async def test_insert_writes_document_conventions(self, collection: FakeCollection) -> None:
        await kv.insert(collection, "m::1", Member(id="1", display_name="Ada", plan=Plan.PRO))
        assert collection.docs["m::1"] == {"id": "1", "displayName": "Ada", "plan": "PRO"}

    @pytest.mark.asyncio
    async def test_get_maps_to_type(self, collection: FakeCollection) -> None:
        collection.docs["m::1"] = {"id": "1", "displayName": "Ada", "plan": "PRO"}
        member = await kv.get(collection, "m::1", Member)
        assert member == Member(id="1", display_name="Ada", plan=Plan.PRO)

    @pytest.mark.asyncio
    async def test_get_raw_content(self, collection: FakeCollection) -> None:
        collection.docs["k"] = {"a": 1}
        assert await kv.get(collection, "k") == {"a": 1}

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, collection: FakeCollection) -> None:
        assert await kv.get(collection, "missing", Member) is None

    @pytest.mark.asyncio
    async def test_insert_existing_propagates(self, collection: FakeCollection) -> None:
        await kv.insert(collection, "k", {"a": 1})
        with pytest.raises(KeyError):
            await kv.insert(collection, "k", {"a": 2})

    @pytest.mark.asyncio
    async def test_upsert_and_replace(self, collection: FakeCollection) -> None:
        await kv.upsert(collection, "k", Member(id="1", display_name="A"))
        await kv.replace(collection, "k", Member(id="1", display_name="B"))
        assert collection.docs["k"]["displayName"] == "B"

    @pytest.mark.asyncio
    async def test_replace_missing_propagates(self, collection: FakeCollection) -> None:
        with pytest.raises(DocumentNotFoundException):
            await kv.replace(collection, "missing", {"a": 1})

    @pytest.mark.asyncio
    async def test_remove(self, collection: FakeCollection) -> None:
        collection.docs["k"] = {"a": 1}
        await kv.remove(collection, "k")
        assert "k" not in collection.docs


class TestCouchbaseKeyValueAdapter:
    def test_is_key_value_port(self, collection: FakeCollection) -> None:
        assert isinstance(CouchbaseKeyValueAdapter(collection), KeyValuePort)

    @pytest.mark.asyncio
    async def test_round_trip(self, collection: FakeCollection) -> None:
        adapter = CouchbaseKeyValueAdapter(collection)
        await adapter.upsert("m::2", Member(id="2", display_name="Grace"))
        assert await adapter.get("m::2") == {"id": "2", "displayName": "Grace", "plan": "FREE"}
        await adapter.remove("m::2")
        assert await adapter.get("m::2") is None
