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
"""Key-value document helpers over an ``acouchbase`` collection.

Documents are written with :meth:`ObjectMapper.to_document` and read back
with :meth:`ObjectMapper.map`. A missing key on :func:`get` yields ``None``;
every other SDK error propagates unchanged.
"""

from __future__ import annotations

from typing import Any, TypeVar

import structlog

from simplemapper.data.mapper import ObjectMapper
from simplemapper.kernel.exceptions import DocumentNotFoundException

T = TypeVar("T")

logger = structlog.get_logger(__name__)


def _not_found_errors() -> tuple[type[BaseException], ...]:
    try:
        from couchbase.exceptions import DocumentNotFoundException as SdkDocumentNotFound
    except ImportError:
        return (DocumentNotFoundException,)
    return (DocumentNotFoundException, SdkDocumentNotFound)


async def get(
    collection: Any,
    key: str,
    item_type: type[T] | None = None,
    *,
    mapper: ObjectMapper | None = None,
) -> Any | None:
    """Fetch the document stored under *key*, or ``None`` if there is none."""
    try:
        result = await collection.get(key)
    except _not_found_errors():
        logger.debug("couchbase.document_not_found", key=key)
        return None
    content = result.content_as[dict]
    if item_type is None:
        return content
    return (mapper or ObjectMapper()).map(content, item_type)


async def insert(collection: Any, key: str, document: Any, *, mapper: ObjectMapper | None = None) -> None:
    """Insert a new document; the SDK raises if *key* already exists."""
    await collection.insert(key, (mapper or ObjectMapper()).to_document(document))


async def upsert(collection: Any, key: str, document: Any, *, mapper: ObjectMapper | None = None) -> None:
    """Insert or overwrite the document under *key*."""
    await collection.upsert(key, (mapper or ObjectMapper()).to_document(document))


async def replace(collection: Any, key: str, document: Any, *, mapper: ObjectMapper | None = None) -> None:
    """Overwrite an existing document; the SDK raises if *key* is missing."""
    await collection.replace(key, (mapper or ObjectMapper()).to_document(document))


async def remove(collection: Any, key: str) -> None:
    """Delete the document under *key*."""
    await collection.remove(key)


class CouchbaseKeyValueAdapter:
    """:class:`KeyValuePort` backed by an ``acouchbase`` collection."""

    def __init__(self, collection: Any, *, mapper: ObjectMapper | None = None) -> None:
        self._collection = collection
        self._mapper = mapper or ObjectMapper()

    async def get(self, key: str) -> Any | None:
        return await get(self._collection, key, mapper=self._mapper)

    async def insert(self, key: str, document: Any) -> None:
        await insert(self._collection, key, document, mapper=self._mapper)

    async def upsert(self, key: str, document: Any) -> None:
        await upsert(self._collection, key, document, mapper=self._mapper)

    async def replace(self, key: str, document: Any) -> None:
        await replace(self._collection, key, document, mapper=self._mapper)

    async def remove(self, key: str) -> None:
        await remove(self._collection, key)
