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
"""Outbound ports: query execution and key-value document access."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class QueryPort(Protocol):
    """Executes a SQL++ statement with named parameters and returns its rows."""

    async def query(self, statement: str, parameters: dict[str, Any] | None = None) -> list[Any]: ...


@runtime_checkable
class KeyValuePort(Protocol):
    """Key-value document access. ``get`` returns ``None`` for a missing key."""

    async def get(self, key: str) -> Any | None: ...

    async def insert(self, key: str, document: Any) -> None: ...

    async def upsert(self, key: str, document: Any) -> None: ...

    async def replace(self, key: str, document: Any) -> None: ...

    async def remove(self, key: str) -> None: ...
