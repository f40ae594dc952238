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
"""SimpleMapper — a thin data-access layer over the Couchbase Python SDK.

Fluent SQL++ filter building with parameter binding, paginated queries with
optional total counts, and JSON document mapping.
"""

from simplemapper.data import (
    Column,
    FilterBuilder,
    Ignore,
    ObjectMapper,
    Page,
    PagedQueryExecutor,
    Pageable,
)
from simplemapper.kernel.exceptions import (
    MappingException,
    PreconditionFailedException,
    QueryException,
    SimpleMapperException,
)

__version__ = "0.1.0"

__all__ = [
    "Column",
    "FilterBuilder",
    "Ignore",
    "MappingException",
    "ObjectMapper",
    "Page",
    "PagedQueryExecutor",
    "Pageable",
    "PreconditionFailedException",
    "QueryException",
    "SimpleMapperException",
]
