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
"""SimpleMapper Data — filter building, pagination and document mapping.

Framework-agnostic types (FilterBuilder, Page, Pageable, ObjectMapper,
ports) are exported directly. The Couchbase adapter lives in
``simplemapper.data.adapters.couchbase``.
"""

from simplemapper.data.filter import FilterBuilder, render_full, render_where
from simplemapper.data.mapper import Column, Ignore, ObjectMapper
from simplemapper.data.page import Page, calculate_total_pages
from simplemapper.data.pageable import Order, Pageable, calculate_offset
from simplemapper.data.paged_query import PagedQueryExecutor, derive_count_query
from simplemapper.data.ports.outbound import KeyValuePort, QueryPort

__all__ = [
    "Column",
    "FilterBuilder",
    "Ignore",
    "KeyValuePort",
    "ObjectMapper",
    "Order",
    "Page",
    "PagedQueryExecutor",
    "Pageable",
    "QueryPort",
    "calculate_offset",
    "calculate_total_pages",
    "derive_count_query",
    "render_full",
    "render_where",
]
