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
"""Pagination configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from simplemapper.core.config import config_properties


@config_properties(prefix="simplemapper.pagination")
@dataclass
class PaginationProperties:
    """Page size limits (simplemapper.pagination.*)."""

    default_page_size: int = 25
    max_page_size: int = 1000

    def effective_page_size(self, requested: int | None = None) -> int:
        """Return the page size to use: the request (or the default), capped at the maximum."""
        page_size = requested if requested is not None else self.default_page_size
        return min(page_size, self.max_page_size)
