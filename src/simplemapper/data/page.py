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
"""Pagination types for paginated query results."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


def calculate_total_pages(total: int, size: int) -> int:
    """``ceil(total / size)`` using real division; *size* must be >= 1."""
    return math.ceil(total / size)


@dataclass(frozen=True)
class Page(Generic[T]):
    """A page of results from a paginated query.

    Attributes:
        items: The items on this page. Rows that mapped to ``None`` (``null``
            documents) are left out, so ``items`` can be shorter than the
            rows the query returned.
        page: Current page number (1-based).
        size: Maximum items per page.
        total: Total number of items across all pages, or ``None`` when the
            count was not requested.
        has_more: Whether more items follow this page. Only consulted when
            ``total`` is ``None``.
    """

    items: list[T]
    page: int
    size: int
    total: int | None = None
    has_more: bool = field(default=False, repr=False)

    @property
    def total_pages(self) -> int | None:
        """Total number of pages, or ``None`` without a total count."""
        if self.total is None or self.size <= 0:
            return None
        return calculate_total_pages(self.total, self.size)

    @property
    def has_next(self) -> bool:
        """Whether there is a next page."""
        total_pages = self.total_pages
        if total_pages is not None:
            return self.page < total_pages
        return self.has_more

    @property
    def has_previous(self) -> bool:
        """Whether there is a previous page."""
        return self.page > 1

    def map(self, func: Callable[[T], U]) -> Page[U]:
        """Transform items using a mapping function, preserving pagination metadata."""
        return Page(
            items=[func(item) for item in self.items],
            page=self.page,
            size=self.size,
            total=self.total,
            has_more=self.has_more,
        )
