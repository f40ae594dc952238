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
"""Pagination request and sort types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from simplemapper.kernel.exceptions import PreconditionFailedException


@dataclass(frozen=True)
class Order:
    """A single sort order: property name + direction."""

    property: str
    direction: Literal["asc", "desc"] = "asc"

    @staticmethod
    def asc(property: str) -> Order:
        """Create an ascending order for the given property."""
        return Order(property=property, direction="asc")

    @staticmethod
    def desc(property: str) -> Order:
        """Create a descending order for the given property."""
        return Order(property=property, direction="desc")

    @property
    def is_descending(self) -> bool:
        return self.direction == "desc"

    def to_clause(self) -> str:
        """Render as an ``ORDER BY`` clause with a leading space."""
        suffix = " DESC" if self.is_descending else ""
        return f" ORDER BY {self.property}{suffix}"


def calculate_offset(page: int, size: int) -> int:
    """Number of rows to skip to reach *page* (1-based)."""
    return (page - 1) * size


@dataclass(frozen=True)
class Pageable:
    """Pagination request: 1-based page number and page size.

    Both values must be positive; anything else is a caller error raised
    before any query is issued.
    """

    page: int = 1
    size: int = 25

    def __post_init__(self) -> None:
        if self.page < 1:
            raise PreconditionFailedException(
                f"page must be >= 1, got {self.page}",
                code="PAGE_NUMBER_OUT_OF_RANGE",
                context={"page": self.page},
            )
        if self.size < 1:
            raise PreconditionFailedException(
                f"size must be >= 1, got {self.size}",
                code="PAGE_SIZE_OUT_OF_RANGE",
                context={"size": self.size},
            )

    @staticmethod
    def of(page: int, size: int) -> Pageable:
        """Create a pageable for the given page and size."""
        return Pageable(page=page, size=size)

    @property
    def offset(self) -> int:
        """Calculate the pagination offset."""
        return calculate_offset(self.page, self.size)

    def next(self) -> Pageable:
        """Return Pageable for next page."""
        return Pageable(page=self.page + 1, size=self.size)

    def previous(self) -> Pageable:
        """Return Pageable for previous page (min page 1)."""
        return Pageable(page=max(1, self.page - 1), size=self.size)
