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
"""Tests for Pageable and Order types."""

from __future__ import annotations

import pytest

from simplemapper.data.pageable import Order, Pageable, calculate_offset
from simplemapper.kernel.exceptions import PreconditionFailedException

# ---------------------------------------------------------------------------
# Order
# ---------------------------------------------------------------------------


class TestOrder:
    def test_asc_factory(self) -> None:
        order = Order.asc("name")
        assert order.property == "name"
        assert order.direction == "asc"
        assert order.to_clause() == " ORDER BY name"

    def test_desc_factory(self) -> None:
        order = Order.desc("age")
        assert order.is_descending
        assert order.to_clause() == " ORDER BY age DESC"

    def test_frozen(self) -> None:
        order = Order.asc("name")
        with pytest.raises(AttributeError):
            order.direction = "desc"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Pageable
# ---------------------------------------------------------------------------


class TestPageable:
    def test_defaults(self) -> None:
        pageable = Pageable()
        assert pageable.page == 1
        assert pageable.size == 25

    @pytest.mark.parametrize(
        ("page", "size", "offset"),
        [(1, 25, 0), (2, 25, 25), (5, 25, 100), (3, 7, 14), (10, 1, 9)],
    )
    def test_offset(self, page: int, size: int, offset: int) -> None:
        assert Pageable.of(page, size).offset == offset
        assert calculate_offset(page, size) == offset

    def test_offset_zero_only_on_first_page(self) -> None:
        assert Pageable.of(1, 50).offset == 0
        assert Pageable.of(2, 50).offset != 0

    @pytest.mark.parametrize(("page", "size"), [(0, 10), (-1, 10), (1, 0), (1, -5)])
    def test_rejects_non_positive_values(self, page: int, size: int) -> None:
        with pytest.raises(PreconditionFailedException):
            Pageable.of(page, size)

    def test_error_carries_code(self) -> None:
        with pytest.raises(PreconditionFailedException) as exc_info:
            Pageable.of(0, 10)
        assert exc_info.value.code == "PAGE_NUMBER_OUT_OF_RANGE"

    def test_next_and_previous(self) -> None:
        pageable = Pageable.of(2, 10)
        assert pageable.next() == Pageable.of(3, 10)
        assert pageable.previous() == Pageable.of(1, 10)
        assert Pageable.of(1, 10).previous() == Pageable.of(1, 10)
