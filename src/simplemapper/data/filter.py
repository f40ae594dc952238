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
"""Fluent builder for SQL++ filter clauses with positional parameter binding.

:class:`FilterBuilder` accumulates WHERE-clause fragments in insertion order
and binds every value to a generated named parameter (``$p0``, ``$p1``, ...)
so no value is ever interpolated into the statement text.  The builder then
renders either the bare condition list or a complete query suffix.

Example::

    builder = (
        FilterBuilder()
        .where("type", "user")
        .where_greater_than("age", 18)
        .where_in("status", ["active", "pending"])
        .order_by("createdAt", descending=True)
        .take(25)
    )
    statement = "SELECT * FROM `app`.`users`.`profiles`" + builder.build()
    # ... WHERE type = $p0 AND age > $p1 AND status IN $p2 ORDER BY createdAt DESC LIMIT 25
    rows = await port.query(statement, builder.parameters)

    # Query by Example: non-None fields become equality conditions
    builder = FilterBuilder.from_example(UserFilter(role="admin"))

A builder is owned by a single caller and is not safe to share between
concurrent tasks.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

from simplemapper.data.pageable import Order

T = TypeVar("T")


class FilterBuilder(Generic[T]):
    """Accumulates filter conditions, bound parameters, sort, limit and offset.

    Type Parameters:
        T: The document type the filter targets (documentation only).
    """

    def __init__(self) -> None:
        self._conditions: list[str] = []
        self._parameters: dict[str, Any] = {}
        self._order: Order | None = None
        self._limit: int | None = None
        self._offset: int | None = None

    # ------------------------------------------------------------------
    # Query by Example
    # ------------------------------------------------------------------

    @classmethod
    def by(cls, **kwargs: Any) -> FilterBuilder[Any]:
        """Create a builder with an equality condition per keyword argument."""
        return cls.from_dict(kwargs, skip_none=False)

    @classmethod
    def from_dict(cls, filters: Mapping[str, Any], *, skip_none: bool = True) -> FilterBuilder[Any]:
        """Create a builder from field->value pairs (all equality, ANDed).

        ``None`` values are skipped unless *skip_none* is false.
        """
        builder: FilterBuilder[Any] = cls()
        for field, value in filters.items():
            if value is None and skip_none:
                continue
            builder.where(field, value)
        return builder

    @classmethod
    def from_example(cls, example: Any) -> FilterBuilder[Any]:
        """Create a builder from the non-``None`` fields of a dataclass or plain object."""
        if dataclasses.is_dataclass(example) and not isinstance(example, type):
            fields = {f.name: getattr(example, f.name) for f in dataclasses.fields(example)}
        else:
            fields = vars(example)
        return cls.from_dict(fields)

    # ------------------------------------------------------------------
    # Comparison conditions
    # ------------------------------------------------------------------

    def where(self, field: str, value: Any) -> FilterBuilder[T]:
        """Add ``field = value``."""
        return self._compare(field, "=", value)

    def where_not_equal(self, field: str, value: Any) -> FilterBuilder[T]:
        """Add ``field != value``."""
        return self._compare(field, "!=", value)

    def where_greater_than(self, field: str, value: Any) -> FilterBuilder[T]:
        """Add ``field > value``."""
        return self._compare(field, ">", value)

    def where_less_than(self, field: str, value: Any) -> FilterBuilder[T]:
        """Add ``field < value``."""
        return self._compare(field, "<", value)

    def where_greater_than_or_equal(self, field: str, value: Any) -> FilterBuilder[T]:
        """Add ``field >= value``."""
        return self._compare(field, ">=", value)

    def where_less_than_or_equal(self, field: str, value: Any) -> FilterBuilder[T]:
        """Add ``field <= value``."""
        return self._compare(field, "<=", value)

    def where_like(self, field: str, pattern: str) -> FilterBuilder[T]:
        """Add a ``LIKE`` pattern match (``%`` and ``_`` wildcards)."""
        return self._compare(field, "LIKE", pattern)

    def where_contains(self, field: str, substring: str) -> FilterBuilder[T]:
        """Add a ``CONTAINS(field, substring)`` substring match."""
        name = self._bind(substring)
        self._conditions.append(f"CONTAINS({field}, ${name})")
        return self

    # ------------------------------------------------------------------
    # Set and null conditions
    # ------------------------------------------------------------------

    def where_in(self, field: str, values: Iterable[Any]) -> FilterBuilder[T]:
        """Add ``field IN [values]``.

        An empty collection matches nothing and renders ``FALSE`` without
        binding a parameter.
        """
        values = list(values)
        if not values:
            self._conditions.append("FALSE")
            return self
        return self._compare(field, "IN", values)

    def where_not_in(self, field: str, values: Iterable[Any]) -> FilterBuilder[T]:
        """Add ``field NOT IN [values]``.

        An empty collection excludes nothing and renders ``TRUE`` without
        binding a parameter.
        """
        values = list(values)
        if not values:
            self._conditions.append("TRUE")
            return self
        return self._compare(field, "NOT IN", values)

    def where_null(self, field: str) -> FilterBuilder[T]:
        """Add ``field IS NULL``."""
        self._conditions.append(f"{field} IS NULL")
        return self

    def where_not_null(self, field: str) -> FilterBuilder[T]:
        """Add ``field IS NOT NULL``."""
        self._conditions.append(f"{field} IS NOT NULL")
        return self

    def where_between(self, field: str, low: Any, high: Any) -> FilterBuilder[T]:
        """Add ``field BETWEEN low AND high`` (inclusive), binding two parameters."""
        low_name = self._bind(low)
        high_name = self._bind(high)
        self._conditions.append(f"{field} BETWEEN ${low_name} AND ${high_name}")
        return self

    def where_raw(self, condition: str, parameters: Mapping[str, Any] | Any | None = None) -> FilterBuilder[T]:
        """Add a raw SQL++ condition verbatim.

        *parameters* supplies the values for the placeholders used in
        *condition*: either a mapping, or an object whose public attributes
        are taken as name/value pairs. Names are used as given, so they
        must match the placeholders exactly. They count towards the index
        of later generated ``pN`` names, and a generated name never reuses
        one supplied here.
        """
        self._conditions.append(condition)
        if parameters is None:
            return self
        if isinstance(parameters, Mapping):
            named = dict(parameters)
        elif dataclasses.is_dataclass(parameters) and not isinstance(parameters, type):
            named = {f.name: getattr(parameters, f.name) for f in dataclasses.fields(parameters)}
        else:
            named = {k: v for k, v in vars(parameters).items() if not k.startswith("_")}
        self._parameters.update(named)
        return self

    # ------------------------------------------------------------------
    # Sort and window
    # ------------------------------------------------------------------

    def order_by(self, field: str, descending: bool = False) -> FilterBuilder[T]:
        """Sort by *field*, replacing any previous sort."""
        self._order = Order.desc(field) if descending else Order.asc(field)
        return self

    def take(self, count: int) -> FilterBuilder[T]:
        """Set ``LIMIT``."""
        self._limit = count
        return self

    def skip(self, count: int) -> FilterBuilder[T]:
        """Set ``OFFSET``."""
        self._offset = count
        return self

    def paginate(self, offset: int, limit: int) -> FilterBuilder[T]:
        """Return a copy of this builder windowed to ``OFFSET offset LIMIT limit``.

        The receiver is left untouched.
        """
        return self.copy().skip(offset).take(limit)

    def copy(self) -> FilterBuilder[T]:
        """Return an independent builder with the same conditions and settings."""
        clone: FilterBuilder[T] = type(self)()
        clone._conditions = list(self._conditions)
        clone._parameters = dict(self._parameters)
        clone._order = self._order
        clone._limit = self._limit
        clone._offset = self._offset
        return clone

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def build_where_clause(self) -> str:
        """Conditions joined with ``AND``, without the ``WHERE`` keyword. Empty if none."""
        return render_where(self._conditions)

    def build(self) -> str:
        """Full query suffix: ``WHERE``, ``ORDER BY``, ``LIMIT``, ``OFFSET``, in that order."""
        return render_full(self._conditions, self._order, self._limit, self._offset)

    @property
    def parameters(self) -> dict[str, Any]:
        """Bound parameters, keyed by placeholder name (without ``$``)."""
        return dict(self._parameters)

    @property
    def conditions(self) -> tuple[str, ...]:
        return tuple(self._conditions)

    @property
    def order(self) -> Order | None:
        return self._order

    @property
    def limit(self) -> int | None:
        return self._limit

    @property
    def offset(self) -> int | None:
        return self._offset

    @property
    def is_empty(self) -> bool:
        """True if no conditions have been added."""
        return not self._conditions

    def __repr__(self) -> str:
        return f"FilterBuilder({self.build()!r}, parameters={self._parameters!r})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _bind(self, value: Any) -> str:
        # pN, N being the number of parameters bound so far; skip names a raw fragment already took
        index = len(self._parameters)
        while f"p{index}" in self._parameters:
            index += 1
        name = f"p{index}"
        self._parameters[name] = value
        return name

    def _compare(self, field: str, operator: str, value: Any) -> FilterBuilder[T]:
        name = self._bind(value)
        self._conditions.append(f"{field} {operator} ${name}")
        return self


def render_where(conditions: Iterable[str]) -> str:
    """Join condition fragments with ``AND``; empty string for no conditions."""
    return " AND ".join(conditions)


def render_full(
    conditions: Iterable[str],
    order: Order | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> str:
    """Render a query suffix in the fixed order WHERE, ORDER BY, LIMIT, OFFSET.

    Each present clause starts with a space so the result can be appended
    directly to a ``SELECT ... FROM ...`` statement.
    """
    parts: list[str] = []
    where = render_where(conditions)
    if where:
        parts.append(f" WHERE {where}")
    if order is not None:
        parts.append(order.to_clause())
    if limit is not None:
        parts.append(f" LIMIT {limit}")
    if offset is not None:
        parts.append(f" OFFSET {offset}")
    return "".join(parts)
