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
"""Paginated SQL++ queries over a :class:`~simplemapper.data.ports.outbound.QueryPort`.

:class:`PagedQueryExecutor` windows a :class:`FilterBuilder` to one page,
runs the data query and, on request, a derived ``COUNT`` query concurrently,
and returns a :class:`Page`.

Usage::

    executor = PagedQueryExecutor(CouchbaseQueryAdapter(scope), item_type=User)
    builder = FilterBuilder().where("type", "user").order_by("name")
    page = await executor.fetch_page(
        "SELECT * FROM `app`.`users`.`profiles`", builder, page=3, size=25,
        include_total_count=True,
    )
"""

from __future__ import annotations

import asyncio
import re
from typing import Any, Generic, TypeVar

import structlog

from simplemapper.config.properties.mapper import MapperProperties
from simplemapper.core.config import Config
from simplemapper.data.filter import FilterBuilder
from simplemapper.data.mapper import ObjectMapper
from simplemapper.data.page import Page
from simplemapper.data.pageable import Pageable
from simplemapper.data.ports.outbound import QueryPort
from simplemapper.kernel.exceptions import PreconditionFailedException, QueryException

T = TypeVar("T")

logger = structlog.get_logger(__name__)

_SELECT_ALL_RE = re.compile(r"^\s*SELECT\s+\*", re.IGNORECASE)
COUNT_PROJECTION = "SELECT COUNT(*) AS count"


def derive_count_query(base_query: str, builder: FilterBuilder[Any]) -> str:
    """Turn ``SELECT * FROM ...`` into ``SELECT COUNT(*) AS count FROM ... WHERE ...``.

    Only the builder's conditions are carried over; sort, limit and offset
    do not apply to a count.

    Raises:
        PreconditionFailedException: *base_query* does not start with ``SELECT *``.
    """
    match = _SELECT_ALL_RE.match(base_query)
    if match is None:
        raise PreconditionFailedException(
            "Base query must start with 'SELECT *' when a total count is requested",
            code="COUNT_REQUIRES_SELECT_ALL",
            context={"query": base_query},
        )
    rest = base_query[match.end():]
    if rest and not rest[0].isspace():
        rest = " " + rest
    statement = COUNT_PROJECTION + rest
    where = builder.build_where_clause()
    if where:
        statement += f" WHERE {where}"
    return statement


def extract_count(rows: list[Any]) -> int:
    """Read the ``count`` column of the first row; no rows means zero."""
    if not rows:
        return 0
    first = rows[0]
    if isinstance(first, dict):
        return int(first.get("count", 0))
    return int(first)


class PagedQueryExecutor(Generic[T]):
    """Runs one page of a filtered query, optionally with an exact total count.

    Args:
        port: Query execution collaborator.
        mapper: Mapper for rows; a default :class:`ObjectMapper` is used when omitted.
        item_type: Row type. Rows are returned as received when ``None``.
        include_query_in_exceptions: Attach the failing statement to
            :class:`QueryException`. Disable when statements may carry
            sensitive text.
    """

    def __init__(
        self,
        port: QueryPort,
        *,
        mapper: ObjectMapper | None = None,
        item_type: type[T] | None = None,
        include_query_in_exceptions: bool = True,
    ) -> None:
        self._port = port
        self._mapper = mapper or ObjectMapper()
        self._item_type = item_type
        self._include_query = include_query_in_exceptions

    @classmethod
    def from_config(
        cls,
        port: QueryPort,
        config: Config,
        *,
        mapper: ObjectMapper | None = None,
        item_type: type[T] | None = None,
    ) -> PagedQueryExecutor[T]:
        """Create an executor honouring ``simplemapper.mapper.include_query_in_exceptions``."""
        props = config.bind(MapperProperties)
        return cls(
            port,
            mapper=mapper,
            item_type=item_type,
            include_query_in_exceptions=props.include_query_in_exceptions,
        )

    async def fetch_page(
        self,
        base_query: str,
        builder: FilterBuilder[Any],
        page: int,
        size: int,
        include_total_count: bool = False,
    ) -> Page[T]:
        """Fetch page *page* of *size* rows.

        The caller's *builder* is not modified; the window is applied to a
        copy. Without a total count the returned page has ``total=None``
        and ``has_more=False``; see :meth:`fetch_page_with_lookahead`.

        Raises:
            PreconditionFailedException: ``page`` or ``size`` below 1, or a
                count was requested for a base query not starting with
                ``SELECT *``. Raised before any query runs.
            QueryException: Either query failed.
        """
        pageable = Pageable.of(page, size)
        count_query = derive_count_query(base_query, builder) if include_total_count else None

        windowed = builder.paginate(pageable.offset, pageable.size)
        data_query = base_query + windowed.build()
        parameters = windowed.parameters

        log = logger.bind(page=page, size=size, include_total_count=include_total_count)
        log.debug("paged_query.fetch", query=data_query)

        if count_query is None:
            rows = await self._run(data_query, parameters)
            return Page(items=self._map_rows(rows), page=page, size=size)

        try:
            async with asyncio.TaskGroup() as group:
                data_task = group.create_task(self._run(data_query, parameters))
                count_task = group.create_task(self._run(count_query, builder.parameters))
        except ExceptionGroup as eg:
            # the first failure cancelled the sibling query
            raise eg.exceptions[0]

        total = extract_count(count_task.result())
        log.debug("paged_query.counted", total=total)
        return Page(items=self._map_rows(data_task.result()), page=page, size=size, total=total)

    async def fetch_page_with_lookahead(
        self,
        base_query: str,
        builder: FilterBuilder[Any],
        page: int,
        size: int,
    ) -> Page[T]:
        """Fetch a page without counting, detecting a next page by over-fetching one row."""
        pageable = Pageable.of(page, size)
        windowed = builder.paginate(pageable.offset, pageable.size + 1)
        data_query = base_query + windowed.build()

        logger.debug("paged_query.fetch", query=data_query, page=page, size=size, lookahead=True)
        rows = await self._run(data_query, windowed.parameters)
        has_more = len(rows) > size
        return Page(items=self._map_rows(rows[:size]), page=page, size=size, has_more=has_more)

    async def _run(self, statement: str, parameters: dict[str, Any]) -> list[Any]:
        try:
            return await self._port.query(statement, parameters)
        except QueryException:
            raise
        except Exception as exc:
            logger.warning("paged_query.failed", error=str(exc), error_type=type(exc).__name__)
            raise QueryException(
                f"Query execution failed: {exc}",
                query=statement if self._include_query else None,
            ) from exc

    def _map_rows(self, rows: list[Any]) -> list[T]:
        if self._item_type is None:
            return list(rows)
        items = self._mapper.map_list(rows, self._item_type)
        if len(items) < len(rows):
            logger.warning("paged_query.null_rows_dropped", dropped=len(rows) - len(items), rows=len(rows))
        return items
