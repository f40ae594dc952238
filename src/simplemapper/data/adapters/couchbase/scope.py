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
"""Query helpers over an ``acouchbase`` scope.

Each helper runs a SQL++ statement on the scope's existing SDK connection
(no extra connections are opened) and optionally maps rows to a type::

    users = await query_to_list(scope, "SELECT p.* FROM profiles p WHERE p.age > $min",
                                {"min": 18}, item_type=User)
    count = await execute(scope, "UPDATE profiles SET active = false WHERE age > $p0", {"p0": 90})

:class:`CouchbaseQueryAdapter` exposes the same connection as a
:class:`~simplemapper.data.ports.outbound.QueryPort` for
:class:`~simplemapper.data.paged_query.PagedQueryExecutor`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import structlog

from simplemapper.config.properties.mapper import MapperProperties
from simplemapper.core.config import Config
from simplemapper.data.mapper import ObjectMapper
from simplemapper.kernel.exceptions import PreconditionFailedException, QueryException, SimpleMapperException

T = TypeVar("T")

logger = structlog.get_logger(__name__)

OptionsFactory = Callable[[dict[str, Any]], Any]

DEFAULT_SCOPE_NAME = "_default"


def default_scope(cluster: Any, config: Config) -> Any:
    """Open the scope named by ``simplemapper.mapper.default_bucket`` and ``default_scope``.

    The scope falls back to the bucket's ``_default`` scope.

    Raises:
        PreconditionFailedException: No default bucket is configured.
    """
    props = config.bind(MapperProperties)
    if not props.default_bucket:
        raise PreconditionFailedException(
            "simplemapper.mapper.default_bucket is not configured",
            code="DEFAULT_BUCKET_MISSING",
        )
    scope_name = props.default_scope or DEFAULT_SCOPE_NAME
    logger.debug("couchbase.default_scope", bucket=props.default_bucket, scope=scope_name)
    return cluster.bucket(props.default_bucket).scope(scope_name)


def query_options(parameters: dict[str, Any] | None = None) -> Any:
    """Build SDK ``QueryOptions`` binding *parameters* as named parameters."""
    from couchbase.options import QueryOptions

    if parameters:
        return QueryOptions(named_parameters=dict(parameters))
    return QueryOptions()


async def _rows(
    scope: Any,
    statement: str,
    parameters: dict[str, Any] | None,
    options: Any,
    include_query: bool,
) -> tuple[list[Any], Any]:
    if options is None:
        options = query_options(parameters)
    try:
        result = scope.query(statement, options)
        rows = [row async for row in result.rows()]
    except SimpleMapperException:
        raise
    except Exception as exc:
        logger.warning("couchbase.query_failed", error=str(exc), error_type=type(exc).__name__)
        raise QueryException(
            f"Query execution failed: {exc}",
            query=statement if include_query else None,
            error_code=getattr(getattr(exc, "context", None), "first_error_code", None),
        ) from exc
    logger.debug("couchbase.query", rows=len(rows))
    return rows, result


def _map(rows: list[Any], item_type: type[T] | None, mapper: ObjectMapper | None) -> list[Any]:
    if item_type is None:
        return rows
    return (mapper or ObjectMapper()).map_list(rows, item_type)


async def query_to_list(
    scope: Any,
    statement: str,
    parameters: dict[str, Any] | None = None,
    *,
    options: Any = None,
    item_type: type[T] | None = None,
    mapper: ObjectMapper | None = None,
    include_query_in_exceptions: bool = True,
) -> list[Any]:
    """Run *statement* and return all rows.

    *options*, when given, is passed to the SDK as-is and *parameters* is
    ignored.
    """
    rows, _ = await _rows(scope, statement, parameters, options, include_query_in_exceptions)
    return _map(rows, item_type, mapper)


async def query_first(
    scope: Any,
    statement: str,
    parameters: dict[str, Any] | None = None,
    **kwargs: Any,
) -> Any:
    """Return the first row. Raises :class:`QueryException` when there are none."""
    rows = await query_to_list(scope, statement, parameters, **kwargs)
    if not rows:
        raise QueryException("Query returned no rows", query=_visible(statement, kwargs))
    return rows[0]


async def query_first_or_default(
    scope: Any,
    statement: str,
    parameters: dict[str, Any] | None = None,
    **kwargs: Any,
) -> Any | None:
    """Return the first row, or ``None`` when there are none."""
    rows = await query_to_list(scope, statement, parameters, **kwargs)
    return rows[0] if rows else None


async def query_single(
    scope: Any,
    statement: str,
    parameters: dict[str, Any] | None = None,
    **kwargs: Any,
) -> Any:
    """Return the only row. Raises :class:`QueryException` unless exactly one row comes back."""
    rows = await query_to_list(scope, statement, parameters, **kwargs)
    if len(rows) != 1:
        raise QueryException(
            f"Query returned {len(rows)} rows, expected exactly one",
            query=_visible(statement, kwargs),
        )
    return rows[0]


async def execute(
    scope: Any,
    statement: str,
    parameters: dict[str, Any] | None = None,
    *,
    options: Any = None,
    include_query_in_exceptions: bool = True,
) -> int:
    """Run a mutation (UPDATE, DELETE, INSERT) and return the mutation count.

    Returns 0 when the server reports no metrics.
    """
    _, result = await _rows(scope, statement, parameters, options, include_query_in_exceptions)
    metadata = result.metadata()
    metrics = metadata.metrics() if metadata is not None else None
    if metrics is None:
        return 0
    return int(metrics.mutation_count())


def _visible(statement: str, kwargs: dict[str, Any]) -> str | None:
    return statement if kwargs.get("include_query_in_exceptions", True) else None


class CouchbaseQueryAdapter:
    """:class:`QueryPort` backed by an ``acouchbase`` scope.

    Args:
        scope: The SDK scope to query through.
        options_factory: Builds SDK query options from named parameters.
            Defaults to :func:`query_options`.
        include_query_in_exceptions: Attach statement text to errors.
    """

    def __init__(
        self,
        scope: Any,
        *,
        options_factory: OptionsFactory | None = None,
        include_query_in_exceptions: bool = True,
    ) -> None:
        self._scope = scope
        self._options_factory = options_factory or query_options
        self._include_query = include_query_in_exceptions

    @classmethod
    def from_config(
        cls,
        scope: Any,
        config: Config,
        *,
        options_factory: OptionsFactory | None = None,
    ) -> CouchbaseQueryAdapter:
        """Create an adapter honouring ``simplemapper.mapper.include_query_in_exceptions``."""
        props = config.bind(MapperProperties)
        return cls(
            scope,
            options_factory=options_factory,
            include_query_in_exceptions=props.include_query_in_exceptions,
        )

    async def query(self, statement: str, parameters: dict[str, Any] | None = None) -> list[Any]:
        options = self._options_factory(dict(parameters or {}))
        rows, _ = await _rows(self._scope, statement, parameters, options, self._include_query)
        return rows
