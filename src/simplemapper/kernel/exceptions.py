"""Unified exception hierarchy for SimpleMapper.

All library exceptions inherit from SimpleMapperException, enabling unified
error handling across modules.

Categories:
- BusinessException: Caller mistakes (bad page requests, unmappable payloads)
- InfrastructureException: Failures surfaced by the wrapped database client
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Base Exception
# =============================================================================


class SimpleMapperException(Exception):
    """Base exception for all SimpleMapper errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "PAGE_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(SimpleMapperException):
    """Caller-side errors: invalid requests and payloads."""


class PreconditionFailedException(BusinessException):
    """A precondition for the operation was not met. Raised before any I/O."""


class MappingException(BusinessException):
    """A payload could not be mapped to, or a type is unusable as, a target type.

    Args:
        message: Human-readable error description.
        target_type: Name of the type being mapped to.
        property_name: Field that caused the failure, when known.
        value: The offending value, when known.
    """

    def __init__(
        self,
        message: str,
        target_type: str | None = None,
        property_name: str | None = None,
        value: Any = None,
        code: str | None = None,
    ) -> None:
        super().__init__(
            message,
            code=code,
            context={"target_type": target_type, "property_name": property_name},
        )
        self.target_type = target_type
        self.property_name = property_name
        self.value = value


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(SimpleMapperException):
    """Failures reported by the database client: connectivity, timeouts, bad statements."""


class QueryException(InfrastructureException):
    """A query failed to execute.

    ``query`` holds the failing statement, or ``None`` when query text is
    hidden from exceptions by configuration. The original client error is
    available as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        query: str | None = None,
        error_code: int | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code="QUERY_FAILED", context={"query": query})
        self.query = query
        self.error_code = error_code
        self.parameters = parameters


class DocumentNotFoundException(InfrastructureException):
    """A key-value lookup found no document for the given key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Document not found: {key}", code="DOCUMENT_NOT_FOUND", context={"key": key})
        self.key = key
