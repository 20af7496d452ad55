"""Domain exceptions.

All errors raised by the search core. Every error carries a human-readable
message plus a ``details`` dictionary that the API layer forwards to
clients.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SearchError(DomainError):
    """Base class for product search errors."""

    pass


# ============================================================================
# Conversion Errors
# ============================================================================


class ConversionError(SearchError):
    """Raised when legacy filter definitions cannot be mapped to facets.

    Covers malformed definitions (missing label or value) as well as
    label collisions inside a facet template. Conversion never drops or
    merges distinct filters, it fails instead.
    """

    def __init__(self, reason: str, **context: Any) -> None:
        """Initialize conversion error.

        Args:
            reason: Explanation of what is wrong with the input.
            **context: Identifying values (facet label, index, ...).
        """
        super().__init__(
            f"Cannot convert filters: {reason}",
            details={"reason": reason, **context},
        )


class DuplicateLabelError(ConversionError):
    """Raised when two facets, or two filters of one facet, share a label."""

    def __init__(self, label: str, facet: str | None = None) -> None:
        """Initialize duplicate label error.

        Args:
            label: The colliding label.
            facet: Parent facet label when the collision is between filters.
        """
        if facet is None:
            reason = f"duplicate facet label '{label}'"
        else:
            reason = f"duplicate filter label '{label}' in facet '{facet}'"
        super().__init__(reason, label=label, facet=facet)


# ============================================================================
# Navigation State Errors
# ============================================================================


class DecodingError(SearchError):
    """Raised when an encoded navigation state token is malformed."""

    def __init__(self, token: str, reason: str, position: int | None = None) -> None:
        """Initialize decoding error.

        Args:
            token: The token that failed to decode.
            reason: What is malformed.
            position: Character offset in the unquoted fragment, if known.
        """
        super().__init__(
            f"Invalid navigation token: {reason}",
            details={"token": token, "reason": reason, "position": position},
        )


# ============================================================================
# Query Errors
# ============================================================================


class QueryExecutionError(SearchError):
    """Raised when the catalog fails to execute a filtered query."""

    def __init__(self, reason: str) -> None:
        """Initialize query execution error.

        Args:
            reason: Description of the underlying failure.
        """
        super().__init__(
            f"Catalog query failed: {reason}",
            details={"reason": reason},
        )


class InvalidSearchQueryError(SearchError):
    """Raised when search query parameters are out of range or malformed."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        """Initialize invalid search query error.

        Args:
            field: Name of the offending parameter.
            value: The rejected value.
            reason: Why the value is rejected.
        """
        super().__init__(
            f"Invalid {field} {value!r}: {reason}",
            details={"field": field, "value": value, "reason": reason},
        )
