"""Domain layer - Facet model, search query/result types, errors.

Example usage:
    from layered_search.domain import Facet, Filter, SearchQuery, SortOrder

    color = Facet(label="Color", key="Color", filters=[Filter(label="Red", value="Red")])
    query = SearchQuery(page=1, results_per_page=12, sort_order=SortOrder.default())
"""

# Facet model
from layered_search.domain.facets import (
    DisplayType,
    Facet,
    Filter,
    active_selection,
    find_facet,
)

# Query and result types
from layered_search.domain.query import (
    PaginationResult,
    SearchContext,
    SearchQuery,
    SearchResult,
    SortOrder,
)

# Exceptions
from layered_search.domain.exceptions import (
    ConversionError,
    DecodingError,
    DomainError,
    DuplicateLabelError,
    InvalidSearchQueryError,
    QueryExecutionError,
    SearchError,
)

__all__ = [
    # Facet model
    "DisplayType",
    "Facet",
    "Filter",
    "active_selection",
    "find_facet",
    # Query and result types
    "PaginationResult",
    "SearchContext",
    "SearchQuery",
    "SearchResult",
    "SortOrder",
    # Exceptions
    "ConversionError",
    "DecodingError",
    "DomainError",
    "DuplicateLabelError",
    "InvalidSearchQueryError",
    "QueryExecutionError",
    "SearchError",
]
