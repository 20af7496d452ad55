"""API schemas for the layered search API.

Pydantic models for response validation and serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[dict[str, Any]] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Search Schemas
# ============================================================================


class FilterSchema(BaseModel):
    """A selectable filter value."""

    label: str = Field(..., description="Filter label")
    value: str | None = Field(default=None, description="Value sent to the catalog")
    magnitude: int = Field(default=0, description="Number of matching products")
    active: bool = Field(default=False, description="Whether the filter is selected")
    properties: dict[str, Any] = Field(default_factory=dict)
    next_encoded_facets: str | None = Field(
        default=None, description="Token that toggles this filter"
    )


class FacetSchema(BaseModel):
    """A filterable dimension with its filters."""

    label: str = Field(..., description="Facet label")
    type: str | None = Field(default=None, description="Legacy filter type")
    display_type: str = Field(..., description="checkbox, radio or dropdown")
    multiple_selection_allowed: bool = Field(default=True)
    displayed: bool = Field(default=True)
    show_limit: int = Field(default=0)
    filters: list[FilterSchema] = Field(default_factory=list)


class PaginationSchema(BaseModel):
    """Pagination block."""

    total_results_count: int = Field(..., description="Matches over all pages")
    results_count: int = Field(..., description="Products on this page")
    pages_count: int = Field(..., description="Number of pages")
    page: int = Field(..., description="Current page (1-based)")
    has_next: bool = Field(..., description="Whether there is a next page")
    has_prev: bool = Field(..., description="Whether there is a previous page")


class SortOrderSchema(BaseModel):
    """A sort order clients may request."""

    value: str = Field(..., description="Serialized sort order (entity.field.direction)")
    label: str | None = Field(default=None, description="Display label")
    current: bool = Field(default=False, description="Whether this order is in use")


class SearchResponse(BaseModel):
    """Product search response."""

    products: list[dict[str, Any]] = Field(default_factory=list)
    pagination: PaginationSchema
    facets: list[FacetSchema] = Field(default_factory=list)
    encoded_facets: str = Field(
        default="", description="Navigation token for the next request"
    )
    sort_orders: list[SortOrderSchema] = Field(default_factory=list)
    current_sort_order: str = Field(..., description="Sort order used for this page")
