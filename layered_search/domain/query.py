"""Search query and result types.

A ``SearchQuery`` is built by the caller, consumed once by the search
provider and answered with a ``SearchResult`` that carries a ready-made
query for the next request.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any

from layered_search.domain.exceptions import InvalidSearchQueryError
from layered_search.domain.facets import Facet


@dataclass(frozen=True)
class SortOrder:
    """Sort order over a product field.

    Serialized as ``entity.field.direction`` (e.g. ``product.price.asc``).

    Attributes:
        entity: Entity the field belongs to.
        field: Field name.
        direction: "asc" or "desc".
        label: Optional display label.
    """

    entity: str
    field: str
    direction: str = "asc"
    label: str | None = field(default=None, compare=False)

    DIRECTIONS = ("asc", "desc")

    def __post_init__(self) -> None:
        """Normalize and validate direction."""
        direction = self.direction.lower()
        if direction not in self.DIRECTIONS:
            raise InvalidSearchQueryError(
                "sort direction", self.direction, "must be 'asc' or 'desc'"
            )
        object.__setattr__(self, "direction", direction)

    @classmethod
    def from_string(cls, value: str) -> "SortOrder":
        """Parse a sort order from its ``entity.field.direction`` form.

        Args:
            value: Serialized sort order.

        Returns:
            Parsed SortOrder.
        """
        parts = value.split(".")
        if len(parts) != 3 or not all(parts):
            raise InvalidSearchQueryError(
                "sort order", value, "expected 'entity.field.direction'"
            )
        entity, field_name, direction = parts
        return cls(entity=entity, field=field_name, direction=direction)

    @classmethod
    def default(cls) -> "SortOrder":
        """Catalog position, ascending."""
        return cls(entity="product", field="position", direction="asc")

    def to_string(self) -> str:
        """Serialize to ``entity.field.direction``."""
        return f"{self.entity}.{self.field}.{self.direction}"

    def to_legacy_order_by(self) -> str:
        """Get the field name understood by the catalog store."""
        return self.field

    def to_legacy_order_way(self) -> str:
        """Get the direction understood by the catalog store."""
        return self.direction


@dataclass(frozen=True)
class SearchContext:
    """Request-level context that is not part of the query itself.

    Attributes:
        language: Language code used by the catalog for localized data.
    """

    language: str = "en"


@dataclass
class SearchQuery:
    """Product search query.

    Attributes:
        page: Requested page (1-based).
        results_per_page: Page size.
        sort_order: Sort order.
        facets: Current facet template, replaced wholesale by the provider.
    """

    page: int = 1
    results_per_page: int = 20
    sort_order: SortOrder = field(default_factory=SortOrder.default)
    facets: list[Facet] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate pagination parameters."""
        if self.page < 1:
            raise InvalidSearchQueryError("page", self.page, "must be at least 1")
        if self.results_per_page < 1:
            raise InvalidSearchQueryError(
                "results per page", self.results_per_page, "must be at least 1"
            )

    def with_facets(self, facets: list[Facet]) -> "SearchQuery":
        """Copy this query with a different facet template.

        Args:
            facets: Facet template for the copy.

        Returns:
            New SearchQuery sharing every other parameter.
        """
        return replace(self, facets=facets)


@dataclass(frozen=True)
class PaginationResult:
    """Pagination block of a search result.

    Attributes:
        total_results_count: Products matching the query over all pages.
        results_count: Products on the current page.
        pages_count: Number of pages.
        page: Current page.
    """

    total_results_count: int
    results_count: int
    pages_count: int
    page: int

    @classmethod
    def from_counts(
        cls,
        total_results_count: int,
        results_count: int,
        results_per_page: int,
        page: int,
    ) -> "PaginationResult":
        """Build pagination from raw counts.

        Args:
            total_results_count: Total matching products.
            results_count: Products returned for this page.
            results_per_page: Page size.
            page: Current page.

        Returns:
            PaginationResult with the page count derived from the total.
        """
        return cls(
            total_results_count=total_results_count,
            results_count=results_count,
            pages_count=math.ceil(total_results_count / results_per_page),
            page=page,
        )

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.pages_count

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1


@dataclass
class SearchResult:
    """Result of a product search.

    Attributes:
        products: Products of the current page.
        pagination: Pagination block.
        next_query: Query pre-populated with the refreshed facet template.
        encoded_facets: Navigation token for ``next_query``.
        available_sort_orders: Sort orders the client may offer.
    """

    products: list[dict[str, Any]]
    pagination: PaginationResult
    next_query: SearchQuery
    encoded_facets: str = ""
    available_sort_orders: list[SortOrder] = field(default_factory=list)

    @property
    def facets(self) -> list[Facet]:
        """Facet template to render alongside the products."""
        return self.next_query.facets
