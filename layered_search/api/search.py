"""Search API endpoints.

Provides the faceted product search endpoint. The navigation token is
carried in the ``q`` query parameter and returned as ``encoded_facets``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from layered_search.api.schemas import (
    ErrorResponse,
    FacetSchema,
    FilterSchema,
    PaginationSchema,
    SearchResponse,
    SortOrderSchema,
)
from layered_search.catalog.store import SqlCatalogStore
from layered_search.domain.facets import Facet
from layered_search.domain.query import SearchContext, SearchQuery, SearchResult, SortOrder
from layered_search.infrastructure.config import settings
from layered_search.infrastructure.database import get_session
from layered_search.search.provider import LayeredProductSearchProvider

router = APIRouter(tags=["Search"])


# ============================================================================
# Dependencies
# ============================================================================


def get_provider(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> LayeredProductSearchProvider:
    """Get search provider bound to the request's database session."""
    store = SqlCatalogStore(
        session,
        group_order=settings.filter_groups,
        include_manufacturer=settings.manufacturer_filter_enabled,
        manufacturer_label=settings.manufacturer_filter_label,
    )
    return LayeredProductSearchProvider(
        filter_source=store,
        query_executor=store,
        persist_selection=settings.persist_selection,
        request_id=getattr(request.state, "request_id", None),
    )


# ============================================================================
# Converters
# ============================================================================


def facet_to_schema(facet: Facet) -> FacetSchema:
    """Convert Facet to response schema."""
    return FacetSchema(
        label=facet.label,
        type=facet.type,
        display_type=facet.display_type.value,
        multiple_selection_allowed=facet.multiple_selection_allowed,
        displayed=facet.displayed,
        show_limit=facet.show_limit,
        filters=[
            FilterSchema(
                label=f.label,
                value=f.value,
                magnitude=f.magnitude,
                active=f.active,
                properties=dict(f.properties),
                next_encoded_facets=f.next_encoded_facets,
            )
            for f in facet.filters
        ],
    )


def result_to_response(result: SearchResult, sort_order: SortOrder) -> SearchResponse:
    """Convert SearchResult to response schema."""
    pagination = result.pagination
    return SearchResponse(
        products=result.products,
        pagination=PaginationSchema(
            total_results_count=pagination.total_results_count,
            results_count=pagination.results_count,
            pages_count=pagination.pages_count,
            page=pagination.page,
            has_next=pagination.has_next,
            has_prev=pagination.has_prev,
        ),
        facets=[facet_to_schema(facet) for facet in result.facets if facet.displayed],
        encoded_facets=result.encoded_facets,
        sort_orders=[
            SortOrderSchema(
                value=order.to_string(),
                label=order.label,
                current=order == sort_order,
            )
            for order in result.available_sort_orders
        ],
        current_sort_order=sort_order.to_string(),
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Search products",
    description="Filtered, sorted and paginated product search with facets.",
)
async def search_products(
    provider: Annotated[LayeredProductSearchProvider, Depends(get_provider)],
    q: Annotated[
        str | None,
        Query(
            description=(
                "Navigation token exactly as returned in encoded_facets. "
                "Percent-encode it as a query value like any other string"
            )
        ),
    ] = None,
    page: Annotated[int, Query(ge=1, description="Page number (1-based)")] = 1,
    results_per_page: Annotated[
        int | None,
        Query(
            alias="resultsPerPage",
            ge=1,
            le=settings.max_results_per_page,
            description="Products per page",
        ),
    ] = None,
    order: Annotated[
        str | None, Query(description="Sort order, e.g. product.price.asc")
    ] = None,
    lang: Annotated[str | None, Query(description="Language code")] = None,
) -> SearchResponse:
    """Search products.

    Malformed navigation tokens are ignored and yield an unfiltered
    search.

    Args:
        provider: Search provider.
        q: Navigation token from a previous response. The token is
            itself percent-encoded, so it must be encoded once more when
            placed in a URL.
        page: Page number.
        results_per_page: Page size.
        order: Serialized sort order.
        lang: Language code.

    Returns:
        Products, pagination, facets and the next navigation token.
    """
    sort_order = SortOrder.from_string(order or settings.default_sort_order)
    query = SearchQuery(
        page=page,
        results_per_page=results_per_page or settings.default_results_per_page,
        sort_order=sort_order,
    )
    context = SearchContext(language=lang or settings.default_language)

    result = await provider.search(context, query, encoded_facets=q)
    return result_to_response(result, sort_order)
