"""Layered navigation product search provider.

Orchestrates one search request:

1. Decode the incoming navigation token.
2. Build a fresh facet template from the catalog's filter block.
3. Activate the decoded filters on that template.
4. Run the filtered query through the catalog.
5. Assemble pagination.
6. Rebuild the template with refreshed counts for the next query.
7. Encode the next navigation token.

No step is retried. Errors abort the request, except malformed tokens,
which degrade to an unfiltered search.
"""

from collections.abc import Mapping, Sequence

import structlog

from layered_search.domain.exceptions import DecodingError, DomainError, QueryExecutionError
from layered_search.domain.facets import Facet, active_selection, find_facet
from layered_search.domain.query import (
    PaginationResult,
    SearchContext,
    SearchQuery,
    SearchResult,
    SortOrder,
)
from layered_search.search.codec import NavigationStateCodec
from layered_search.search.converter import FiltersConverter
from layered_search.search.legacy import LegacyFilterParams
from layered_search.search.ports import CatalogQueryExecutor, FilterDefinitionSource

logger = structlog.get_logger()

DEFAULT_SORT_ORDERS = (
    SortOrder("product", "position", "asc", label="Relevance"),
    SortOrder("product", "name", "asc", label="Name, A to Z"),
    SortOrder("product", "name", "desc", label="Name, Z to A"),
    SortOrder("product", "price", "asc", label="Price, low to high"),
    SortOrder("product", "price", "desc", label="Price, high to low"),
)


def apply_activation(
    template: Sequence[Facet],
    selection: Mapping[str, Sequence[str]],
) -> int:
    """Activate the selected filters on a facet template.

    Labels that do not exist in the template (facets or filters renamed
    or removed since the token was issued) are skipped. Facets without
    multiple selection keep only their first matching filter.

    Args:
        template: Freshly built facet template.
        selection: Facet label to filter labels.

    Returns:
        Number of filters activated.
    """
    activated = 0
    for facet_label, filter_labels in selection.items():
        facet = find_facet(template, facet_label)
        if facet is None:
            logger.debug("Ignoring unknown facet", facet=facet_label)
            continue

        for filter_label in filter_labels:
            match = facet.find_filter(filter_label)
            if match is None:
                logger.debug(
                    "Ignoring unknown filter",
                    facet=facet_label,
                    filter=filter_label,
                )
                continue
            if not facet.multiple_selection_allowed and facet.has_active_filters:
                if not match.active:
                    logger.debug(
                        "Ignoring extra filter of single-choice facet",
                        facet=facet_label,
                        filter=filter_label,
                    )
                continue
            if not match.active:
                match.active = True
                activated += 1

    return activated


class LayeredProductSearchProvider:
    """Product search provider backed by the layered navigation filter block.

    Example usage:
        store = SqlCatalogStore(session)
        provider = LayeredProductSearchProvider(store, store)

        result = await provider.search(
            SearchContext(language="en"),
            SearchQuery(page=2, results_per_page=12),
            encoded_facets="Color-Red/Size-M",
        )
        result.encoded_facets  # token for the next request
    """

    def __init__(
        self,
        filter_source: FilterDefinitionSource,
        query_executor: CatalogQueryExecutor,
        converter: FiltersConverter | None = None,
        codec: NavigationStateCodec | None = None,
        persist_selection: bool = True,
        sort_orders: Sequence[SortOrder] = DEFAULT_SORT_ORDERS,
        request_id: str | None = None,
    ) -> None:
        """Initialize provider.

        Args:
            filter_source: Supplies legacy filter definitions.
            query_executor: Executes filtered product queries.
            converter: Legacy filter converter.
            codec: Navigation state codec.
            persist_selection: Re-apply the executed selection to the
                next query's template. When False the next template only
                carries refreshed counts and its token is empty.
            sort_orders: Sort orders offered to clients.
            request_id: Request ID for correlation.
        """
        self.filter_source = filter_source
        self.query_executor = query_executor
        self.converter = converter or FiltersConverter()
        self.codec = codec or NavigationStateCodec()
        self.persist_selection = persist_selection
        self.sort_orders = list(sort_orders)
        self.request_id = request_id

    async def search(
        self,
        context: SearchContext,
        query: SearchQuery,
        encoded_facets: str | None = None,
    ) -> SearchResult:
        """Apply a navigation token to a query and run it.

        Args:
            context: Request context.
            query: Query to run. Its facets are replaced.
            encoded_facets: Incoming navigation token.

        Returns:
            SearchResult for the query.
        """
        await self.add_facets_to_query(context, encoded_facets, query)
        return await self.run_query(context, query)

    async def add_facets_to_query(
        self,
        context: SearchContext,
        encoded_facets: str | None,
        query: SearchQuery,
    ) -> SearchQuery:
        """Replace the query's facets with an activated fresh template.

        Args:
            context: Request context.
            encoded_facets: Incoming navigation token.
            query: Query whose facets are replaced.

        Returns:
            The same query, for chaining.

        Raises:
            ConversionError: If the filter block cannot be converted.
        """
        selection = self._decode(encoded_facets)
        template = await self._build_template()
        activated = apply_activation(template, selection)

        logger.info(
            "Facets applied to query",
            facets=len(template),
            selected_facets=len(selection),
            activated_filters=activated,
            language=context.language,
            request_id=self.request_id,
        )

        query.facets = template
        return query

    async def run_query(
        self,
        context: SearchContext,
        query: SearchQuery,
    ) -> SearchResult:
        """Execute a query whose facets are already activated.

        Args:
            context: Request context.
            query: Query to run.

        Returns:
            SearchResult with pagination, next query and next token.

        Raises:
            ConversionError: If the facets cannot be expressed as filters.
            QueryExecutionError: If the catalog fails.
        """
        filters = self.converter.to_legacy_filters(query.facets)
        per_page = query.results_per_page

        try:
            catalog_result = await self.query_executor.execute_filtered_query(
                per_page=per_page,
                page=query.page,
                order_by=query.sort_order.to_legacy_order_by(),
                order_way=query.sort_order.to_legacy_order_way(),
                language=context.language,
                filters=filters,
            )
        except DomainError:
            raise
        except Exception as e:
            logger.error(
                "Catalog query failed",
                filters=filters,
                page=query.page,
                error=str(e),
                request_id=self.request_id,
            )
            raise QueryExecutionError(str(e)) from e

        products = list(catalog_result.products)
        if len(products) > per_page:
            logger.warning(
                "Catalog returned more products than requested",
                requested=per_page,
                returned=len(products),
                request_id=self.request_id,
            )
            products = products[:per_page]

        pagination = PaginationResult.from_counts(
            total_results_count=catalog_result.total_count,
            results_count=len(products),
            results_per_page=per_page,
            page=query.page,
        )

        selection = active_selection(query.facets)
        next_facets = await self._build_template(filters)
        if self.persist_selection:
            apply_activation(next_facets, selection)
        self._attach_toggle_tokens(next_facets, active_selection(next_facets))

        next_query = query.with_facets(next_facets)
        encoded_facets = self.codec.encode(next_query.facets)

        logger.info(
            "Search completed",
            page=pagination.page,
            pages=pagination.pages_count,
            total=pagination.total_results_count,
            results=pagination.results_count,
            filters=filters,
            request_id=self.request_id,
        )

        return SearchResult(
            products=products,
            pagination=pagination,
            next_query=next_query,
            encoded_facets=encoded_facets,
            available_sort_orders=self.get_available_sort_orders(),
        )

    def get_available_sort_orders(self) -> list[SortOrder]:
        """Get sort orders offered to clients."""
        return list(self.sort_orders)

    def _decode(self, encoded_facets: str | None) -> dict[str, list[str]]:
        """Decode an incoming token, degrading to no selection."""
        try:
            return self.codec.decode(encoded_facets)
        except DecodingError as e:
            logger.warning(
                "Ignoring malformed navigation token",
                token=encoded_facets,
                reason=e.details.get("reason"),
                request_id=self.request_id,
            )
            return {}

    async def _build_template(
        self,
        selected_filters: LegacyFilterParams | None = None,
    ) -> list[Facet]:
        """Build a fresh facet template from the filter block."""
        try:
            definitions = await self.filter_source.get_filter_definitions(selected_filters)
        except DomainError:
            raise
        except Exception as e:
            logger.error(
                "Filter block unavailable",
                error=str(e),
                request_id=self.request_id,
            )
            raise QueryExecutionError(f"filter definitions unavailable: {e}") from e

        return self.converter.to_facets(definitions)

    def _attach_toggle_tokens(
        self,
        template: Sequence[Facet],
        selection: Mapping[str, Sequence[str]],
    ) -> None:
        """Store on every filter the token that toggles it."""
        for facet in template:
            for item in facet.filters:
                toggled = self.codec.toggle(
                    selection,
                    facet.label,
                    item.label,
                    exclusive=not facet.multiple_selection_allowed,
                )
                item.next_encoded_facets = self.codec.encode_selection(toggled)
