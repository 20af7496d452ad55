"""Collaborator protocols of the search provider.

The provider never reaches the catalog through module-level state; both
collaborators are injected. ``SqlCatalogStore`` implements both of them.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from layered_search.search.legacy import LegacyFilterParams


@dataclass
class CatalogQueryResult:
    """Products of one page plus the total number of matches.

    Attributes:
        products: Serialized products of the requested page.
        total_count: Matching products over all pages.
    """

    products: list[dict[str, Any]] = field(default_factory=list)
    total_count: int = 0


class FilterDefinitionSource(Protocol):
    """Supplies the legacy filter block of the catalog."""

    async def get_filter_definitions(
        self,
        selected_filters: LegacyFilterParams | None = None,
    ) -> Sequence[Mapping[str, Any]]:
        """Get filter definitions with live product counts.

        Args:
            selected_filters: Constraints under which counts are computed.
                None counts over the whole catalog.

        Returns:
            Ordered legacy filter definitions.
        """
        ...


class CatalogQueryExecutor(Protocol):
    """Executes filtered product lookups."""

    async def execute_filtered_query(
        self,
        per_page: int,
        page: int,
        order_by: str,
        order_way: str,
        language: str,
        filters: LegacyFilterParams,
    ) -> CatalogQueryResult:
        """Run a filtered, sorted and paginated product query.

        Filters are combined with AND across attribute keys and OR
        within one key.

        Returns:
            Page of products and total count.
        """
        ...
