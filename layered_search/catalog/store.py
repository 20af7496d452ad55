"""SQL catalog store.

Implements both collaborators of the search provider on top of
``ProductRepository``: it emits the legacy filter block with live
counts and executes filtered product lookups.
"""

from collections.abc import Sequence
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from layered_search.catalog.repository import MANUFACTURER_KEY, ProductRepository
from layered_search.search.legacy import FILTER_TYPE_CHECKBOX, LegacyFilterParams
from layered_search.search.ports import CatalogQueryResult

logger = structlog.get_logger()


class SqlCatalogStore:
    """Catalog store backed by the products database.

    Facet counts follow the usual layered navigation rule: the count of a
    value is computed with every other attribute's filter applied but
    not its own, so alternatives within a facet stay selectable.

    Example usage:
        async with async_session_factory() as session:
            store = SqlCatalogStore(session, group_order=["Color", "Size"])
            definitions = await store.get_filter_definitions()
            page = await store.execute_filtered_query(
                12, 1, "price", "asc", "en", {"Color": ["Red"]}
            )
    """

    def __init__(
        self,
        session: AsyncSession,
        group_order: Sequence[str] = (),
        include_manufacturer: bool = True,
        manufacturer_label: str = "Brand",
    ) -> None:
        """Initialize store with database session.

        Args:
            session: Async SQLAlchemy session.
            group_order: Attribute groups listed first, in this order.
                Remaining groups follow alphabetically.
            include_manufacturer: Whether to expose the brand filter.
            manufacturer_label: Facet label of the brand filter.
        """
        self.session = session
        self.repository = ProductRepository(session)
        self.group_order = list(group_order)
        self.include_manufacturer = include_manufacturer
        self.manufacturer_label = manufacturer_label

    async def get_filter_definitions(
        self,
        selected_filters: LegacyFilterParams | None = None,
    ) -> list[dict[str, Any]]:
        """Build the legacy filter block.

        Args:
            selected_filters: Filters under which counts are computed.

        Returns:
            Ordered legacy filter definitions.
        """
        selected = selected_filters or {}
        definitions: list[dict[str, Any]] = []

        if self.include_manufacturer:
            brands = await self.repository.get_brand_counts(selected)
            if brands:
                definitions.append(
                    {
                        "key": MANUFACTURER_KEY,
                        "label": self.manufacturer_label,
                        "type": "manufacturer",
                        "filter_type": FILTER_TYPE_CHECKBOX,
                        "options": [
                            {"label": b["value"], "value": b["value"], "count": b["count"]}
                            for b in brands
                        ],
                    }
                )

        values_by_group = await self.repository.get_attribute_values()
        for group in self._ordered_groups(values_by_group):
            counts = await self.repository.get_attribute_counts(group, selected)
            definitions.append(
                {
                    "key": group,
                    "label": group,
                    "type": "id_attribute_group",
                    "filter_type": FILTER_TYPE_CHECKBOX,
                    "options": [
                        {
                            "label": row["value"],
                            "value": row["value"],
                            "count": counts.get(row["value"], 0),
                            "color": row["color"],
                        }
                        for row in values_by_group[group]
                    ],
                }
            )

        logger.debug(
            "Filter block built",
            definitions=len(definitions),
            selected=selected,
        )
        return definitions

    async def execute_filtered_query(
        self,
        per_page: int,
        page: int,
        order_by: str,
        order_way: str,
        language: str,
        filters: LegacyFilterParams,
    ) -> CatalogQueryResult:
        """Run a filtered product lookup.

        Product names are not localized in this store, the language is
        only recorded in logs.

        Args:
            per_page: Page size.
            page: Page number (1-based).
            order_by: Sort field.
            order_way: Sort direction.
            language: Language code.
            filters: Attribute key to accepted values.

        Returns:
            Products of the page and total count.
        """
        products = await self.repository.find_by_filters(
            filters,
            sort_by=order_by,
            sort_order=order_way,
            limit=per_page,
            offset=(page - 1) * per_page,
        )
        total = await self.repository.count_by_filters(filters)

        logger.debug(
            "Filtered query executed",
            filters=filters,
            page=page,
            per_page=per_page,
            language=language,
            total=total,
        )

        return CatalogQueryResult(
            products=[p.to_dict() for p in products],
            total_count=total,
        )

    def _ordered_groups(self, values_by_group: dict[str, Any]) -> list[str]:
        """Order attribute groups by configuration, then by name."""
        configured = [g for g in self.group_order if g in values_by_group]
        remaining = sorted(g for g in values_by_group if g not in configured)
        return configured + remaining
