"""Product repository for database operations.

Provides the filtered lookups and value counts the layered navigation
store is built on.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from layered_search.catalog.models import Product, ProductAttribute

# Attribute key of the filter on Product.brand
MANUFACTURER_KEY = "manufacturer"


class ProductRepository:
    """Repository for Product database operations.

    Filters are given as ``{attribute key: [values]}``: values of one key
    are alternatives (OR), keys are all required (AND). The key
    ``manufacturer`` targets the product brand, every other key an
    attribute group.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            products = await repo.find_by_filters(
                {"Color": ["Red", "Blue"], "manufacturer": ["Acme"]},
                limit=20,
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save_all(self, products: list[Product]) -> list[Product]:
        """Save multiple products to database.

        Args:
            products: Products to save.

        Returns:
            Saved products.
        """
        self.session.add_all(products)
        await self.session.flush()
        return products

    async def find_by_filters(
        self,
        filters: Mapping[str, Sequence[str]],
        sort_by: str = "position",
        sort_order: str = "asc",
        limit: int = 20,
        offset: int = 0,
    ) -> Sequence[Product]:
        """Find listed products matching filters.

        Args:
            filters: Attribute key to accepted values.
            sort_by: Sort field (position, name, price, date_add, reference, manufacturer).
            sort_order: Sort order (asc, desc).
            limit: Maximum results.
            offset: Result offset for pagination.

        Returns:
            Sequence of matching products with attributes loaded.
        """
        sort_column = self._get_sort_column(sort_by)
        if sort_order.lower() == "desc":
            ordering = sort_column.desc()
        else:
            ordering = sort_column.asc()

        query = (
            select(Product)
            .where(*self._build_conditions(filters))
            .order_by(ordering, Product.id)
            .limit(limit)
            .offset(offset)
            .options(selectinload(Product.attributes))
        )

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_by_filters(self, filters: Mapping[str, Sequence[str]]) -> int:
        """Count listed products matching filters.

        Args:
            filters: Attribute key to accepted values.

        Returns:
            Count of matching products.
        """
        query = select(func.count(Product.id)).where(*self._build_conditions(filters))
        result = await self.session.execute(query)
        return result.scalar_one()

    async def get_brand_counts(
        self,
        filters: Mapping[str, Sequence[str]],
    ) -> list[dict[str, Any]]:
        """Get every listed brand with its count under the other filters.

        The manufacturer filter itself is ignored so that alternative
        brands keep their counts.

        Args:
            filters: Current filters.

        Returns:
            Brand rows ordered by name: ``{"value", "count"}``.
        """
        brands = await self.session.execute(
            select(Product.brand)
            .where(Product.active.is_(True))
            .distinct()
            .order_by(Product.brand)
        )

        counts_query = (
            select(Product.brand, func.count(Product.id))
            .where(*self._build_conditions(filters, exclude_key=MANUFACTURER_KEY))
            .group_by(Product.brand)
        )
        counts = dict((await self.session.execute(counts_query)).tuples().all())

        return [
            {"value": brand, "count": counts.get(brand, 0)}
            for brand in brands.scalars().all()
        ]

    async def get_attribute_values(self) -> dict[str, list[dict[str, Any]]]:
        """Get distinct attribute values of listed products per group.

        Returns:
            Group name to value rows ``{"value", "color"}``, ordered by
            position then value.
        """
        query = (
            select(
                ProductAttribute.group,
                ProductAttribute.value,
                func.max(ProductAttribute.color).label("color"),
                func.min(ProductAttribute.position).label("position"),
            )
            .join(Product, Product.id == ProductAttribute.product_id)
            .where(Product.active.is_(True))
            .group_by(ProductAttribute.group, ProductAttribute.value)
        )
        rows = (await self.session.execute(query)).all()

        groups: dict[str, list[dict[str, Any]]] = {}
        for row in sorted(rows, key=lambda r: (r.group, r.position, r.value)):
            groups.setdefault(row.group, []).append(
                {"value": row.value, "color": row.color}
            )
        return groups

    async def get_attribute_counts(
        self,
        group: str,
        filters: Mapping[str, Sequence[str]],
    ) -> dict[str, int]:
        """Count products per value of one group under the other filters.

        Args:
            group: Attribute group.
            filters: Current filters; the group's own filter is ignored.

        Returns:
            Value to product count. Values without matches are absent.
        """
        query = (
            select(
                ProductAttribute.value,
                func.count(ProductAttribute.product_id.distinct()),
            )
            .join(Product, Product.id == ProductAttribute.product_id)
            .where(
                ProductAttribute.group == group,
                *self._build_conditions(filters, exclude_key=group),
            )
            .group_by(ProductAttribute.value)
        )
        result = await self.session.execute(query)
        return dict(result.tuples().all())

    def _build_conditions(
        self,
        filters: Mapping[str, Sequence[str]],
        exclude_key: str | None = None,
    ) -> list[Any]:
        """Build WHERE conditions for filters.

        Args:
            filters: Attribute key to accepted values.
            exclude_key: Key to leave out (used for facet counts).

        Returns:
            List of SQLAlchemy conditions.
        """
        conditions: list[Any] = [Product.active.is_(True)]

        for key, values in filters.items():
            if key == exclude_key or not values:
                continue

            if key == MANUFACTURER_KEY:
                conditions.append(Product.brand.in_(list(values)))
            else:
                matching = (
                    select(ProductAttribute.product_id)
                    .where(
                        ProductAttribute.group == key,
                        ProductAttribute.value.in_(list(values)),
                    )
                    .correlate(None)
                )
                conditions.append(Product.id.in_(matching))

        return conditions

    def _get_sort_column(self, sort_by: str) -> Any:
        """Get SQLAlchemy column for sorting.

        Args:
            sort_by: Sort field name.

        Returns:
            SQLAlchemy column.
        """
        columns = {
            "position": Product.position,
            "name": Product.name,
            "price": Product.price,
            "date_add": Product.created_at,
            "reference": Product.reference,
            "manufacturer": Product.brand,
        }
        return columns.get(sort_by, Product.position)
