"""Shared fixtures: an in-memory catalog standing in for the SQL store."""

import copy
from typing import Any

import pytest

from layered_search.search.legacy import LegacyFilterParams
from layered_search.search.ports import CatalogQueryResult


COLOR_SIZE_DEFINITIONS: list[dict[str, Any]] = [
    {
        "key": "color",
        "label": "Color",
        "type": "id_attribute_group",
        "options": [
            {"label": "Red", "value": "red", "count": 3, "color": "#ff0000"},
            {"label": "Blue", "value": "blue", "count": 2, "color": "#0000ff"},
        ],
    },
    {
        "key": "size",
        "label": "Size",
        "type": "id_attribute_group",
        "options": [
            {"label": "S", "value": "s", "count": 2},
            {"label": "M", "value": "m", "count": 3},
        ],
    },
]

COLOR_SIZE_PRODUCTS: list[dict[str, Any]] = [
    {"id": "p1", "name": "Red S", "attributes": {"color": ["red"], "size": ["s"]}},
    {"id": "p2", "name": "Red M", "attributes": {"color": ["red"], "size": ["m"]}},
    {"id": "p3", "name": "Red M bis", "attributes": {"color": ["red"], "size": ["m"]}},
    {"id": "p4", "name": "Blue S", "attributes": {"color": ["blue"], "size": ["s"]}},
    {"id": "p5", "name": "Blue M", "attributes": {"color": ["blue"], "size": ["m"]}},
]


class InMemoryCatalog:
    """Catalog collaborator backed by plain lists.

    Counts in the filter block follow the same rule as the SQL store:
    each value is counted under every other key's filter.
    """

    def __init__(
        self,
        definitions: list[dict[str, Any]],
        products: list[dict[str, Any]],
    ) -> None:
        self.definitions = definitions
        self.products = products
        self.definition_calls: list[LegacyFilterParams | None] = []
        self.executed: list[dict[str, Any]] = []

    async def get_filter_definitions(
        self,
        selected_filters: LegacyFilterParams | None = None,
    ) -> list[dict[str, Any]]:
        self.definition_calls.append(selected_filters)
        selected = selected_filters or {}

        definitions = copy.deepcopy(self.definitions)
        for definition in definitions:
            others = {k: v for k, v in selected.items() if k != definition["key"]}
            for option in definition["options"]:
                constraint = {**others, definition["key"]: [option["value"]]}
                option["count"] = len(self._matching(constraint))
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
        self.executed.append(
            {
                "per_page": per_page,
                "page": page,
                "order_by": order_by,
                "order_way": order_way,
                "language": language,
                "filters": filters,
            }
        )
        matching = self._matching(filters)
        start = (page - 1) * per_page
        return CatalogQueryResult(
            products=matching[start:start + per_page],
            total_count=len(matching),
        )

    def _matching(self, filters: LegacyFilterParams) -> list[dict[str, Any]]:
        return [
            product
            for product in self.products
            if all(
                set(product["attributes"].get(key, [])) & set(values)
                for key, values in filters.items()
            )
        ]


@pytest.fixture
def definitions() -> list[dict[str, Any]]:
    """Color/Size filter block."""
    return copy.deepcopy(COLOR_SIZE_DEFINITIONS)


@pytest.fixture
def catalog() -> InMemoryCatalog:
    """In-memory catalog with five Color/Size products."""
    return InMemoryCatalog(
        copy.deepcopy(COLOR_SIZE_DEFINITIONS),
        copy.deepcopy(COLOR_SIZE_PRODUCTS),
    )
