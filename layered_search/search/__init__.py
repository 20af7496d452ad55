"""Faceted search core.

Converts the legacy filter block into facets, encodes navigation state
and orchestrates search requests.
"""

from layered_search.search.codec import NavigationStateCodec
from layered_search.search.converter import FiltersConverter
from layered_search.search.legacy import (
    LegacyFilterDefinition,
    LegacyFilterOption,
    LegacyFilterParams,
)
from layered_search.search.ports import (
    CatalogQueryExecutor,
    CatalogQueryResult,
    FilterDefinitionSource,
)
from layered_search.search.provider import LayeredProductSearchProvider, apply_activation

__all__ = [
    "CatalogQueryExecutor",
    "CatalogQueryResult",
    "FilterDefinitionSource",
    "FiltersConverter",
    "LayeredProductSearchProvider",
    "LegacyFilterDefinition",
    "LegacyFilterOption",
    "LegacyFilterParams",
    "NavigationStateCodec",
    "apply_activation",
]
