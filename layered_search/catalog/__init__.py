"""Product catalog store.

Provides the SQL-backed filter block and filtered product lookups used
by the search provider, plus a deterministic demo catalog generator.
"""

from layered_search.catalog.generator import CatalogGenerator, GeneratorConfig
from layered_search.catalog.models import Product, ProductAttribute
from layered_search.catalog.repository import MANUFACTURER_KEY, ProductRepository
from layered_search.catalog.store import SqlCatalogStore

__all__ = [
    # Models
    "Product",
    "ProductAttribute",
    # Generator
    "CatalogGenerator",
    "GeneratorConfig",
    # Repository
    "MANUFACTURER_KEY",
    "ProductRepository",
    # Store
    "SqlCatalogStore",
]
