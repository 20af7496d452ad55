"""Demo catalog generator with deterministic seeding.

Generates products with brands and attribute values (colour, size,
material) so the filter block has realistic facets to show. Uses seeded
random for reproducibility.
"""

import random
from dataclasses import dataclass
from typing import Iterator

from layered_search.catalog.models import Product, ProductAttribute


# ============================================================================
# Constants
# ============================================================================

# Synthetic brand names (fictional companies)
BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
]

# Colour values with swatches
COLORS = [
    ("Black", "#000000"),
    ("White", "#ffffff"),
    ("Red", "#e84c3d"),
    ("Blue", "#5d9cec"),
    ("Green", "#a0d468"),
]

SIZES = ["S", "M", "L", "XL"]

MATERIALS = ["Cotton", "Linen", "Wool", "Polyester"]

PRODUCT_TYPES = ["T-Shirt", "Sweater", "Jacket", "Dress", "Hoodie"]

ADJECTIVES = ["Classic", "Essential", "Premium", "Everyday", "Urban"]

PRICE_RANGE = (1499, 14999)  # cents


@dataclass
class GeneratorConfig:
    """Configuration for demo catalog generation.

    Attributes:
        product_count: Number of products to generate.
        seed: Random seed for reproducibility.
        inactive_ratio: Share of products generated as unlisted.
    """

    product_count: int = 60
    seed: int = 42
    inactive_ratio: float = 0.05

    @classmethod
    def small(cls) -> "GeneratorConfig":
        """Small catalog for development."""
        return cls(product_count=60)

    @classmethod
    def full(cls) -> "GeneratorConfig":
        """Larger catalog for pagination testing."""
        return cls(product_count=500)


class CatalogGenerator:
    """Deterministic demo catalog generator.

    The same config always yields the same products, attribute values
    and positions.

    Example usage:
        generator = CatalogGenerator(GeneratorConfig.small())
        products = generator.generate_list()
    """

    def __init__(self, config: GeneratorConfig) -> None:
        """Initialize generator.

        Args:
            config: Generation parameters.
        """
        self.config = config
        self._random = random.Random(config.seed)

    def generate(self) -> Iterator[Product]:
        """Generate products one by one.

        Yields:
            Product with its attributes attached.
        """
        self._random.seed(self.config.seed)
        for index in range(self.config.product_count):
            yield self._generate_product(index)

    def generate_list(self) -> list[Product]:
        """Generate all products."""
        return list(self.generate())

    def _generate_product(self, index: int) -> Product:
        """Generate one product."""
        rng = self._random
        brand = rng.choice(BRANDS)
        product_type = rng.choice(PRODUCT_TYPES)
        color, swatch = rng.choice(COLORS)
        material = rng.choice(MATERIALS)

        product = Product(
            reference=f"DEMO-{index + 1:05d}",
            name=f"{brand} {rng.choice(ADJECTIVES)} {product_type}",
            description=f"{material} {product_type.lower()} in {color.lower()}.",
            brand=brand,
            price=rng.randint(*PRICE_RANGE),
            position=index,
            active=rng.random() >= self.config.inactive_ratio,
        )

        attributes = [
            ProductAttribute(
                group="Color",
                value=color,
                color=swatch,
                position=[c for c, _ in COLORS].index(color),
            ),
            ProductAttribute(group="Material", value=material, position=MATERIALS.index(material)),
        ]
        for size in sorted(rng.sample(SIZES, k=rng.randint(1, len(SIZES))), key=SIZES.index):
            attributes.append(
                ProductAttribute(group="Size", value=size, position=SIZES.index(size))
            )
        product.attributes = attributes

        return product
