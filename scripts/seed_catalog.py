#!/usr/bin/env python3
"""Seed demo catalog script.

Generates a deterministic demo catalog (brands, colours, sizes,
materials) so the layered navigation filter block has data to show.

Usage:
    python scripts/seed_catalog.py --mode small
    python scripts/seed_catalog.py --mode full --seed 7
"""

import argparse
import asyncio

from sqlalchemy import delete

from layered_search.catalog.generator import CatalogGenerator, GeneratorConfig
from layered_search.catalog.models import Product, ProductAttribute
from layered_search.catalog.repository import ProductRepository
from layered_search.infrastructure.database import Base, async_session_factory, engine


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed(config: GeneratorConfig, clear: bool = True) -> dict:
    """Seed the demo catalog.

    Args:
        config: Generator configuration.
        clear: Whether to delete existing products first.

    Returns:
        Seeding result.
    """
    async with async_session_factory() as session:
        if clear:
            await session.execute(delete(ProductAttribute))
            await session.execute(delete(Product))

        products = CatalogGenerator(config).generate_list()
        await ProductRepository(session).save_all(products)
        await session.commit()

        return {
            "products_created": len(products),
            "attributes_created": sum(len(p.attributes) for p in products),
            "brands_used": len({p.brand for p in products}),
        }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed demo product catalog")
    parser.add_argument(
        "--mode",
        choices=["small", "full"],
        default="small",
        help="Catalog size: small (60 products) or full (500 products)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Don't clear existing products before seeding",
    )
    args = parser.parse_args()

    config = GeneratorConfig.full() if args.mode == "full" else GeneratorConfig.small()
    if args.seed is not None:
        config.seed = args.seed

    print("Creating database tables...")
    await create_tables()

    print(f"Seeding {config.product_count} products (seed={config.seed})...")
    result = await seed(config, clear=not args.no_clear)

    print(f"  Products: {result['products_created']}")
    print(f"  Attributes: {result['attributes_created']}")
    print(f"  Brands: {result['brands_used']}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
