#!/usr/bin/env python3
"""Seed product catalog script.

Creates a small category tree and sample products with seller variants
through the catalog service, so every invariant applies to seed data too.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --products 50 --sellers 3
    python scripts/seed_catalog.py --create-tables
"""

import argparse
import asyncio
import random
import sys
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from marketplace.catalog.repository import (
    CategoryRepository,
    ProductRepository,
    ProductVariantRepository,
)
from marketplace.catalog.service import CatalogService
from marketplace.infrastructure.cache import create_cache
from marketplace.infrastructure.config import settings
from marketplace.infrastructure.database import Base, async_session_factory, engine

CATEGORY_TREE: dict[str, list[str]] = {
    "Electronics": ["Laptops", "Headphones", "Phones"],
    "Home": ["Kitchen", "Furniture"],
    "Apparel": ["Shoes", "Jackets"],
}

BRANDS = ["Acme", "Contoso", "Northwind", "Fabrikam", "Globex"]
COLORS = ["Black", "White", "Red", "Blue"]


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed(products: int, sellers: int, seed: int) -> dict:
    """Seed categories, products and variants.

    Args:
        products: Number of products to create.
        sellers: Number of distinct seller IDs to spread variants over.
        seed: Random seed for reproducible prices and stock.

    Returns:
        Seeding result with counts.
    """
    rng = random.Random(seed)
    seller_ids = [uuid4() for _ in range(sellers)]
    cache = create_cache(settings)

    async with async_session_factory() as session:
        service = CatalogService(
            products=ProductRepository(session),
            variants=ProductVariantRepository(session),
            categories=CategoryRepository(session),
            cache=cache,
            cache_ttl=settings.cache_ttl_seconds,
        )

        leaves = []
        for root_name, children in CATEGORY_TREE.items():
            root = await service.create_category({"name": root_name})
            for child in children:
                leaves.append(
                    await service.create_category({"name": child, "parent_id": root.id})
                )

        variant_count = 0
        for i in range(products):
            category = rng.choice(leaves)
            brand = rng.choice(BRANDS)
            product = await service.create_product(
                {
                    "name": f"{brand} {category.name} {i + 1:04d}",
                    "description": f"Sample {category.name.lower()} from {brand}.",
                    "category_id": category.id,
                    "brand": brand,
                    "sku": f"SEED-{seed}-{i + 1:05d}",
                    "images": [f"https://img.example.com/seed/{i + 1}.jpg"],
                }
            )
            for seller_id in rng.sample(seller_ids, k=rng.randint(1, len(seller_ids))):
                price = Decimal(rng.randint(999, 99999)) / 100
                discount = (price * Decimal("0.9")).quantize(Decimal("0.01")) if rng.random() < 0.3 else None
                await service.add_product_variant(
                    {
                        "product_id": product.id,
                        "seller_id": seller_id,
                        "price": price,
                        "discount_price": discount,
                        "stock": rng.randint(0, 200),
                        "attributes": {"color": rng.choice(COLORS)},
                    }
                )
                variant_count += 1

    await cache.close()

    return {
        "categories_created": len(leaves) + len(CATEGORY_TREE),
        "products_created": products,
        "variants_created": variant_count,
        "sellers": [str(s) for s in seller_ids],
    }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the product catalog")
    parser.add_argument("--products", type=int, default=20, help="Products to create")
    parser.add_argument("--sellers", type=int, default=3, help="Distinct sellers")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables from ORM metadata before seeding",
    )
    args = parser.parse_args()

    if args.create_tables:
        await create_tables()

    result = await seed(args.products, args.sellers, args.seed)

    print("\nSeeding complete:")
    for key, value in result.items():
        print(f"  {key}: {value}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
