"""Shared fixtures.

The suite runs entirely on the in-memory store and cache bindings; the
environment is set before the application settings are first imported.
"""

import os

os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("LOG_FORMAT", "console")

from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import pytest

from marketplace.catalog.entities import Category, Product, ProductVariant
from marketplace.catalog.memory import (
    InMemoryCategoryRepository,
    InMemoryProductRepository,
    InMemoryVariantRepository,
    MemoryDatabase,
)
from marketplace.catalog.service import CatalogService
from marketplace.infrastructure.cache import MemoryCache


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock driving cache expiry."""
    return FakeClock()


@pytest.fixture
def db() -> MemoryDatabase:
    """Fresh in-memory tables."""
    return MemoryDatabase()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCache:
    """In-memory cache on the fake clock."""
    return MemoryCache(clock=clock)


@pytest.fixture
def service(db: MemoryDatabase, cache: MemoryCache) -> CatalogService:
    """Catalog service over in-memory stores with a 300s cache TTL."""
    return CatalogService(
        products=InMemoryProductRepository(db),
        variants=InMemoryVariantRepository(db),
        categories=InMemoryCategoryRepository(db),
        cache=cache,
        cache_ttl=300,
    )


@pytest.fixture
async def category(service: CatalogService) -> Category:
    """A stored category."""
    return await service.create_category({"name": "Laptops"})


@pytest.fixture
def product_data(category: Category) -> dict[str, Any]:
    """Valid product creation payload."""
    return {
        "name": "Acme Laptop 14",
        "description": "Lightweight 14 inch laptop",
        "category_id": category.id,
        "brand": "Acme",
        "sku": "ACME-LT-14",
        "images": ["https://img.example.com/1.jpg", "https://img.example.com/2.jpg"],
    }


@pytest.fixture
async def product(service: CatalogService, product_data: dict[str, Any]) -> Product:
    """A stored product."""
    return await service.create_product(product_data)


@pytest.fixture
def seller_id() -> UUID:
    """A seller identifier."""
    return uuid4()


@pytest.fixture
async def variant(service: CatalogService, product: Product, seller_id: UUID) -> ProductVariant:
    """A stored variant priced 100.00 with 10 units."""
    return await service.add_product_variant(
        {
            "product_id": product.id,
            "seller_id": seller_id,
            "price": Decimal("100.00"),
            "stock": 10,
            "attributes": {"color": "black"},
        }
    )
