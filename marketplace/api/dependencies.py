"""FastAPI dependencies.

Builds a ``CatalogService`` per request around the long-lived cache
client stored on ``app.state`` at startup.
"""

from collections.abc import AsyncGenerator

from fastapi import Request

from marketplace.catalog.memory import (
    InMemoryCategoryRepository,
    InMemoryProductRepository,
    InMemoryVariantRepository,
    get_memory_database,
)
from marketplace.catalog.repository import (
    CategoryRepository,
    ProductRepository,
    ProductVariantRepository,
)
from marketplace.catalog.service import CatalogService
from marketplace.infrastructure.config import settings
from marketplace.infrastructure.database import async_session_factory


async def get_catalog_service(request: Request) -> AsyncGenerator[CatalogService, None]:
    """Get catalog service for the current request.

    Yields:
        CatalogService bound to the configured store and the shared cache.
    """
    cache = request.app.state.cache

    if settings.storage_backend == "memory":
        db = get_memory_database()
        yield CatalogService(
            products=InMemoryProductRepository(db),
            variants=InMemoryVariantRepository(db),
            categories=InMemoryCategoryRepository(db),
            cache=cache,
            cache_ttl=settings.cache_ttl_seconds,
        )
        return

    async with async_session_factory() as session:
        yield CatalogService(
            products=ProductRepository(session),
            variants=ProductVariantRepository(session),
            categories=CategoryRepository(session),
            cache=cache,
            cache_ttl=settings.cache_ttl_seconds,
        )
