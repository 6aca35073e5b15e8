"""Tests for cache adapters."""

from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from marketplace.catalog.entities import Product, ProductVariant
from marketplace.infrastructure.cache import (
    CacheError,
    MemoryCache,
    NullCache,
    RedisCache,
    create_cache,
)
from marketplace.infrastructure.config import Settings


class Opaque:
    """Value pydantic has no JSON encoding for."""


@pytest.fixture
def sample() -> Product:
    return Product(name="Lamp", category_id=uuid4(), sku="LMP-1", images=["a.jpg"])


class TestMemoryCache:
    """Tests for MemoryCache."""

    async def test_roundtrip(self, cache: MemoryCache, sample: Product) -> None:
        """A stored model decodes to an equal model."""
        await cache.set("k", sample, 60)

        assert await cache.get("k", Product) == sample

    async def test_miss(self, cache: MemoryCache) -> None:
        """Missing key reads as None."""
        assert await cache.get("missing", Product) is None
        assert not await cache.exists("missing")

    async def test_expiry(self, cache: MemoryCache, clock, sample: Product) -> None:
        """Entries vanish once the TTL has elapsed."""
        await cache.set("k", sample, 60)

        clock.advance(59)
        assert await cache.exists("k")

        clock.advance(1)
        assert not await cache.exists("k")
        assert await cache.get("k", Product) is None

    async def test_delete(self, cache: MemoryCache, sample: Product) -> None:
        """Deleted keys miss; deleting twice is fine."""
        await cache.set("k", sample, 60)

        await cache.delete("k")
        await cache.delete("k")

        assert await cache.get("k", Product) is None

    async def test_undecodable_value(self, cache: MemoryCache) -> None:
        """A value that does not decode raises CacheError."""
        await cache.set_raw("k", '{"name": 1}', 60)

        with pytest.raises(CacheError):
            await cache.get("k", Product)

    async def test_not_json(self, cache: MemoryCache) -> None:
        """Malformed JSON raises CacheError."""
        await cache.set_raw("k", "{not json", 60)

        with pytest.raises(CacheError):
            await cache.get("k", Product)

    async def test_unencodable_value(self, cache: MemoryCache) -> None:
        """A model that cannot be serialized raises CacheError and stores nothing."""
        variant = ProductVariant(
            product_id=uuid4(),
            seller_id=uuid4(),
            price=Decimal("1.00"),
            attributes={"blob": Opaque()},
        )

        with pytest.raises(CacheError):
            await cache.set("k", variant, 60)

        assert not await cache.exists("k")


class TestRedisCache:
    """Tests for RedisCache with a mocked client."""

    async def test_set_uses_ttl(self, sample: Product) -> None:
        """Values are written with an expiry."""
        client = AsyncMock()
        cache = RedisCache(client)

        await cache.set("product:1", sample, 300)

        client.set.assert_awaited_once_with("product:1", sample.model_dump_json(), ex=300)

    async def test_get_decodes(self, sample: Product) -> None:
        """Stored JSON decodes into the model."""
        client = AsyncMock()
        client.get.return_value = sample.model_dump_json()

        assert await RedisCache(client).get("product:1", Product) == sample

    async def test_exists(self) -> None:
        """EXISTS count is turned into a bool."""
        client = AsyncMock()
        client.exists.return_value = 0

        assert await RedisCache(client).exists("product:1") is False

    @pytest.mark.parametrize("method", ["get", "set", "delete", "exists"])
    async def test_redis_errors_wrapped(self, method: str, sample: Product) -> None:
        """Client failures surface as CacheError."""
        client = AsyncMock()
        getattr(client, method).side_effect = RedisConnectionError("refused")
        cache = RedisCache(client)

        with pytest.raises(CacheError):
            if method == "get":
                await cache.get("k", Product)
            elif method == "set":
                await cache.set("k", sample, 10)
            elif method == "delete":
                await cache.delete("k")
            else:
                await cache.exists("k")

    async def test_close(self) -> None:
        """Closing releases the client."""
        client = AsyncMock()

        await RedisCache(client).close()

        client.aclose.assert_awaited_once()


class TestNullCache:
    """Tests for NullCache."""

    async def test_always_misses(self, sample: Product) -> None:
        cache = NullCache()
        await cache.set("k", sample, 60)

        assert await cache.get("k", Product) is None
        assert not await cache.exists("k")


class TestCreateCache:
    """Tests for backend selection."""

    def test_memory(self) -> None:
        assert isinstance(create_cache(Settings(cache_backend="memory")), MemoryCache)

    def test_none(self) -> None:
        assert isinstance(create_cache(Settings(cache_backend="none")), NullCache)

    def test_redis(self) -> None:
        """Redis client is created lazily, no connection is made."""
        cache = create_cache(Settings(cache_backend="redis", redis_url="redis://localhost:6379/1"))
        assert isinstance(cache, RedisCache)

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            create_cache(Settings(cache_backend="memcached"))
