"""Cache adapters.

Key/value storage of serialized pydantic models with a per-entry TTL.
Every failure, including a value that no longer deserializes, surfaces
as ``CacheError``; deciding whether that matters is the caller's job.
"""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TypeVar

import redis.asyncio as redis
import structlog
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError
from redis.exceptions import RedisError

from marketplace.infrastructure.config import Settings

logger = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)


class CacheError(Exception):
    """Raised when a cache operation fails."""


class Cache(ABC):
    """Base class for cache backends.

    Subclasses store raw strings; this class handles JSON encoding of
    models on top of them.
    """

    async def get(self, key: str, model: type[M]) -> M | None:
        """Get a cached model.

        Args:
            key: Cache key.
            model: Model class to decode into.

        Returns:
            The decoded model, or None on a miss.

        Raises:
            CacheError: If the backend fails or the value cannot be decoded.
        """
        raw = await self.get_raw(key)
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValueError as e:  # includes pydantic.ValidationError
            raise CacheError(f"cannot decode cached value for {key}: {e}") from e

    async def set(self, key: str, value: BaseModel, ttl: int) -> None:
        """Store a model for ``ttl`` seconds.

        Raises:
            CacheError: If the backend fails or the model cannot be encoded.
        """
        try:
            raw = value.model_dump_json()
        except PydanticSerializationError as e:
            raise CacheError(f"cannot encode value for {key}: {e}") from e
        await self.set_raw(key, raw, ttl)

    @abstractmethod
    async def get_raw(self, key: str) -> str | None:
        """Get the raw string stored under ``key``."""

    @abstractmethod
    async def set_raw(self, key: str, value: str, ttl: int) -> None:
        """Store a raw string under ``key`` for ``ttl`` seconds."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Removing a missing key is not an error."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Whether ``key`` holds an unexpired value."""

    async def close(self) -> None:
        """Release backend resources."""


class RedisCache(Cache):
    """Redis-backed cache."""

    def __init__(self, client: redis.Redis) -> None:
        """Initialize with a Redis client.

        Args:
            client: redis.asyncio client, created once per process.
        """
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        """Create a cache from a ``redis://`` URL."""
        return cls(redis.from_url(url, decode_responses=True))

    async def get_raw(self, key: str) -> str | None:
        try:
            return await self.client.get(key)
        except RedisError as e:
            raise CacheError(f"redis GET {key} failed: {e}") from e

    async def set_raw(self, key: str, value: str, ttl: int) -> None:
        try:
            await self.client.set(key, value, ex=ttl)
        except RedisError as e:
            raise CacheError(f"redis SET {key} failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except RedisError as e:
            raise CacheError(f"redis DEL {key} failed: {e}") from e

    async def exists(self, key: str) -> bool:
        try:
            return await self.client.exists(key) > 0
        except RedisError as e:
            raise CacheError(f"redis EXISTS {key} failed: {e}") from e

    async def close(self) -> None:
        await self.client.aclose()


class MemoryCache(Cache):
    """Process-local cache with lazy expiry.

    Args:
        clock: Monotonic time source in seconds; tests pass a fake clock
            to step past TTLs.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    async def get_raw(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set_raw(self, key: str, value: str, ttl: int) -> None:
        self._entries[key] = (value, self._clock() + ttl)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def exists(self, key: str) -> bool:
        return await self.get_raw(key) is not None

    async def close(self) -> None:
        self._entries.clear()


class NullCache(Cache):
    """Cache that stores nothing; every read is a miss."""

    async def get_raw(self, key: str) -> str | None:
        return None

    async def set_raw(self, key: str, value: str, ttl: int) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None

    async def exists(self, key: str) -> bool:
        return False


def create_cache(settings: Settings) -> Cache:
    """Build the cache backend selected by ``settings.cache_backend``.

    Args:
        settings: Application settings.

    Returns:
        A ready-to-use cache. Redis connects lazily on first command.
    """
    backend = settings.cache_backend.lower()
    if backend == "redis":
        logger.info("Using Redis cache", redis_url=settings.redis_url)
        return RedisCache.from_url(settings.redis_url)
    if backend == "memory":
        logger.info("Using in-memory cache")
        return MemoryCache()
    if backend == "none":
        logger.info("Cache disabled")
        return NullCache()
    raise ValueError(f"unknown cache backend: {settings.cache_backend}")
