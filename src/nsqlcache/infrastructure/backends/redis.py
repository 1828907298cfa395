"""Redis cache backend implementation."""

import logging
from collections.abc import Sequence
from typing import Any

import redis.asyncio as redis

from nsqlcache.core.entities.cache_config import TTL
from nsqlcache.core.interfaces.serializer import ISerializer
from nsqlcache.infrastructure.serializers.json import JsonSerializer
from nsqlcache.utils.ttl import ttl_for_store

logger = logging.getLogger(__name__)


class RedisCacheBackend:
    """Redis cache backend for distributed deployments.

    This is a transactional backend: ``multi`` runs a list of commands in
    a MULTI/EXEC pipeline, which the query cache uses to keep its entity
    kind indexes consistent with the cached values. Values are stored as
    UTF-8 JSON.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        client: redis.Redis | None = None,
        serializer: ISerializer | None = None,
        default_ttl: int | None = None,
        name: str = "redis",
    ) -> None:
        """Initialize the Redis cache backend.

        Args:
            redis_url: Redis connection URL, ignored when ``client`` is given.
            client: An existing ``redis.asyncio`` client.
            serializer: Serializer for stored values. Defaults to JSON.
            default_ttl: Default TTL in seconds. None or 0 means no expiration.
            name: Backend name, used to look up per-store TTL configuration.
        """
        self.name = name
        self.serializer = serializer or JsonSerializer()
        self._redis: redis.Redis = client or redis.from_url(  # type: ignore
            redis_url, decode_responses=True
        )
        self._default_ttl = default_ttl

    @property
    def client(self) -> redis.Redis:
        """Return the underlying Redis client."""
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value, or None if not found or expired.
        """
        data = await self._redis.get(key)
        if data is None:
            return None
        return self.serializer.deserialize(data)

    async def mget(self, *keys: str) -> list[Any | None]:
        """Retrieve several cached values, None for misses."""
        if not keys:
            return []
        values = await self._redis.mget(list(keys))
        return [
            self.serializer.deserialize(data) if data is not None else None
            for data in values
        ]

    async def set(self, key: str, value: Any, ttl: TTL | None = None) -> Any:
        """Store value with optional TTL.

        Args:
            key: The cache key.
            value: The value to store.
            ttl: Optional time-to-live. If None, uses default.

        Returns:
            The stored value.
        """
        await self.mset([(key, value)], ttl)
        return value

    async def mset(
        self,
        items: Sequence[tuple[str, Any]],
        ttl: TTL | None = None,
    ) -> list[Any]:
        """Store several key/value pairs in one transaction."""
        item_ttl = self._resolve_ttl(ttl)
        async with self._redis.pipeline(transaction=True) as pipe:
            for key, value in items:
                data = self.serializer.serialize(value)
                if item_ttl:
                    pipe.setex(key, item_ttl, data)
                else:
                    pipe.set(key, data)
            await pipe.execute()
        return [value for _, value in items]

    async def delete(self, *keys: str) -> int:
        """Delete cached values.

        Args:
            keys: The cache keys to delete.

        Returns:
            Number of keys that existed and were deleted.
        """
        if not keys:
            return 0
        return await self._redis.delete(*keys)

    async def reset(self) -> None:
        """Clear all cached values.

        Note: This flushes the whole Redis database the client is bound to.
        """
        await self._redis.flushdb()

    async def multi(self, commands: Sequence[Sequence[Any]]) -> list[Any]:
        """Execute commands atomically in a MULTI/EXEC pipeline.

        Args:
            commands: Commands as ``(name, *args)`` sequences.

        Returns:
            One result per command, in command order.
        """
        async with self._redis.pipeline(transaction=True) as pipe:
            for name, *args in commands:
                getattr(pipe, name)(*args)
            logger.debug("Executing transaction of %d commands", len(commands))
            return await pipe.execute()

    def _resolve_ttl(self, ttl: TTL | None) -> int:
        resolved = ttl_for_store(ttl, self.name)
        if resolved is None:
            resolved = self._default_ttl
        return int(resolved or 0)

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> "RedisCacheBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
