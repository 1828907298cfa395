"""Composite backend fanning operations across several backends."""

import asyncio
from collections.abc import Sequence
from typing import Any

from nsqlcache.core.entities.cache_config import TTL
from nsqlcache.core.interfaces.cache_backend import ICacheBackend


class MultiCacheBackend:
    """Cache backend composed of several mounted backends.

    Reads are satisfied from the first backend, in mount order, that
    returns a hit. Writes, deletes and resets go to every backend
    concurrently; a failure in any of them propagates. A deferred TTL is
    passed through so each backend resolves it with its own name.
    """

    name = "multi"

    def __init__(self, backends: Sequence[ICacheBackend]) -> None:
        """Initialize the composite backend.

        Args:
            backends: The backends to compose, in priority order.
        """
        if not backends:
            raise ValueError("MultiCacheBackend requires at least one backend")
        self._backends = list(backends)

    @property
    def backends(self) -> list[ICacheBackend]:
        """Return the composed backends."""
        return list(self._backends)

    async def get(self, key: str) -> Any | None:
        """Retrieve a value from the first backend holding it."""
        for backend in self._backends:
            value = await backend.get(key)
            if value is not None:
                return value
        return None

    async def mget(self, *keys: str) -> list[Any | None]:
        """Retrieve several values, each from the first backend holding it."""
        values: list[Any | None] = [None] * len(keys)
        missing = list(range(len(keys)))
        for backend in self._backends:
            if not missing:
                break
            found = await backend.mget(*(keys[i] for i in missing))
            missing_after = []
            for index, value in zip(missing, found):
                if value is None:
                    missing_after.append(index)
                else:
                    values[index] = value
            missing = missing_after
        return values

    async def set(self, key: str, value: Any, ttl: TTL | None = None) -> Any:
        """Store value in every backend."""
        await asyncio.gather(*(b.set(key, value, ttl) for b in self._backends))
        return value

    async def mset(
        self,
        items: Sequence[tuple[str, Any]],
        ttl: TTL | None = None,
    ) -> list[Any]:
        """Store several key/value pairs in every backend."""
        await asyncio.gather(*(b.mset(items, ttl) for b in self._backends))
        return [value for _, value in items]

    async def delete(self, *keys: str) -> int:
        """Delete keys from every backend.

        Returns:
            The highest number of keys deleted by a single backend.
        """
        counts = await asyncio.gather(*(b.delete(*keys) for b in self._backends))
        return max(counts)

    async def reset(self) -> None:
        """Clear every backend."""
        await asyncio.gather(*(b.reset() for b in self._backends))
