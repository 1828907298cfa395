"""In-memory cache backend implementation."""

import math
import time
from collections.abc import Callable, Sequence
from typing import Any, NamedTuple

from cachetools import TLRUCache  # type: ignore[import-untyped]

from nsqlcache.core.entities.cache_config import TTL
from nsqlcache.utils.ttl import ttl_for_store


class _Item(NamedTuple):
    value: Any
    ttl: float


def _time_to_use(_key: str, item: _Item, now: float) -> float:
    return now + item.ttl if item.ttl > 0 else math.inf


class InMemoryCacheBackend:
    """In-memory cache backend using LRU with per-item TTL support.

    Suitable for single-process deployments. Uses cachetools' TLRUCache
    for LRU eviction and per-item expiration. Values are kept as Python
    objects, no serialization happens.
    """

    def __init__(
        self,
        maxsize: int = 100,
        default_ttl: float = 0,
        name: str = "memory",
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache backend.

        Args:
            maxsize: Maximum number of items in the cache.
            default_ttl: Default TTL in seconds for items (0 = no expiration).
            name: Backend name, used to look up per-store TTL configuration.
            timer: Clock used for expiration.
        """
        self.name = name
        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self._cache: TLRUCache[str, _Item] = TLRUCache(
            maxsize=maxsize,
            ttu=_time_to_use,
            timer=timer,
        )

    async def get(self, key: str) -> Any | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value, or None if not found or expired.
        """
        item = self._cache.get(key)
        return item.value if item is not None else None

    async def mget(self, *keys: str) -> list[Any | None]:
        """Retrieve several cached values, None for misses."""
        return [await self.get(key) for key in keys]

    async def set(self, key: str, value: Any, ttl: TTL | None = None) -> Any:
        """Store value with optional TTL.

        Args:
            key: The cache key.
            value: The value to store.
            ttl: Optional time-to-live. If None, uses default.

        Returns:
            The stored value.
        """
        self._cache[key] = _Item(value, self._resolve_ttl(ttl))
        return value

    async def mset(
        self,
        items: Sequence[tuple[str, Any]],
        ttl: TTL | None = None,
    ) -> list[Any]:
        """Store several key/value pairs with the same TTL."""
        item_ttl = self._resolve_ttl(ttl)
        for key, value in items:
            self._cache[key] = _Item(value, item_ttl)
        return [value for _, value in items]

    async def delete(self, *keys: str) -> int:
        """Delete cached values.

        Args:
            keys: The cache keys to delete.

        Returns:
            Number of keys that existed and were deleted.
        """
        count = 0
        for key in keys:
            try:
                del self._cache[key]
                count += 1
            except KeyError:
                pass
        return count

    async def reset(self) -> None:
        """Clear all cached values."""
        self._cache.clear()

    def _resolve_ttl(self, ttl: TTL | None) -> float:
        resolved = ttl_for_store(ttl, self.name)
        return self._default_ttl if resolved is None else resolved

    def __len__(self) -> int:
        """Return the number of items in the cache."""
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize
