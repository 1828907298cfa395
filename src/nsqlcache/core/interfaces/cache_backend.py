"""Cache backend interfaces."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from nsqlcache.core.entities.cache_config import TTL
from nsqlcache.core.interfaces.serializer import ISerializer


@runtime_checkable
class ICacheBackend(Protocol):
    """Contract for cache storage backends.

    All cache backends must implement this protocol to be mounted on a
    CacheService. Methods are async to support both in-memory and
    distributed cache implementations.

    The ``ttl`` argument of the write methods is either a number of
    seconds (0 means no expiration) or a function returning the TTL for
    a backend name; backends resolve it with their own ``name``.
    """

    name: str

    async def get(self, key: str) -> Any | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value, or None if not found or expired.
        """
        ...

    async def mget(self, *keys: str) -> list[Any | None]:
        """Retrieve several cached values.

        Args:
            keys: The cache keys to retrieve.

        Returns:
            One value per key, in key order, None for misses.
        """
        ...

    async def set(self, key: str, value: Any, ttl: TTL | None = None) -> Any:
        """Store value with optional TTL.

        Args:
            key: The cache key.
            value: The value to store.
            ttl: Optional time-to-live. If None, uses backend default.

        Returns:
            The stored value.
        """
        ...

    async def mset(
        self,
        items: Sequence[tuple[str, Any]],
        ttl: TTL | None = None,
    ) -> list[Any]:
        """Store several key/value pairs with the same TTL.

        Args:
            items: The ``(key, value)`` pairs to store.
            ttl: Optional time-to-live. If None, uses backend default.

        Returns:
            The stored values, in order.
        """
        ...

    async def delete(self, *keys: str) -> int:
        """Delete cached values.

        Args:
            keys: The cache keys to delete.

        Returns:
            Number of keys that existed and were deleted.
        """
        ...

    async def reset(self) -> None:
        """Clear all cached values."""
        ...


@runtime_checkable
class ITransactionalBackend(ICacheBackend, Protocol):
    """Cache backend supporting atomic multi-command execution.

    Values written through ``multi`` must be encoded with the backend's
    ``serializer`` so that ``get`` can read them back.
    """

    serializer: ISerializer

    async def multi(self, commands: Sequence[Sequence[Any]]) -> list[Any]:
        """Execute commands atomically.

        Args:
            commands: Commands as ``(name, *args)`` sequences, for example
                ``("sadd", "set-key", "member")``.

        Returns:
            One result per command, in command order.
        """
        ...
