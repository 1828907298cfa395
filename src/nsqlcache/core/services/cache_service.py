"""Cache service - main orchestrator for caching operations."""

import copy
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from nsqlcache.core.entities.cache_config import TTL, CacheConfig
from nsqlcache.core.interfaces.cache_backend import ICacheBackend, ITransactionalBackend
from nsqlcache.core.interfaces.datastore_adapter import IDatastoreAdapter
from nsqlcache.core.services.adapter import AdapterBridge
from nsqlcache.core.services.entity_cache import EntityCache
from nsqlcache.core.services.query_cache import QueryCache
from nsqlcache.exceptions import ConfigurationError
from nsqlcache.infrastructure.backends.memory import InMemoryCacheBackend
from nsqlcache.infrastructure.backends.multi import MultiCacheBackend
from nsqlcache.infrastructure.key_builders.default import DefaultKeyBuilder

logger = logging.getLogger(__name__)


class CacheService:
    """Domain service that orchestrates caching operations.

    This is the main entry point of the library. It owns the mounted
    backends, the merged configuration and the datastore adapter, and
    exposes the cache-aside helpers for entities (``entities``) and
    queries (``queries``).

    Example:
        cache = CacheService(
            adapter=MyDatastoreAdapter(),
            stores=[InMemoryCacheBackend(), RedisCacheBackend()],
            config={"ttl": {"memory": {"query": 30}}},
        )
        user = await cache.entities.read(user_key)
        users, meta = await cache.queries.read(users_query)
        await cache.queries.clear_queries_entity_kind("User")
    """

    def __init__(
        self,
        adapter: IDatastoreAdapter | None,
        stores: Sequence[ICacheBackend] | None = None,
        config: CacheConfig | Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            adapter: The datastore adapter to cache.
            stores: Backends to mount, in priority order. Defaults to a
                single in-memory backend.
            config: Cache configuration, or a mapping merged over the
                defaults. Uses defaults if not provided.

        Raises:
            ConfigurationError: If no adapter is provided.
        """
        if adapter is None:
            raise ConfigurationError("No valid Database adapter provided.")

        if isinstance(config, CacheConfig):
            self._config = copy.deepcopy(config)
        else:
            self._config = CacheConfig.from_dict(config or {})

        self._stores: list[ICacheBackend] = (
            list(stores) if stores else [InMemoryCacheBackend(maxsize=100)]
        )
        self._cache: ICacheBackend
        self._transactional_backend: ITransactionalBackend | None = None
        self._cache_without_transactional: MultiCacheBackend | None = None
        self._select_backends()

        self._adapter = AdapterBridge(adapter)
        self._key_builder = DefaultKeyBuilder(
            self._adapter,
            prefix=self._config.cache_prefix,
            hash_keys=self._config.hash_cache_keys,
        )

        self.entities = EntityCache(self)
        self.queries = QueryCache(self)

        wrap_client = getattr(adapter, "wrap_client", None)
        if self._config.wrap_client and wrap_client is not None:
            wrap_client(self)

    def _select_backends(self) -> None:
        stores = self._stores
        transactional = [s for s in stores if isinstance(s, ITransactionalBackend)]

        if len(stores) > 1:
            self._cache = MultiCacheBackend(stores)
            if transactional:
                self._transactional_backend = transactional[0]
                others = [s for s in stores if s is not self._transactional_backend]
                self._cache_without_transactional = MultiCacheBackend(others)
        else:
            self._cache = stores[0]
            if transactional:
                self._transactional_backend = transactional[0]
                # Only a transactional store: cache with its (longer) TTLs
                if self._config.ttl_from_defaults:
                    self._config.ttl.use_store_defaults(stores[0].name)

        logger.debug(
            "Mounted cache stores %s (transactional: %s)",
            [s.name for s in stores],
            self._transactional_backend.name if self._transactional_backend else None,
        )

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def adapter(self) -> AdapterBridge:
        """Get the datastore adapter."""
        return self._adapter

    @property
    def key_builder(self) -> DefaultKeyBuilder:
        """Get the key builder."""
        return self._key_builder

    @property
    def stores(self) -> list[ICacheBackend]:
        """Get the mounted backends."""
        return list(self._stores)

    @property
    def cache(self) -> ICacheBackend:
        """Get the active backend: the single store or the composite."""
        return self._cache

    @property
    def transactional_backend(self) -> ITransactionalBackend | None:
        """Get the transactional backend, if one is mounted."""
        return self._transactional_backend

    @property
    def cache_without_transactional(self) -> MultiCacheBackend | None:
        """Get the composite of every store except the transactional one.

        Only set when a transactional backend is mounted together with
        other backends.
        """
        return self._cache_without_transactional

    async def get(self, key: str) -> Any | None:
        """Get a value from the active backend, None on a miss."""
        return await self._cache.get(key)

    async def mget(self, *keys: str) -> list[Any | None]:
        """Get several values in key order, None for misses."""
        return await self._cache.mget(*keys)

    async def set(self, key: str, value: Any, ttl: TTL | None = None) -> Any:
        """Store a value and return it."""
        return await self._cache.set(key, value, ttl)

    async def mset(
        self,
        items: Sequence[tuple[str, Any]],
        ttl: TTL | None = None,
    ) -> list[Any]:
        """Store several key/value pairs with one TTL and return the values."""
        return await self._cache.mset(items, ttl)

    async def delete(self, *keys: str) -> int:
        """Delete keys and return how many existed."""
        return await self._cache.delete(*keys)

    async def reset(self) -> None:
        """Clear the active backend."""
        await self._cache.reset()

    async def prime_cache(
        self,
        keys: str | list[str],
        values: Any,
        ttl: TTL | None = None,
        backend: ICacheBackend | None = None,
    ) -> Any:
        """Write key/value pairs to the cache in one ``mset`` call.

        ``keys`` is either a single key or a list of keys. A single key is
        always paired with ``values`` as one value, even if ``values`` is a
        list. With a list of keys, a non-list value is wrapped in a list.

        Args:
            keys: Canonical cache key(s).
            values: Value, or list of values parallel to ``keys``.
            ttl: Resolved TTL of the write.
            backend: Backend to write to. Defaults to the active backend.

        Returns:
            The value when exactly one pair was written, else the list of
            values.

        Raises:
            ValueError: If ``keys`` and ``values`` lengths differ.
        """
        if not isinstance(keys, list):
            keys = [keys]
            values = [values]
        elif not isinstance(values, list):
            values = [values]

        if len(keys) != len(values):
            raise ValueError(
                f"Cannot prime {len(keys)} keys with {len(values)} values"
            )

        target = backend or self._cache
        response = await target.mset(list(zip(keys, values)), ttl)
        if len(response) == 1:
            return response[0]
        return response
