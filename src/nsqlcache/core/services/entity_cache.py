"""Cache-aside reads and writes of entities by key."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any

from nsqlcache.core.entities.cache_config import TTL, CacheKind, CacheOptions
from nsqlcache.exceptions import is_not_found
from nsqlcache.utils.ttl import get_ttl

if TYPE_CHECKING:
    from nsqlcache.core.services.cache_service import CacheService

logger = logging.getLogger(__name__)

FetchHandler = Callable[[Any], Awaitable[Any]]


class EntityCache:
    """Cache for entities fetched by their datastore key.

    ``read`` checks the cache first and only fetches the keys that were
    not cached, with a single call to the fetch handler. Results always
    follow the order of the keys requested.
    """

    def __init__(self, cache: "CacheService") -> None:
        self._cache = cache

    async def read(
        self,
        keys: Any,
        options: CacheOptions | None = None,
        fetch_handler: FetchHandler | None = None,
    ) -> Any:
        """Read entities from the cache, fetching and caching the misses.

        Args:
            keys: A datastore key, or a list of keys.
            options: Call options (TTL of the cache writes).
            fetch_handler: Coroutine function fetching the keys from the
                datastore. Defaults to the adapter's ``get_entity``.

        Returns:
            The entity for a single key. For a list of keys, a list of the
            same length and order, with None for entities not found.

        Raises:
            EntityNotFoundError: If a single key (not in a list) is not found.
                Errors carrying its code propagate the same way.
        """
        fetch = fetch_handler or self._cache.adapter.get_entity
        ttl = get_ttl(options, self._cache.config, len(self._cache.stores), CacheKind.ENTITY)

        if isinstance(keys, list):
            return await self._read_many(keys, ttl, fetch)
        return await self._read_one(keys, ttl, fetch)

    async def _read_one(self, key: Any, ttl: TTL, fetch: FetchHandler) -> Any:
        string_key = self._cache.key_builder.key_to_string(key)

        entity = await self._cache.get(string_key)
        if entity is not None:
            logger.debug("Cache hit for entity %s", string_key)
            return self._cache.adapter.add_key_to_entity(key, entity)

        logger.debug("Cache miss for entity %s", string_key)
        entity = await fetch(key)
        if entity is None:
            return None

        entity = self._cache.adapter.add_key_to_entity(key, entity)
        await self._cache.prime_cache(string_key, entity, ttl)
        return entity

    async def _read_many(self, keys: list[Any], ttl: TTL, fetch: FetchHandler) -> list[Any]:
        if not keys:
            return []

        key_builder = self._cache.key_builder
        string_keys = [key_builder.key_to_string(key) for key in keys]

        cached = await self._cache.mget(*string_keys)
        found = {sk: entity for sk, entity in zip(string_keys, cached) if entity is not None}

        if not found:
            logger.debug("Cache miss for all %d entities", len(keys))
            try:
                fetched = await fetch(keys)
            except Exception as error:
                if not is_not_found(error):
                    raise
                return [None] * len(keys)
            entities = self._order_entities(fetched, string_keys)
            await self._prime(string_keys, entities, ttl)
            return self._add_keys(keys, entities)

        missing: dict[str, Any] = {}
        for key, string_key in zip(keys, string_keys):
            if string_key not in found:
                missing.setdefault(string_key, key)

        if missing:
            logger.debug(
                "Cache hit for %d entities, fetching %d", len(found), len(missing)
            )
            missing_keys = list(missing.values())
            missing_string_keys = list(missing)
            try:
                fetched = await fetch(missing_keys)
            except Exception as error:
                if not is_not_found(error):
                    raise
                logger.warning("Entities not found for keys %s", missing_string_keys)
                found.update(dict.fromkeys(missing_string_keys))
            else:
                entities = self._order_entities(fetched, missing_string_keys)
                found.update(zip(missing_string_keys, entities))
                await self._prime(missing_string_keys, entities, ttl)

        return self._add_keys(keys, [found.get(sk) for sk in string_keys])

    def _order_entities(self, fetched: Any, string_keys: list[str]) -> list[Any]:
        """Order fetched entities by the keys they were fetched for.

        Datastores do not always return entities in the order of the keys
        requested. Keys without a matching entity get None.
        """
        if fetched is None:
            entities: list[Any] = []
        elif isinstance(fetched, (list, tuple)):
            entities = list(fetched)
        else:
            entities = [fetched]

        key_builder = self._cache.key_builder
        by_key: dict[str, Any] = {}
        for entity in entities:
            if entity is None:
                continue
            entity_key = self._cache.adapter.get_key_from_entity(entity)
            if entity_key is None:
                # No key references: keep the order of the datastore
                return (entities + [None] * len(string_keys))[: len(string_keys)]
            by_key[key_builder.key_to_string(entity_key)] = entity

        return [by_key.get(sk) for sk in string_keys]

    async def _prime(self, string_keys: Sequence[str], entities: Sequence[Any], ttl: TTL) -> None:
        pairs = [(sk, entity) for sk, entity in zip(string_keys, entities) if entity is not None]
        if not pairs:
            return
        await self._cache.prime_cache([sk for sk, _ in pairs], [e for _, e in pairs], ttl)

    def _add_keys(self, keys: Sequence[Any], entities: Sequence[Any]) -> list[Any]:
        add_key = self._cache.adapter.add_key_to_entity
        return [
            add_key(key, entity) if entity is not None else None
            for key, entity in zip(keys, entities)
        ]

    async def get(self, key: Any) -> Any | None:
        """Get an entity from the cache, without fetching on a miss."""
        entity = await self._cache.get(self._cache.key_builder.key_to_string(key))
        if entity is None:
            return None
        return self._cache.adapter.add_key_to_entity(key, entity)

    async def mget(self, *keys: Any) -> list[Any | None]:
        """Get several entities from the cache, None for misses."""
        string_keys = [self._cache.key_builder.key_to_string(key) for key in keys]
        entities = await self._cache.mget(*string_keys)
        return self._add_keys(keys, entities)

    async def set(self, key: Any, entity: Any, options: CacheOptions | None = None) -> Any:
        """Cache an entity under its key.

        Returns:
            The entity.
        """
        ttl = get_ttl(options, self._cache.config, len(self._cache.stores), CacheKind.ENTITY)
        await self._cache.set(self._cache.key_builder.key_to_string(key), entity, ttl)
        return entity

    async def mset(
        self,
        pairs: Sequence[tuple[Any, Any]],
        options: CacheOptions | None = None,
    ) -> list[Any]:
        """Cache several ``(key, entity)`` pairs.

        Returns:
            The entities, in order.
        """
        ttl = get_ttl(options, self._cache.config, len(self._cache.stores), CacheKind.ENTITY)
        key_builder = self._cache.key_builder
        items = [(key_builder.key_to_string(key), entity) for key, entity in pairs]
        await self._cache.mset(items, ttl)
        return [entity for _, entity in items]

    async def delete(self, *keys: Any) -> int:
        """Delete cached entities in one batch.

        Returns:
            Number of keys deleted.
        """
        return await self._cache.delete(
            *(self._cache.key_builder.key_to_string(key) for key in keys)
        )
