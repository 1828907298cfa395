"""Cache-aside reads and writes of query results."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any

from nsqlcache.core.entities.cache_config import TTL, CacheKind, CacheOptions
from nsqlcache.core.entities.cache_entry import (
    QueryResult,
    marshal_query_result,
    unmarshal_query_result,
)
from nsqlcache.exceptions import BackendUnavailableError
from nsqlcache.utils.ttl import get_ttl, ttl_for_store

if TYPE_CHECKING:
    from nsqlcache.core.services.cache_service import CacheService

logger = logging.getLogger(__name__)

QueryFetchHandler = Callable[[Any], Awaitable[Any]]


class QueryCache:
    """Cache for query results.

    When a transactional backend is mounted, every cached query key is
    also added to an index per entity kind the query targets, so that
    ``clear_queries_entity_kind`` can remove all the queries of a kind
    once its entities change.
    """

    def __init__(self, cache: "CacheService") -> None:
        self._cache = cache

    def _ttl(self, options: CacheOptions | None) -> TTL:
        return get_ttl(options, self._cache.config, len(self._cache.stores), CacheKind.QUERY)

    def _restore(self, cached: Any) -> QueryResult | None:
        if cached is None:
            return None
        return unmarshal_query_result(cached, self._cache.adapter.add_key_to_entity)

    async def read(
        self,
        query: Any,
        options: CacheOptions | None = None,
        fetch_handler: QueryFetchHandler | None = None,
    ) -> Any:
        """Read a query result from the cache, running the query on a miss.

        Args:
            query: The datastore query.
            options: Call options (TTL of the cache writes).
            fetch_handler: Coroutine function running the query. Defaults
                to the adapter's ``run_query``.

        Returns:
            The ``(entities, meta)`` result. A freshly fetched result is
            returned exactly as the fetch handler returned it.
        """
        fetch = fetch_handler or self._cache.adapter.run_query
        ttl = self._ttl(options)
        query_key = self._cache.key_builder.query_to_string(query)

        cached = await self._cache.get(query_key)
        if cached is not None:
            logger.debug("Cache hit for query %s", query_key)
            return self._restore(cached)

        logger.debug("Cache miss for query %s", query_key)
        result = await fetch(query)
        await self._store(query, query_key, result, ttl)
        return result

    async def _store(self, query: Any, query_key: str, result: Any, ttl: TTL) -> None:
        transactional = self._cache.transactional_backend
        if transactional is None:
            await self._cache.prime_cache(query_key, result, ttl)
            return

        adapter = self._cache.adapter
        writes = [
            self.kset(
                query_key,
                marshal_query_result(result, adapter.get_key_from_entity),
                adapter.get_entity_kind_from_query(query),
                ttl_for_store(ttl, transactional.name),
            )
        ]
        others = self._cache.cache_without_transactional
        if others is not None:
            writes.append(self._cache.prime_cache(query_key, result, ttl, backend=others))
        await asyncio.gather(*writes)

    async def get(self, query: Any) -> QueryResult | None:
        """Get a query result from the cache, without running the query."""
        cached = await self._cache.get(self._cache.key_builder.query_to_string(query))
        return self._restore(cached)

    async def mget(self, *queries: Any) -> list[QueryResult | None]:
        """Get several query results from the cache, None for misses."""
        query_keys = [self._cache.key_builder.query_to_string(q) for q in queries]
        return [self._restore(cached) for cached in await self._cache.mget(*query_keys)]

    async def set(self, query: Any, result: Any, options: CacheOptions | None = None) -> Any:
        """Cache the result of a query.

        Returns:
            The result.
        """
        ttl = self._ttl(options)
        query_key = self._cache.key_builder.query_to_string(query)
        if self._cache.transactional_backend is not None:
            await self._store(query, query_key, result, ttl)
        else:
            await self._cache.set(query_key, result, ttl)
        return result

    async def mset(
        self,
        pairs: Sequence[tuple[Any, Any]],
        options: CacheOptions | None = None,
    ) -> list[Any]:
        """Cache the results of several ``(query, result)`` pairs.

        Returns:
            The results, in order.
        """
        ttl = self._ttl(options)
        key_builder = self._cache.key_builder
        if self._cache.transactional_backend is not None:
            await asyncio.gather(
                *(
                    self._store(query, key_builder.query_to_string(query), result, ttl)
                    for query, result in pairs
                )
            )
        else:
            items = [(key_builder.query_to_string(query), result) for query, result in pairs]
            await self._cache.mset(items, ttl)
        return [result for _, result in pairs]

    async def delete(self, *queries: Any) -> int:
        """Delete cached queries in one batch.

        The entity kind indexes are left untouched.

        Returns:
            Number of keys deleted.
        """
        return await self._cache.delete(
            *(self._cache.key_builder.query_to_string(q) for q in queries)
        )

    async def kset(
        self,
        query_key: str,
        value: Any,
        entity_kinds: str | Sequence[str],
        ttl: TTL | None = None,
    ) -> list[Any]:
        """Cache a query value and add its key to the entity kind indexes.

        Runs a single transaction on the transactional backend: one
        ``sadd`` per entity kind, in order and without deduplication,
        followed by the write of the serialized value.

        Args:
            query_key: Canonical cache key of the query.
            value: The value to store.
            entity_kinds: Entity kind, or list of kinds, the query targets.
            ttl: TTL in seconds. 0 or None stores the value without
                expiration.

        Returns:
            The transaction results, one per command.

        Raises:
            BackendUnavailableError: If no transactional backend is mounted.
        """
        transactional = self._cache.transactional_backend
        if transactional is None:
            raise BackendUnavailableError()

        kinds = [entity_kinds] if isinstance(entity_kinds, str) else list(entity_kinds)
        key_builder = self._cache.key_builder
        commands: list[tuple[Any, ...]] = [
            ("sadd", key_builder.index_key(kind), query_key) for kind in kinds
        ]

        data = transactional.serializer.serialize(value)
        expire = ttl_for_store(ttl, transactional.name)
        if expire:
            commands.append(("setex", query_key, expire, data))
        else:
            commands.append(("set", query_key, data))

        return await transactional.multi(commands)

    async def clear_queries_entity_kind(
        self, entity_kinds: str | Sequence[str]
    ) -> int | BackendUnavailableError:
        """Remove every cached query of one or more entity kinds.

        Reads the members of each entity kind index in one transaction,
        then deletes those query keys and the indexes themselves.

        Without a transactional backend this does not raise: it returns a
        BackendUnavailableError instance, so that callers can invalidate
        unconditionally and check ``result.code`` when needed.

        Args:
            entity_kinds: Entity kind, or list of kinds.

        Returns:
            Number of keys deleted, or the BackendUnavailableError.
        """
        transactional = self._cache.transactional_backend
        if transactional is None:
            return BackendUnavailableError()

        kinds = [entity_kinds] if isinstance(entity_kinds, str) else entity_kinds
        unique_kinds = list(dict.fromkeys(kinds))
        key_builder = self._cache.key_builder
        index_keys = [key_builder.index_key(kind) for kind in unique_kinds]

        members = await transactional.multi([("smembers", key) for key in index_keys])

        keys_to_delete: dict[str, None] = {}
        for index_members in members:
            if not index_members:
                continue
            for member in index_members:
                keys_to_delete[member.decode() if isinstance(member, bytes) else member] = None
        keys_to_delete.update(dict.fromkeys(index_keys))

        count = await transactional.delete(*keys_to_delete)
        logger.info("Cleared cached queries of entity kinds %s (%d keys)", unique_kinds, count)
        return count
