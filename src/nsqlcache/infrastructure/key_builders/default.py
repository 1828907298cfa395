"""Default key builder implementation."""

from typing import Any

from nsqlcache.core.entities.cache_config import CacheKind, CachePrefix
from nsqlcache.core.interfaces.datastore_adapter import IDatastoreAdapter
from nsqlcache.utils.hashing import hash_string


class DefaultKeyBuilder:
    """Default key builder for datastore keys and queries.

    Creates canonical cache keys by serializing keys and queries with the
    datastore adapter, optionally hashing the result with SHA-256, and
    prepending the prefix of the cache kind.
    """

    def __init__(
        self,
        adapter: IDatastoreAdapter,
        prefix: CachePrefix | None = None,
        hash_keys: bool = True,
    ) -> None:
        """Initialize the key builder.

        Args:
            adapter: Datastore adapter used to serialize keys and queries.
            prefix: Key prefixes per cache kind.
            hash_keys: Whether to hash the serialized keys.
        """
        self._adapter = adapter
        self._prefix = prefix or CachePrefix()
        self._hash_keys = hash_keys

    def key_to_string(self, key: Any) -> str:
        """Build the canonical cache key of a datastore key.

        Args:
            key: The datastore key.

        Returns:
            A unique string key for caching the entity.
        """
        return self._build(CacheKind.ENTITY, self._adapter.key_to_string(key))

    def query_to_string(self, query: Any) -> str:
        """Build the canonical cache key of a datastore query.

        Args:
            query: The datastore query.

        Returns:
            A unique string key for caching the query result.
        """
        return self._build(CacheKind.QUERY, self._adapter.query_to_string(query))

    def index_key(self, entity_kind: str) -> str:
        """Build the key of the index of queries cached for an entity kind.

        Args:
            entity_kind: The entity kind name.

        Returns:
            The index key.
        """
        return self._prefix.get(CacheKind.QUERY) + entity_kind

    def _build(self, kind: CacheKind, serialized: str) -> str:
        if self._hash_keys:
            serialized = hash_string(serialized)
        return self._prefix.get(kind) + serialized
