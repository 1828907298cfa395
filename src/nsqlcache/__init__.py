"""nsqlcache - Cache-aside layer for NoSQL datastores.

Caches entities fetched by key and query results in front of a
datastore, with one or several mounted backends (in-memory LRU, Redis).
When a Redis backend is mounted, cached queries are indexed by the
entity kind they target, so that all the queries of a kind can be
invalidated at once.

Example:
    from nsqlcache import CacheService, InMemoryCacheBackend, RedisCacheBackend

    cache = CacheService(
        adapter=MyDatastoreAdapter(),
        stores=[InMemoryCacheBackend(maxsize=500), RedisCacheBackend()],
    )

    # Entities by key: cached, fetched and primed on a miss
    user = await cache.entities.read(user_key)
    users = await cache.entities.read([key1, key2, key3])

    # Query results
    entities, meta = await cache.queries.read(query)

    # After a "User" entity is written
    await cache.queries.clear_queries_entity_kind("User")
"""

from nsqlcache.core.entities import (
    CacheConfig,
    CacheKind,
    CacheOptions,
    CachePrefix,
    EntityRecord,
    KindTTL,
    QueryResult,
    TTLConfig,
)
from nsqlcache.core.interfaces import (
    ICacheBackend,
    IDatastoreAdapter,
    ISerializer,
    ITransactionalBackend,
)
from nsqlcache.core.services import CacheService, EntityCache, QueryCache
from nsqlcache.exceptions import (
    BackendUnavailableError,
    ConfigurationError,
    EntityNotFoundError,
    NsqlCacheError,
    SerializationError,
)
from nsqlcache.infrastructure import (
    DefaultKeyBuilder,
    InMemoryCacheBackend,
    JsonSerializer,
    MultiCacheBackend,
    RedisCacheBackend,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheConfig",
    "CacheKind",
    "CacheOptions",
    "CachePrefix",
    "EntityRecord",
    "KindTTL",
    "QueryResult",
    "TTLConfig",
    # Core interfaces
    "ICacheBackend",
    "ITransactionalBackend",
    "IDatastoreAdapter",
    "ISerializer",
    # Core services
    "CacheService",
    "EntityCache",
    "QueryCache",
    # Errors
    "NsqlCacheError",
    "ConfigurationError",
    "EntityNotFoundError",
    "BackendUnavailableError",
    "SerializationError",
    # Infrastructure implementations
    "InMemoryCacheBackend",
    "MultiCacheBackend",
    "RedisCacheBackend",
    "DefaultKeyBuilder",
    "JsonSerializer",
]
