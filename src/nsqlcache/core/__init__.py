"""Core domain layer for nsqlcache."""

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

__all__ = [
    # Entities
    "CacheConfig",
    "CacheKind",
    "CacheOptions",
    "CachePrefix",
    "EntityRecord",
    "KindTTL",
    "QueryResult",
    "TTLConfig",
    # Interfaces
    "ICacheBackend",
    "ITransactionalBackend",
    "IDatastoreAdapter",
    "ISerializer",
    # Services
    "CacheService",
    "EntityCache",
    "QueryCache",
]
