"""Domain entities for nsqlcache."""

from nsqlcache.core.entities.cache_config import (
    CacheConfig,
    CacheKind,
    CacheOptions,
    CachePrefix,
    KindTTL,
    TTL,
    TTLConfig,
)
from nsqlcache.core.entities.cache_entry import (
    EntityRecord,
    QueryResult,
    marshal_query_result,
    unmarshal_query_result,
)

__all__ = [
    "CacheConfig",
    "CacheKind",
    "CacheOptions",
    "CachePrefix",
    "KindTTL",
    "TTL",
    "TTLConfig",
    "EntityRecord",
    "QueryResult",
    "marshal_query_result",
    "unmarshal_query_result",
]
