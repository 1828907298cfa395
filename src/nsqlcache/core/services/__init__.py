"""Core services for nsqlcache."""

from nsqlcache.core.services.adapter import AdapterBridge
from nsqlcache.core.services.cache_service import CacheService
from nsqlcache.core.services.entity_cache import EntityCache
from nsqlcache.core.services.query_cache import QueryCache

__all__ = [
    "AdapterBridge",
    "CacheService",
    "EntityCache",
    "QueryCache",
]
