"""Cache backend implementations."""

from nsqlcache.infrastructure.backends.memory import InMemoryCacheBackend
from nsqlcache.infrastructure.backends.multi import MultiCacheBackend
from nsqlcache.infrastructure.backends.redis import RedisCacheBackend

__all__ = [
    "InMemoryCacheBackend",
    "MultiCacheBackend",
    "RedisCacheBackend",
]
