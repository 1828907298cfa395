"""Infrastructure layer implementations for nsqlcache."""

from nsqlcache.infrastructure.backends import (
    InMemoryCacheBackend,
    MultiCacheBackend,
    RedisCacheBackend,
)
from nsqlcache.infrastructure.key_builders import DefaultKeyBuilder
from nsqlcache.infrastructure.serializers import JsonSerializer

__all__ = [
    "InMemoryCacheBackend",
    "MultiCacheBackend",
    "RedisCacheBackend",
    "DefaultKeyBuilder",
    "JsonSerializer",
]
