"""Serializer implementations."""

from nsqlcache.infrastructure.serializers.json import JsonSerializer

__all__ = ["JsonSerializer"]
