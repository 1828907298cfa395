"""TTL resolution for cache writes."""

from collections.abc import Mapping

from nsqlcache.core.entities.cache_config import TTL, CacheConfig, CacheKind, CacheOptions


def get_ttl(
    options: CacheOptions | None,
    config: CacheConfig,
    store_count: int,
    kind: CacheKind,
) -> TTL:
    """Get the TTL of a cache write for a cache kind.

    Precedence, highest first:

    1. an explicit scalar TTL in ``options``;
    2. an explicit per backend name table in ``options``;
    3. the per backend name configuration, only when more than one
       backend is mounted;
    4. the single TTL configuration.

    For multi backend setups (and for a per backend table in ``options``)
    a function is returned so that each backend resolves its own TTL.

    Args:
        options: Call site options.
        config: The merged cache configuration.
        store_count: Number of mounted backends.
        kind: The cache kind being written.

    Returns:
        The TTL in seconds, or a function of the backend name.
    """
    ttl_config = config.ttl

    if options is not None and options.ttl is not None:
        if isinstance(options.ttl, Mapping):
            stores = dict(options.ttl)

            def from_options(store_name: str) -> int:
                if store_name in stores:
                    return stores[store_name] or 0
                if store_count > 1:
                    return ttl_config.get(kind, store_name)
                return ttl_config.get(kind)

            return from_options
        return options.ttl

    if store_count > 1:
        return lambda store_name: ttl_config.get(kind, store_name)
    return ttl_config.get(kind)


def ttl_for_store(ttl: TTL | None, store_name: str) -> int | None:
    """Resolve a TTL for one backend.

    Args:
        ttl: A TTL in seconds, a function of the backend name, or None.
        store_name: The backend name.

    Returns:
        The TTL in seconds, or None if no TTL was given.
    """
    if callable(ttl):
        return ttl(store_name)
    return ttl
