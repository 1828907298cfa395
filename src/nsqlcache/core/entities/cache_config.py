"""Cache configuration entities."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

# A TTL in seconds, or a function resolving the TTL of one backend by name
TTL = int | Callable[[str], int]


class CacheKind(Enum):
    """Kind of value being cached.

    ENTITY: an entity fetched by its primary key.
    QUERY: the result of a query execution.
    """

    ENTITY = "entity"
    QUERY = "query"


@dataclass
class KindTTL:
    """TTL values in seconds for each cache kind. 0 means no expiration."""

    entity: int = 0
    query: int = 0

    def get(self, kind: CacheKind) -> int:
        return getattr(self, kind.value)


def _default_store_ttls() -> dict[str, KindTTL]:
    return {
        "memory": KindTTL(entity=60 * 10, query=5),
        # A Redis store is durable enough to keep queries until invalidated
        "redis": KindTTL(entity=60 * 60 * 24, query=0),
    }


@dataclass
class TTLConfig:
    """TTL configuration.

    Attributes:
        entity: Default TTL (seconds) for entities fetched by key.
        query: Default TTL (seconds) for query results.
        stores: Per backend name TTL overrides, only consulted when
            more than one backend is mounted.
    """

    entity: int = 60 * 10
    query: int = 5
    stores: dict[str, KindTTL] = field(default_factory=_default_store_ttls)

    def get(self, kind: CacheKind, store_name: str | None = None) -> int:
        """Get the configured TTL for a kind, optionally for one store.

        Args:
            kind: The cache kind.
            store_name: Backend name to look up in ``stores``.

        Returns:
            The TTL in seconds. Missing store entries resolve to 0.
        """
        if store_name is None:
            return getattr(self, kind.value) or 0
        store_ttl = self.stores.get(store_name)
        if store_ttl is None:
            return 0
        return store_ttl.get(kind) or 0

    def use_store_defaults(self, store_name: str) -> None:
        """Copy the TTL table of ``store_name`` to the top level defaults."""
        store_ttl = self.stores.get(store_name)
        if store_ttl is None:
            return
        self.entity = store_ttl.entity
        self.query = store_ttl.query

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TTLConfig":
        """Create a TTLConfig by deep merging ``data`` over the defaults.

        Keys ``entity`` and ``query`` set the top level values; any other
        key is a backend name mapped to ``{"entity": ..., "query": ...}``.
        A partial backend table only overrides the kinds it names.
        """
        config = cls()
        for name, value in data.items():
            if name in ("entity", "query"):
                setattr(config, name, value)
                continue
            if not isinstance(value, Mapping):
                raise TypeError(
                    f"TTL table for store {name!r} must be a mapping, "
                    f"got {type(value).__name__}"
                )
            store_ttl = config.stores.setdefault(name, KindTTL())
            for kind in CacheKind:
                if kind.value in value:
                    setattr(store_ttl, kind.value, value[kind.value])
        return config


@dataclass
class CachePrefix:
    """Prefixes prepended to every canonical cache key, per kind."""

    entity: str = "nsk:"
    query: str = "nsq:"

    def get(self, kind: CacheKind) -> str:
        return getattr(self, kind.value)


@dataclass
class CacheConfig:
    """Cache configuration.

    Provides the TTL defaults, key prefixes and feature toggles of a
    CacheService. Built once at construction; the owning process may
    mutate it afterwards.

    Attributes:
        ttl: TTL configuration. Defaults to the built-in TTLs.
        cache_prefix: Key prefixes per cache kind.
        hash_cache_keys: Hash the serialized keys/queries to bound their
            length.
        wrap_client: Let the datastore adapter intercept its own fetch
            methods through ``wrap_client``.
        global_cache: Default on/off state for wrapped call sites that
            do not opt in explicitly.
    """

    ttl: TTLConfig = field(default_factory=TTLConfig)
    cache_prefix: CachePrefix = field(default_factory=CachePrefix)
    hash_cache_keys: bool = True
    wrap_client: bool = True
    global_cache: bool = True

    # True while the TTL configuration is the built-in one
    ttl_from_defaults: bool = field(init=False, default=False, repr=False)

    def __post_init__(self) -> None:
        self.ttl_from_defaults = self.ttl == TTLConfig()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CacheConfig":
        """Create a CacheConfig from a plain mapping.

        Recognized keys: ``ttl``, ``cache_prefix``, ``hash_cache_keys``,
        ``wrap_client`` and ``global`` (or ``global_cache``). Nested TTL
        tables are deep merged with the defaults.

        Args:
            data: Caller supplied configuration.

        Returns:
            A new CacheConfig instance.
        """
        kwargs: dict[str, Any] = {}

        if data.get("ttl") is not None:
            kwargs["ttl"] = TTLConfig.from_dict(data["ttl"])

        if data.get("cache_prefix") is not None:
            prefix_names = {f.name for f in fields(CachePrefix)}
            kwargs["cache_prefix"] = CachePrefix(
                **{k: v for k, v in data["cache_prefix"].items() if k in prefix_names}
            )

        for name in ("hash_cache_keys", "wrap_client", "global_cache"):
            if name in data:
                kwargs[name] = bool(data[name])
        if "global" in data:
            kwargs["global_cache"] = bool(data["global"])

        config = cls(**kwargs)
        if "ttl" in kwargs:
            config.ttl_from_defaults = False
        return config


@dataclass
class CacheOptions:
    """Per call options.

    Attributes:
        ttl: Explicit TTL in seconds, or a mapping of backend name to
            TTL for multi backend setups. None uses the configuration.
    """

    ttl: int | Mapping[str, int] | None = None
