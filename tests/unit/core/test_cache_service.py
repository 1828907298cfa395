"""Tests for CacheService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from nsqlcache import (
    CacheConfig,
    CacheService,
    ConfigurationError,
    InMemoryCacheBackend,
    MultiCacheBackend,
    TTLConfig,
)

from tests.fakes import FakeAdapter, FakeTransactionalBackend, Key, MinimalAdapter


class TestInit:
    """Tests for CacheService construction."""

    def test_requires_adapter(self) -> None:
        """Test a missing adapter is a configuration error."""
        with pytest.raises(ConfigurationError, match="No valid Database adapter provided."):
            CacheService(adapter=None)

    def test_default_store(self, adapter: FakeAdapter) -> None:
        """Test a single in-memory store is mounted by default."""
        cache = CacheService(adapter=adapter)

        assert len(cache.stores) == 1
        assert isinstance(cache.cache, InMemoryCacheBackend)
        assert cache.transactional_backend is None
        assert cache.cache_without_transactional is None

    def test_config_mapping_overrides_defaults(self, adapter: FakeAdapter) -> None:
        """Test a configuration mapping is merged over the defaults."""
        cache = CacheService(
            adapter=adapter,
            config={
                "ttl": {"entity": 30, "query": 30},
                "global": False,
                "cache_prefix": {"entity": "customk:", "query": "customq:"},
            },
        )

        assert cache.config.ttl.entity == 30
        assert cache.config.ttl.query == 30
        assert cache.config.global_cache is False
        assert cache.config.cache_prefix.entity == "customk:"

    def test_config_instance_is_copied(self, adapter: FakeAdapter) -> None:
        """Test the caller's CacheConfig is not mutated."""
        config = CacheConfig()

        cache = CacheService(adapter=adapter, stores=[FakeTransactionalBackend()], config=config)

        assert config.ttl.entity == 600
        assert cache.config.ttl.entity == 86400

    def test_single_transactional_store(self, adapter: FakeAdapter) -> None:
        """Test a single transactional store is used directly with its TTLs."""
        backend = FakeTransactionalBackend()

        cache = CacheService(adapter=adapter, stores=[backend])

        assert cache.cache is backend
        assert cache.transactional_backend is backend
        assert cache.cache_without_transactional is None
        assert cache.config.ttl.entity == 60 * 60 * 24
        assert cache.config.ttl.query == 0

    def test_single_transactional_store_keeps_explicit_ttl(self, adapter: FakeAdapter) -> None:
        """Test an explicit TTL configuration is not replaced."""
        cache = CacheService(
            adapter=adapter,
            stores=[FakeTransactionalBackend()],
            config=CacheConfig(ttl=TTLConfig(entity=10, query=20)),
        )

        assert cache.config.ttl.entity == 10
        assert cache.config.ttl.query == 20

    def test_multi_store_with_transactional(self, adapter: FakeAdapter) -> None:
        """Test the transactional store is detected among several stores."""
        memory = InMemoryCacheBackend()
        redis = FakeTransactionalBackend()

        cache = CacheService(adapter=adapter, stores=[memory, redis])

        assert isinstance(cache.cache, MultiCacheBackend)
        assert cache.cache.backends == [memory, redis]
        assert cache.transactional_backend is redis
        assert isinstance(cache.cache_without_transactional, MultiCacheBackend)
        assert cache.cache_without_transactional.backends == [memory]
        assert cache.config.ttl.entity == 600

    def test_multi_store_without_transactional(self, adapter: FakeAdapter) -> None:
        """Test no transactional view is built without a transactional store."""
        cache = CacheService(
            adapter=adapter,
            stores=[InMemoryCacheBackend(name="memory"), InMemoryCacheBackend(name="l2")],
        )

        assert cache.transactional_backend is None
        assert cache.cache_without_transactional is None

    def test_default_adapter_hooks(self) -> None:
        """Test default key hooks are installed for minimal adapters."""
        cache = CacheService(adapter=MinimalAdapter())
        data = {"name": "John"}

        assert cache.adapter.get_key_from_entity(data) is None
        assert cache.adapter.add_key_to_entity(Key("k1"), data) is data

    def test_wrap_client(self) -> None:
        """Test the adapter can wrap its client with the cache."""
        adapter = FakeAdapter()
        adapter.wrap_client = MagicMock()  # type: ignore[attr-defined]

        cache = CacheService(adapter=adapter)

        adapter.wrap_client.assert_called_once_with(cache)

    def test_wrap_client_disabled(self) -> None:
        """Test wrap_client is not called when disabled."""
        adapter = FakeAdapter()
        adapter.wrap_client = MagicMock()  # type: ignore[attr-defined]

        CacheService(adapter=adapter, config={"wrap_client": False})

        adapter.wrap_client.assert_not_called()

    def test_hash_cache_keys(self, adapter: FakeAdapter) -> None:
        """Test keys are hashed by default and readable when disabled."""
        hashed = CacheService(adapter=adapter)
        plain = CacheService(adapter=adapter, config={"hash_cache_keys": False})

        assert plain.key_builder.key_to_string(Key("abc")) == "nsk:abc"
        assert hashed.key_builder.key_to_string(Key("abc")) != "nsk:abc"
        assert hashed.key_builder.key_to_string(Key("abc")).startswith("nsk:")


class TestBackendSurface:
    """Tests for the delegated get/mget/set/mset/delete/reset surface."""

    @pytest.mark.asyncio
    async def test_delegates_to_backend(self, adapter: FakeAdapter) -> None:
        """Test every operation reaches the active backend."""
        backend = AsyncMock(spec=InMemoryCacheBackend)
        backend.name = "mock"
        cache = CacheService(adapter=adapter, stores=[backend])

        await cache.get("k1")
        await cache.mget("k1", "k2")
        await cache.set("k1", "v", 10)
        await cache.mset([("k1", "v")], 10)
        await cache.delete("k1", "k2")
        await cache.reset()

        backend.get.assert_awaited_once_with("k1")
        backend.mget.assert_awaited_once_with("k1", "k2")
        backend.set.assert_awaited_once_with("k1", "v", 10)
        backend.mset.assert_awaited_once_with([("k1", "v")], 10)
        backend.delete.assert_awaited_once_with("k1", "k2")
        backend.reset.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_roundtrip(self, cache: CacheService) -> None:
        """Test values written through the service are read back."""
        await cache.set("k1", {"name": "John"})

        assert await cache.get("k1") == {"name": "John"}
        assert await cache.delete("k1") == 1
        assert await cache.get("k1") is None


class TestPrimeCache:
    """Tests for prime_cache."""

    @pytest.fixture
    def backend(self) -> AsyncMock:
        backend = AsyncMock(spec=InMemoryCacheBackend)
        backend.name = "mock"
        backend.mset.side_effect = lambda items, ttl: [value for _, value in items]
        return backend

    @pytest.fixture
    def service(self, adapter: FakeAdapter, backend: AsyncMock) -> CacheService:
        return CacheService(adapter=adapter, stores=[backend])

    @pytest.mark.asyncio
    async def test_single_value(self, service: CacheService, backend: AsyncMock) -> None:
        """Test a single key/value pair returns the single value."""
        result = await service.prime_cache("key1", "Mick Jagger")

        assert result == "Mick Jagger"
        backend.mset.assert_awaited_once_with([("key1", "Mick Jagger")], None)

    @pytest.mark.asyncio
    async def test_multiple_values(self, service: CacheService, backend: AsyncMock) -> None:
        """Test parallel lists are interleaved into one multi set."""
        result = await service.prime_cache(["key1", "key2"], ["Mick Jagger", "John Snow"], 60)

        assert result == ["Mick Jagger", "John Snow"]
        backend.mset.assert_awaited_once_with(
            [("key1", "Mick Jagger"), ("key2", "John Snow")], 60
        )

    @pytest.mark.asyncio
    async def test_list_value_with_single_key(
        self, service: CacheService, backend: AsyncMock
    ) -> None:
        """Test a list value paired with a single key stays one value."""
        result = await service.prime_cache("key1", ["Mick Jagger", "John Snow"])

        assert result == ["Mick Jagger", "John Snow"]
        backend.mset.assert_awaited_once_with([("key1", ["Mick Jagger", "John Snow"])], None)

    @pytest.mark.asyncio
    async def test_scalar_value_with_key_list(
        self, service: CacheService, backend: AsyncMock
    ) -> None:
        """Test a non-list value is wrapped for a one-key list."""
        assert await service.prime_cache(["key1"], "Mick Jagger") == "Mick Jagger"

    @pytest.mark.asyncio
    async def test_length_mismatch(self, service: CacheService) -> None:
        """Test keys and values must have the same length."""
        with pytest.raises(ValueError):
            await service.prime_cache(["key1", "key2"], ["Mick Jagger"])

    @pytest.mark.asyncio
    async def test_target_backend(
        self, service: CacheService, backend: AsyncMock
    ) -> None:
        """Test priming a specific backend."""
        other = InMemoryCacheBackend()

        await service.prime_cache("key1", "value", backend=other)

        assert await other.get("key1") == "value"
        backend.mset.assert_not_awaited()
