"""Pytest configuration for nsqlcache tests."""

import pytest

from nsqlcache import CacheService, InMemoryCacheBackend

from tests.fakes import FakeAdapter, FakeTransactionalBackend, Key, Query, entity


@pytest.fixture
def keys() -> list[Key]:
    """Datastore keys K1..K5."""
    return [Key(f"key{i}") for i in range(1, 6)]


@pytest.fixture
def entities(keys: list[Key]) -> list[dict]:
    """Entities carrying the keys K1..K5."""
    names = ["John", "Mick", "Carol", "Greg", "Tito"]
    return [entity(name, key) for name, key in zip(names, keys)]


@pytest.fixture
def queries() -> list[Query]:
    """Queries on the Company and User kinds."""
    return [Query("query1", "Company"), Query("query2", "User"), Query("query3", "Company")]


@pytest.fixture
def adapter() -> FakeAdapter:
    """Create a datastore adapter for testing."""
    return FakeAdapter()


@pytest.fixture
def memory_backend() -> InMemoryCacheBackend:
    """Create an in-memory backend for testing."""
    return InMemoryCacheBackend(maxsize=100)


@pytest.fixture
def redis_backend() -> FakeTransactionalBackend:
    """Create a transactional backend for testing."""
    return FakeTransactionalBackend()


@pytest.fixture
def cache(adapter: FakeAdapter, memory_backend: InMemoryCacheBackend) -> CacheService:
    """Cache service with a single in-memory backend."""
    return CacheService(adapter=adapter, stores=[memory_backend])


@pytest.fixture
def redis_cache(adapter: FakeAdapter, redis_backend: FakeTransactionalBackend) -> CacheService:
    """Cache service with a single transactional backend."""
    return CacheService(adapter=adapter, stores=[redis_backend])


@pytest.fixture
def multi_cache(
    adapter: FakeAdapter,
    memory_backend: InMemoryCacheBackend,
    redis_backend: FakeTransactionalBackend,
) -> CacheService:
    """Cache service with an in-memory and a transactional backend."""
    return CacheService(adapter=adapter, stores=[memory_backend, redis_backend])
