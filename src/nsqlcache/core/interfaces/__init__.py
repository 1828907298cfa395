"""Core interfaces (Protocol classes) for nsqlcache."""

from nsqlcache.core.interfaces.cache_backend import ICacheBackend, ITransactionalBackend
from nsqlcache.core.interfaces.datastore_adapter import IDatastoreAdapter
from nsqlcache.core.interfaces.serializer import ISerializer

__all__ = [
    "ICacheBackend",
    "ITransactionalBackend",
    "IDatastoreAdapter",
    "ISerializer",
]
