"""Bridge to the datastore adapter."""

from typing import Any

from nsqlcache.core.interfaces.datastore_adapter import IDatastoreAdapter


def _get_key_from_entity(_entity: Any) -> Any:
    return None


def _add_key_to_entity(_key: Any, entity: Any) -> Any:
    return entity


class AdapterBridge:
    """Datastore adapter with its optional hooks resolved.

    The key hooks are looked up once at construction. Adapters that do not
    provide ``get_key_from_entity`` / ``add_key_to_entity`` get no-op
    defaults. The unwrapped fetch methods, installed by adapters that
    intercept their own ``get_entity`` / ``run_query``, are preferred and
    looked up on each call.
    """

    def __init__(self, adapter: IDatastoreAdapter) -> None:
        self._adapter = adapter
        self.get_key_from_entity = getattr(
            adapter, "get_key_from_entity", None
        ) or _get_key_from_entity
        self.add_key_to_entity = getattr(
            adapter, "add_key_to_entity", None
        ) or _add_key_to_entity

    @property
    def adapter(self) -> IDatastoreAdapter:
        """Get the wrapped datastore adapter."""
        return self._adapter

    def key_to_string(self, key: Any) -> str:
        return self._adapter.key_to_string(key)

    def query_to_string(self, query: Any) -> str:
        return self._adapter.query_to_string(query)

    def get_entity_kind_from_query(self, query: Any) -> str | list[str]:
        return self._adapter.get_entity_kind_from_query(query)

    async def get_entity(self, keys: Any) -> Any:
        """Default fetch handler for entity reads."""
        fetch = getattr(self._adapter, "get_entity_unwrapped", None)
        if fetch is None:
            fetch = self._adapter.get_entity
        return await fetch(keys)

    async def run_query(self, query: Any) -> Any:
        """Default fetch handler for query reads."""
        fetch = getattr(self._adapter, "run_query_unwrapped", None)
        if fetch is None:
            fetch = self._adapter.run_query
        return await fetch(query)
