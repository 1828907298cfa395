"""Datastore adapter interface."""

from typing import Any, Protocol


class IDatastoreAdapter(Protocol):
    """Contract for the datastore a CacheService sits in front of.

    Only the required capabilities are declared here. An adapter may also
    provide:

    - ``get_key_from_entity(entity)``: the key reference carried by an
      entity (defaults to None).
    - ``add_key_to_entity(key, entity)``: attach a key reference to an
      entity (defaults to returning the entity unchanged).
    - ``get_entity_unwrapped(keys)`` / ``run_query_unwrapped(query)``: the
      original fetch methods when the adapter intercepts its own
      ``get_entity`` / ``run_query``.
    - ``wrap_client(cache)``: called once at construction when the
      ``wrap_client`` option is enabled.
    """

    def key_to_string(self, key: Any) -> str:
        """Serialize a datastore key to a string."""
        ...

    def query_to_string(self, query: Any) -> str:
        """Serialize a datastore query to a string."""
        ...

    async def get_entity(self, keys: Any) -> Any:
        """Fetch one entity, or a list of entities for a list of keys.

        Raises:
            EntityNotFoundError: If a requested entity does not exist.
        """
        ...

    async def run_query(self, query: Any) -> Any:
        """Run a query and return its ``(entities, meta)`` pair."""
        ...

    def get_entity_kind_from_query(self, query: Any) -> str | list[str]:
        """Return the entity kind(s) a query targets."""
        ...
