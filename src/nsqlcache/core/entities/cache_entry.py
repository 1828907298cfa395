"""Cached value entities."""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, NamedTuple


class QueryResult(NamedTuple):
    """Result of a query execution: the entities and the query metadata.

    Cached and restored as a unit. ``meta`` carries pagination or
    continuation information returned by the datastore.
    """

    entities: list[Any]
    meta: Any = None


@dataclass(frozen=True)
class EntityRecord:
    """Envelope pairing an entity payload with its key reference.

    Serialized storage cannot carry the datastore's key reference on the
    entity itself, so it is persisted next to the payload and reattached
    by the adapter on read.
    """

    payload: Any
    key: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"payload": self.payload, "key": self.key}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EntityRecord":
        return cls(payload=data.get("payload"), key=data.get("key"))


def marshal_query_result(
    result: Sequence[Any],
    get_key: Callable[[Any], Any],
) -> dict[str, Any]:
    """Build the persisted form of a query result.

    Args:
        result: The ``(entities, meta)`` pair returned by the datastore.
        get_key: Function returning the key reference of an entity.

    Returns:
        A JSON friendly mapping with one EntityRecord per entity.
    """
    entities, meta = _split(result)
    return {
        "entities": [
            EntityRecord(payload=entity, key=get_key(entity)).to_dict()
            for entity in entities
        ],
        "meta": meta,
    }


def unmarshal_query_result(
    cached: Any,
    add_key: Callable[[Any, Any], Any],
) -> QueryResult:
    """Restore a cached query result and reattach key references.

    Accepts both the persisted form built by ``marshal_query_result`` and
    an untransformed ``(entities, meta)`` pair, as stored by backends that
    keep Python objects.

    Args:
        cached: The value returned by the cache.
        add_key: Function ``(key, entity) -> entity`` attaching a key.

    Returns:
        The restored QueryResult.
    """
    if isinstance(cached, Mapping):
        records = [EntityRecord.from_dict(r) for r in cached.get("entities") or []]
        return QueryResult(
            entities=[
                record.payload if record.key is None
                else add_key(record.key, record.payload)
                for record in records
            ],
            meta=cached.get("meta"),
        )

    entities, meta = _split(cached)
    return QueryResult(entities=list(entities), meta=meta)


def _split(result: Sequence[Any]) -> tuple[Sequence[Any], Any]:
    if len(result) == 0:
        return [], None
    entities = result[0] if result[0] is not None else []
    meta = result[1] if len(result) > 1 else None
    if not isinstance(entities, (list, tuple)):
        entities = [entities]
    return entities, meta
