"""Tests for JsonSerializer."""

from dataclasses import dataclass
from datetime import date, datetime

import pytest

from nsqlcache.exceptions import SerializationError
from nsqlcache.infrastructure.serializers.json import JsonSerializer


@dataclass(frozen=True)
class DatastoreKey:
    kind: str
    id: int


class TestJsonSerializer:
    """Tests for JsonSerializer."""

    @pytest.fixture
    def serializer(self) -> JsonSerializer:
        """Create a serializer for testing."""
        return JsonSerializer()

    def test_serialize_dict(self, serializer: JsonSerializer) -> None:
        """Test serializing a dictionary."""
        data = {"name": "Alice", "age": 30}
        result = serializer.serialize(data)

        assert isinstance(result, bytes)
        assert b"Alice" in result
        assert b"30" in result

    def test_deserialize_dict(self, serializer: JsonSerializer) -> None:
        """Test deserializing to a dictionary."""
        data = b'{"name": "Alice", "age": 30}'
        result = serializer.deserialize(data)

        assert result == {"name": "Alice", "age": 30}

    def test_deserialize_text(self, serializer: JsonSerializer) -> None:
        """Test deserializing text returned by clients that decode responses."""
        result = serializer.deserialize('{"name": "Alice"}')

        assert result == {"name": "Alice"}

    def test_query_result_preserves_field_names(self, serializer: JsonSerializer) -> None:
        """Test a persisted query result keeps its structure."""
        original = {
            "entities": [
                {"payload": {"name": "John"}, "key": {"name": "key1"}},
                {"payload": {"name": "Mick"}, "key": {"name": "key2"}},
            ],
            "meta": {"end_cursor": "abc", "more_results": False},
        }

        assert serializer.deserialize(serializer.serialize(original)) == original

    def test_serialize_tuple_as_list(self, serializer: JsonSerializer) -> None:
        """Test an (entities, meta) tuple is stored as a JSON array."""
        result = serializer.deserialize(serializer.serialize(([{"a": 1}], None)))

        assert result == [[{"a": 1}], None]

    def test_serialize_dataclass(self, serializer: JsonSerializer) -> None:
        """Test serializing a dataclass key reference."""
        result = serializer.deserialize(
            serializer.serialize({"key": DatastoreKey(kind="User", id=1)})
        )

        assert result == {"key": {"kind": "User", "id": 1}}

    def test_serialize_object_with_dict(self, serializer: JsonSerializer) -> None:
        """Test serializing a plain object uses its attributes."""

        class Ref:
            def __init__(self) -> None:
                self.path = ["User", 1]

        result = serializer.deserialize(serializer.serialize(Ref()))

        assert result == {"path": ["User", 1]}

    def test_datetime_roundtrip(self, serializer: JsonSerializer) -> None:
        """Test datetime objects are restored on deserialization."""
        dt = datetime(2024, 1, 15, 10, 30, 0)

        result = serializer.deserialize(serializer.serialize({"timestamp": dt}))

        assert result == {"timestamp": dt}
        assert b"__datetime__" in serializer.serialize(dt)

    def test_date_roundtrip(self, serializer: JsonSerializer) -> None:
        """Test date objects are restored on deserialization."""
        data = {"dates": [date(2024, 1, 15)], "name": "Alice"}

        result = serializer.deserialize(serializer.serialize(data))

        assert result == data
        assert type(result["dates"][0]) is date

    def test_tag_with_other_fields_left_alone(self, serializer: JsonSerializer) -> None:
        """Test only a lone tag field is decoded."""
        data = b'{"__date__": "2024-01-15", "name": "Alice"}'

        assert serializer.deserialize(data) == {"__date__": "2024-01-15", "name": "Alice"}

    def test_deserialize_invalid_tagged_value(self, serializer: JsonSerializer) -> None:
        """Test a malformed tagged value raises error."""
        with pytest.raises(SerializationError):
            serializer.deserialize(b'{"__datetime__": "yesterday"}')

    def test_serialize_none(self, serializer: JsonSerializer) -> None:
        """Test serializing None."""
        assert serializer.deserialize(serializer.serialize(None)) is None

    def test_deserialize_invalid_json(self, serializer: JsonSerializer) -> None:
        """Test deserializing invalid JSON raises error."""
        with pytest.raises(SerializationError):
            serializer.deserialize(b"not valid json")

    def test_deserialize_invalid_encoding(self, serializer: JsonSerializer) -> None:
        """Test deserializing invalid encoding raises error."""
        with pytest.raises(SerializationError):
            serializer.deserialize(b"\xff\xfe")

    def test_serialize_non_serializable(self, serializer: JsonSerializer) -> None:
        """Test serializing objects with circular references raises error."""
        circular: dict = {}
        circular["self"] = circular
        with pytest.raises(SerializationError):
            serializer.serialize(circular)
