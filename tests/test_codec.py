"""
Tests for the entity codec.
"""

from entitystore.codec import UNDEFINED, decode, encode
from entitystore.models.key import Key
from entitystore.models.record import Property, Record


class TestDecode:
    """Tests for decode()."""

    def test_injects_key_id(self):
        """Test the key's id appears under 'id'."""
        record = Record(key=Key("Game", 42))
        record.update({"name": "Chess", "players": 2})

        entity = decode(record)

        assert entity == {"name": "Chess", "players": 2, "id": 42}

    def test_returns_plain_dict(self):
        """Test decode returns a new dict, leaving the record untouched."""
        record = Record(key=Key("Game", 1))
        record["name"] = "Go"

        entity = decode(record)
        entity["name"] = "Changed"

        assert type(entity) is dict
        assert record["name"] == "Go"
        assert "id" not in record

    def test_key_id_overrides_stored_id_field(self):
        """Test a stored 'id' field never shadows the key's id."""
        record = Record(key=Key("Game", 7))
        record.update({"id": 999, "name": "Go"})

        assert decode(record)["id"] == 7


class TestEncode:
    """Tests for encode()."""

    def test_all_fields_indexed_by_default(self):
        """Test every field defaults to indexed."""
        properties = encode({"name": "Chess", "players": 2})

        assert properties == [
            Property("name", "Chess", False),
            Property("players", 2, False),
        ]

    def test_non_indexed_fields(self):
        """Test fields named in non_indexed are excluded from indexes."""
        properties = encode(
            {"name": "Chess", "description": "long text"}, non_indexed=["description"]
        )

        assert properties == [
            Property("name", "Chess", False),
            Property("description", "long text", True),
        ]

    def test_undefined_fields_skipped(self):
        """Test UNDEFINED values are omitted entirely."""
        properties = encode({"name": "Chess", "score": UNDEFINED, "rank": 3})

        assert [p.name for p in properties] == ["name", "rank"]

    def test_none_is_stored(self):
        """Test an explicit None is kept, unlike UNDEFINED."""
        properties = encode({"name": None})

        assert properties == [Property("name", None, False)]

    def test_order_is_deterministic(self):
        """Test emission follows the mapping's insertion order."""
        entity = {"z": 1, "a": 2, "m": 3}

        assert [p.name for p in encode(entity)] == ["z", "a", "m"]
        assert encode(entity) == encode(dict(entity))

    def test_empty_entity(self):
        """Test encoding an empty mapping."""
        assert encode({}) == []


class TestRoundTrip:
    """Tests for encode followed by decode."""

    def test_round_trip_adds_id(self):
        """Test decode(record built from encode(E)) == E plus id."""
        entity = {"name": "Spring Open", "starttime": "2024-03-01", "rounds": 5}
        record = Record.from_properties(Key("Tournament", 11), encode(entity))

        assert decode(record) == {**entity, "id": 11}

    def test_round_trip_drops_undefined(self):
        """Test UNDEFINED fields do not come back after a round trip."""
        entity = {"name": "Go", "notes": UNDEFINED}
        record = Record.from_properties(Key("Game", 3), encode(entity))

        assert decode(record) == {"name": "Go", "id": 3}

    def test_undefined_is_falsy_singleton(self):
        """Test UNDEFINED behaves like a falsy singleton."""
        assert not UNDEFINED
        assert type(UNDEFINED)() is UNDEFINED
        assert repr(UNDEFINED) == "UNDEFINED"
