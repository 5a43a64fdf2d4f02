"""
Record and Property - the store-native entity representation.
"""

from typing import Any, NamedTuple

from entitystore.models.key import Key


class Property(NamedTuple):
    """A single field as written to the store."""

    name: str
    value: Any
    exclude_from_indexes: bool = False


class Record(dict):
    """
    Raw record as returned by a store client.

    A plain field mapping that carries its own key, in the same shape as
    ``google.cloud.datastore.Entity``. Fields listed in
    ``exclude_from_indexes`` are stored but cannot be ordered on.
    """

    def __init__(
        self,
        key: Key | None = None,
        exclude_from_indexes: tuple[str, ...] | frozenset[str] = (),
    ) -> None:
        super().__init__()
        self.key = key
        self.exclude_from_indexes = frozenset(exclude_from_indexes)

    @classmethod
    def from_properties(cls, key: Key, properties: list[Property]) -> "Record":
        record = cls(
            key=key,
            exclude_from_indexes=tuple(p.name for p in properties if p.exclude_from_indexes),
        )
        for prop in properties:
            record[prop.name] = prop.value
        return record

    def copy(self) -> "Record":
        clone = Record(key=self.key, exclude_from_indexes=self.exclude_from_indexes)
        clone.update(self)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return (
            self.key == other.key
            and self.exclude_from_indexes == other.exclude_from_indexes
            and dict.__eq__(self, other)
        )

    def __repr__(self) -> str:
        return f"<Record{dict.__repr__(self)} key={self.key!r}>"
