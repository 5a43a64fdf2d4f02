"""
Entity codec - converts between store records and plain field maps.
"""

from collections.abc import Collection, Mapping
from typing import Any

from entitystore.models.record import Property, Record


class _Undefined:
    """Marker for a field that has no value and must not be written."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


def decode(record: Record) -> dict[str, Any]:
    """
    Convert a store record into an entity.

    The record's fields are copied and the numeric id of its key is
    injected under ``id``. The record must carry a key.

    Args:
        record: Raw record returned by a store client.

    Returns:
        A new dict with the record's fields plus ``id``.
    """
    entity = dict(record)
    entity["id"] = record.key.id
    return entity


def encode(
    entity: Mapping[str, Any], non_indexed: Collection[str] = ()
) -> list[Property]:
    """
    Convert an entity into the property triples a store writes.

    Fields whose value is UNDEFINED are skipped, so absent fields are never
    stored. ``None`` is a real value and is written. Output follows the
    mapping's iteration order.

    Args:
        entity: Field name -> value mapping.
        non_indexed: Names of fields to exclude from the store's indexes.

    Returns:
        List of Property(name, value, exclude_from_indexes).
    """
    excluded = frozenset(non_indexed)
    return [
        Property(name=name, value=value, exclude_from_indexes=name in excluded)
        for name, value in entity.items()
        if value is not UNDEFINED
    ]
