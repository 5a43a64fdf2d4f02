"""
Collection accessor: the entry point callers use.
"""

from entitystore.accessor.collection_accessor import (
    KIND_ADMIN,
    KIND_GAME,
    KIND_TOURNAMENT,
    CollectionAccessor,
    parse_id,
)

__all__ = [
    "CollectionAccessor",
    "KIND_ADMIN",
    "KIND_GAME",
    "KIND_TOURNAMENT",
    "parse_id",
]
