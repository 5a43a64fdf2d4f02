"""
Data models for the entity access layer.
"""

from entitystore.models.exceptions import (
    EntityStoreError,
    NotFoundError,
    StoreDeleteError,
    StoreError,
    StoreQueryError,
    StoreReadError,
    StoreWriteError,
)
from entitystore.models.key import Key
from entitystore.models.query import MoreResults, Page, Query, QueryResult
from entitystore.models.record import Property, Record

__all__ = [
    "Key",
    "Record",
    "Property",
    "Query",
    "QueryResult",
    "MoreResults",
    "Page",
    "EntityStoreError",
    "NotFoundError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "StoreDeleteError",
    "StoreQueryError",
]
