"""
Generic entity access layer over a key-value entity store.

This package provides:
- create(kind, data) - Insert with a store-assigned id
- read(kind, id) - Fetch one entity, NotFoundError if absent
- update(kind, id, data) - Full-record overwrite
- delete(kind, id) - Remove by key
- list(kind, order, limit, cursor) - Ordered, cursor-paginated scan
"""

from entitystore.accessor import CollectionAccessor
from entitystore.config import Config, build_store

__all__ = ["CollectionAccessor", "Config", "build_store"]
