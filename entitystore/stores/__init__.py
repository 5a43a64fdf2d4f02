"""
StoreClient implementations.

DatastoreStore is imported from its own module so the Google client
library is only loaded when that backend is selected.
"""

from entitystore.stores.memory_store import MemoryStore

__all__ = ["MemoryStore"]
