"""
Abstract base classes and protocols for the entity access layer.
"""

from entitystore.interfaces.store_client import StoreClient

__all__ = ["StoreClient"]
