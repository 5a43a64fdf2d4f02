"""
StoreClient abstract base class for remote key-value entity stores.
"""

from abc import ABC, abstractmethod
from typing import Any

from entitystore.models.query import Query, QueryResult
from entitystore.models.record import Property, Record


class StoreClient(ABC):
    """
    Boundary between the access layer and the storage engine.

    Implementations provide single-entity atomic get/put/delete and
    ordered range queries with an opaque continuation cursor. Errors are
    raised as whatever exception the backend produces; the access layer
    wraps them.

    Implementations:
    - MemoryStore: process-local, for tests and development
    - DatastoreStore: Google Cloud Datastore
    """

    @abstractmethod
    def key(self, kind: str, id: int | None = None) -> Any:
        """
        Build a key for the given kind.

        Args:
            kind: Kind (collection) name.
            id: Existing identifier, or None for a partial key that the
                store completes on write.

        Returns:
            A backend key object exposing ``id``.
        """
        pass

    @abstractmethod
    async def get(self, key: Any) -> Record | None:
        """
        Fetch one record by key.

        Args:
            key: A complete key.

        Returns:
            The record, with its key attached, or None if no record exists.
        """
        pass

    @abstractmethod
    async def put(self, key: Any, properties: list[Property]) -> Any:
        """
        Write one record, replacing whatever was stored under the key.

        Args:
            key: A complete or partial key.
            properties: Field triples to store.

        Returns:
            The complete key the record was written under.
        """
        pass

    @abstractmethod
    async def delete(self, key: Any) -> None:
        """
        Delete one record by key. Deleting a missing key is not an error.

        Args:
            key: A complete key.
        """
        pass

    @abstractmethod
    async def run_query(self, query: Query) -> QueryResult:
        """
        Run one batch of an ordered query.

        Args:
            query: Kind, order property, limit and optional start cursor.

        Returns:
            Records in ascending order of ``query.order`` (ties by key),
            the continuation signal and the end cursor of the batch.
        """
        pass
