"""
Test doubles for store clients.
"""

from entitystore.interfaces.store_client import StoreClient
from entitystore.models.key import Key
from entitystore.models.query import Query, QueryResult
from entitystore.models.record import Property, Record


class CodedError(Exception):
    """Backend error exposing an HTTP-style status code."""

    def __init__(self, code: int, message: str):
        self.code = code
        super().__init__(message)


class FailingStore(StoreClient):
    """Store whose every I/O call raises the configured error."""

    def __init__(self, error: Exception):
        self.error = error
        self.calls: list[str] = []

    def key(self, kind: str, id: int | None = None) -> Key:
        return Key(kind=kind, id=id)

    async def get(self, key: Key) -> Record | None:
        self.calls.append("get")
        raise self.error

    async def put(self, key: Key, properties: list[Property]) -> Key:
        self.calls.append("put")
        raise self.error

    async def delete(self, key: Key) -> None:
        self.calls.append("delete")
        raise self.error

    async def run_query(self, query: Query) -> QueryResult:
        self.calls.append("run_query")
        raise self.error
