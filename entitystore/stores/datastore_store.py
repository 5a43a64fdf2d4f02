"""
DatastoreStore - StoreClient backed by Google Cloud Datastore.
"""

import asyncio
import functools
from typing import Any, Callable, TypeVar

from google.cloud import datastore

from entitystore.interfaces.store_client import StoreClient
from entitystore.models.query import MoreResults, Query, QueryResult
from entitystore.models.record import Property

T = TypeVar("T")


class DatastoreStore(StoreClient):
    """
    Cloud Datastore adapter.

    The ``google-cloud-datastore`` client is blocking, so every call runs in
    the default executor. Records are returned as ``datastore.Entity``
    objects, which already carry their key.
    """

    def __init__(self, client: datastore.Client) -> None:
        self._client = client

    @classmethod
    def create(cls, project: str, namespace: str | None = None) -> "DatastoreStore":
        """Build a store with a new client for ``project``."""
        return cls(datastore.Client(project=project, namespace=namespace))

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    def key(self, kind: str, id: int | None = None) -> datastore.Key:
        if id is None:
            return self._client.key(kind)
        return self._client.key(kind, id)

    async def get(self, key: datastore.Key) -> datastore.Entity | None:
        return await self._run(self._client.get, key)

    async def put(self, key: datastore.Key, properties: list[Property]) -> datastore.Key:
        entity = datastore.Entity(
            key=key,
            exclude_from_indexes=tuple(p.name for p in properties if p.exclude_from_indexes),
        )
        entity.update({p.name: p.value for p in properties})
        await self._run(self._client.put, entity)
        # put() completes a partial key in place
        return entity.key

    async def delete(self, key: datastore.Key) -> None:
        await self._run(self._client.delete, key)

    async def run_query(self, query: Query) -> QueryResult:
        return await self._run(self._run_query_sync, query)

    def _run_query_sync(self, query: Query) -> QueryResult:
        ds_query = self._client.query(kind=query.kind, order=[query.order])
        iterator = ds_query.fetch(limit=query.limit, start_cursor=query.start_cursor)
        page = next(iterator.pages, [])
        records = list(page)

        # The iterator only sets next_page_token when the batch did not end
        # with NO_MORE_RESULTS.
        token = iterator.next_page_token
        if token is None:
            return QueryResult(records=records, more_results=MoreResults.NO_MORE_RESULTS)
        if isinstance(token, bytes):
            token = token.decode("ascii")
        return QueryResult(
            records=records,
            more_results=MoreResults.MORE_RESULTS_AFTER_LIMIT,
            end_cursor=token,
        )
