"""
CollectionAccessor - generic CRUD and pagination over any kind.
"""

import logging
from collections.abc import Mapping
from typing import Any

from entitystore.codec import UNDEFINED, decode, encode
from entitystore.interfaces.store_client import StoreClient
from entitystore.models.exceptions import (
    NotFoundError,
    StoreDeleteError,
    StoreQueryError,
    StoreReadError,
    StoreWriteError,
)
from entitystore.models.query import MoreResults, Page, Query

logger = logging.getLogger(__name__)

KIND_ADMIN = "Admin"
KIND_GAME = "Game"
KIND_TOURNAMENT = "Tournament"


def parse_id(value: str | int) -> int:
    """
    Parse an entity identifier given as a base-10 string or an int.

    Raises:
        ValueError: If the value is not a positive base-10 integer.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid entity id: {value!r}")
    if isinstance(value, int):
        parsed = value
    else:
        text = str(value).strip()
        if not (text.isascii() and text.isdigit()):
            raise ValueError(f"Invalid entity id: {value!r}")
        parsed = int(text, 10)
    if parsed <= 0:
        raise ValueError(f"Entity id must be positive, got {value!r}")
    return parsed


class CollectionAccessor:
    """
    Entity access layer over a StoreClient.

    Provides:
    - create(kind, data): Insert with a store-assigned id
    - update(kind, id, data): Full replace of one entity
    - read(kind, id): Fetch one entity
    - delete(kind, id): Remove one entity
    - list(kind, order, limit, cursor): One page of an ordered scan

    Every operation issues exactly one store call. Store failures surface as
    the matching StoreError subclass with the original exception as cause.
    """

    def __init__(self, store: StoreClient) -> None:
        self._store = store

    async def create(self, kind: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a new entity; the store assigns its id."""
        return await self.update(kind, None, data)

    async def update(
        self, kind: str, id: str | int | None, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        """
        Write an entity, replacing any previous version under the same key.

        Args:
            kind: Kind name.
            id: Existing id, or None/"" to let the store assign one.
            data: Full field map. Fields missing here do not survive.

        Returns:
            A copy of ``data`` without UNDEFINED fields, with ``id`` set
            to the entity's identifier.

        Raises:
            StoreWriteError: If the store rejects the write.
        """
        if id is None or id == "":
            key = self._store.key(kind)
        else:
            key = self._store.key(kind, parse_id(id))

        fields = {name: value for name, value in data.items() if name != "id"}
        # Accessor writes never mark fields as non-indexed.
        properties = encode(fields, [])

        logger.debug(f"put {kind} id={key.id} fields={len(properties)}")
        try:
            saved_key = await self._store.put(key, properties)
        except Exception as e:
            logger.warning(f"Store write failed for {kind}: {e}")
            raise StoreWriteError(e) from e

        entity = {name: value for name, value in data.items() if value is not UNDEFINED}
        entity["id"] = saved_key.id
        return entity

    async def read(self, kind: str, id: str | int) -> dict[str, Any]:
        """
        Fetch one entity by id.

        Raises:
            NotFoundError: If no record exists under the key.
            StoreReadError: If the store lookup itself fails.
        """
        key = self._store.key(kind, parse_id(id))

        logger.debug(f"get {kind} id={key.id}")
        try:
            record = await self._store.get(key)
        except Exception as e:
            logger.warning(f"Store read failed for {kind}/{key.id}: {e}")
            raise StoreReadError(e) from e

        if record is None:
            raise NotFoundError()
        return decode(record)

    async def delete(self, kind: str, id: str | int) -> None:
        """
        Delete one entity by id. Missing entities are not reported.

        Raises:
            StoreDeleteError: If the store rejects the delete.
        """
        key = self._store.key(kind, parse_id(id))

        logger.debug(f"delete {kind} id={key.id}")
        try:
            await self._store.delete(key)
        except Exception as e:
            logger.warning(f"Store delete failed for {kind}/{key.id}: {e}")
            raise StoreDeleteError(e) from e

    async def list(
        self, kind: str, order: str, limit: int, cursor: str | None = None
    ) -> Page:
        """
        Fetch one page of a kind, sorted ascending by ``order``.

        Args:
            kind: Kind name.
            order: Property to sort on.
            limit: Maximum number of entities in the page.
            cursor: Cursor from the previous page, or None for the first.

        Returns:
            Page(entities, next_cursor). ``next_cursor`` is False once the
            store reports there are no more results.

        Raises:
            StoreQueryError: If the query fails in the store.
        """
        query = Query(kind=kind, order=order, limit=limit, start_cursor=cursor or None)

        logger.debug(f"query {kind} order={order} limit={limit} cursor={cursor!r}")
        try:
            result = await self._store.run_query(query)
        except Exception as e:
            logger.warning(f"Store query failed for {kind}: {e}")
            raise StoreQueryError(e) from e

        entities = [decode(record) for record in result.records]
        if result.more_results != MoreResults.NO_MORE_RESULTS:
            next_cursor = result.end_cursor
        else:
            next_cursor = False
        return Page(entities=entities, next_cursor=next_cursor)

    async def list_admins(self, limit: int, cursor: str | None = None) -> Page:
        """Admins sorted by name."""
        return await self.list(KIND_ADMIN, "name", limit, cursor)

    async def list_games(self, limit: int, cursor: str | None = None) -> Page:
        """Games sorted by name."""
        return await self.list(KIND_GAME, "name", limit, cursor)

    async def list_tournaments(self, limit: int, cursor: str | None = None) -> Page:
        """Tournaments sorted by start time."""
        return await self.list(KIND_TOURNAMENT, "starttime", limit, cursor)

    async def read_tournament(self, id: str | int) -> dict[str, Any]:
        return await self.read(KIND_TOURNAMENT, id)
