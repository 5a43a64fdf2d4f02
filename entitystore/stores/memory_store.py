"""
MemoryStore - process-local StoreClient with Datastore-like semantics.
"""

import asyncio
import base64
import binascii
import json
from datetime import date, datetime, timezone
from typing import Any

from entitystore.interfaces.store_client import StoreClient
from entitystore.models.key import Key
from entitystore.models.query import MoreResults, Query, QueryResult
from entitystore.models.record import Property, Record

# Position of a record in an ordered scan: (type rank, comparable value, id)
SortPosition = tuple[int, Any, int]


class InvalidCursorError(ValueError):
    """Raised for a cursor this store did not produce. Carries HTTP code 400."""

    code = 400


def _order_value(value: Any) -> tuple[int, Any]:
    """
    Map a property value to a (rank, comparable) pair.

    Values of different types never compare directly: the rank orders the
    types, the comparable orders values within a type. Both parts are
    JSON-serializable so a position can be carried inside a cursor.
    """
    if value is None:
        return 0, 0
    if isinstance(value, bool):
        return 1, int(value)
    if isinstance(value, (int, float)):
        return 2, value
    if isinstance(value, datetime):
        # Naive values are taken as UTC
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return 3, value.isoformat(timespec="microseconds")
    if isinstance(value, date):
        return 3, value.isoformat()
    if isinstance(value, str):
        return 4, value
    if isinstance(value, bytes):
        return 5, value.hex()
    return 6, repr(value)


def encode_cursor(position: SortPosition) -> str:
    payload = json.dumps(list(position), separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii")


def decode_cursor(cursor: str) -> SortPosition:
    """
    Decode a cursor produced by encode_cursor.

    Raises:
        InvalidCursorError: If the cursor is malformed.
    """
    try:
        rank, value, id = json.loads(base64.urlsafe_b64decode(cursor.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError, TypeError) as e:
        raise InvalidCursorError(f"Invalid cursor: {cursor!r}") from e
    if not _is_int(rank) or not _is_int(id) or not _matches_rank(rank, value):
        raise InvalidCursorError(f"Invalid cursor: {cursor!r}")
    return rank, value, id


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _matches_rank(rank: int, value: Any) -> bool:
    """Check a decoded cursor value has the type _order_value gives its rank."""
    if rank in (0, 1):
        return _is_int(value)
    if rank == 2:
        return _is_int(value) or isinstance(value, float)
    if 3 <= rank <= 6:
        return isinstance(value, str)
    return False


class MemoryStore(StoreClient):
    """
    In-memory entity store.

    Behaves like the remote store the access layer is written against:
    - Partial keys are completed with a per-kind increasing id on put
    - Puts replace the whole record
    - Queries return records ordered by one property, ties broken by id
    - Records lacking the order property, or storing it unindexed, are
      not returned by queries on that property
    - Cursors are opaque and mark the exclusive start of the next batch
    """

    def __init__(self) -> None:
        self._kinds: dict[str, dict[int, Record]] = {}
        self._id_seq: dict[str, int] = {}
        self._write_lock = asyncio.Lock()

    def key(self, kind: str, id: int | None = None) -> Key:
        return Key(kind=kind, id=id)

    def count(self, kind: str) -> int:
        return len(self._kinds.get(kind, {}))

    def _allocate_id(self, kind: str) -> int:
        next_id = self._id_seq.get(kind, 0) + 1
        self._id_seq[kind] = next_id
        return next_id

    async def get(self, key: Key) -> Record | None:
        if key.is_partial:
            raise ValueError(f"Cannot get partial key {key}")
        record = self._kinds.get(key.kind, {}).get(key.id)
        return None if record is None else record.copy()

    async def put(self, key: Key, properties: list[Property]) -> Key:
        async with self._write_lock:
            if key.is_partial:
                key = key.completed(self._allocate_id(key.kind))
            elif key.id > self._id_seq.get(key.kind, 0):
                # Never hand out an id a caller already used
                self._id_seq[key.kind] = key.id

            self._kinds.setdefault(key.kind, {})[key.id] = Record.from_properties(
                key, properties
            )
            return key

    async def delete(self, key: Key) -> None:
        if key.is_partial:
            raise ValueError(f"Cannot delete partial key {key}")
        async with self._write_lock:
            self._kinds.get(key.kind, {}).pop(key.id, None)

    async def run_query(self, query: Query) -> QueryResult:
        start = decode_cursor(query.start_cursor) if query.start_cursor else None

        positioned: list[tuple[SortPosition, Record]] = []
        for id, record in self._kinds.get(query.kind, {}).items():
            if query.order not in record or query.order in record.exclude_from_indexes:
                continue
            rank, value = _order_value(record[query.order])
            positioned.append(((rank, value, id), record))
        positioned.sort(key=lambda item: item[0])

        if start is not None:
            positioned = [item for item in positioned if item[0] > start]

        batch = positioned[: query.limit]
        records = [record.copy() for _, record in batch]

        if batch:
            end_cursor = encode_cursor(batch[-1][0])
        else:
            end_cursor = query.start_cursor

        if len(positioned) > query.limit:
            more_results = MoreResults.MORE_RESULTS_AFTER_LIMIT
        else:
            more_results = MoreResults.NO_MORE_RESULTS

        return QueryResult(records=records, more_results=more_results, end_cursor=end_cursor)
