"""
Query, QueryResult and Page - the ordered range query protocol.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Literal, NamedTuple

from entitystore.models.record import Record


class MoreResults(IntEnum):
    """Continuation signal reported by the store after a query batch."""

    NOT_FINISHED = 1
    MORE_RESULTS_AFTER_LIMIT = 2
    MORE_RESULTS_AFTER_CURSOR = 4
    NO_MORE_RESULTS = 3


@dataclass(frozen=True)
class Query:
    """
    Ordered, limited query over a single kind.

    Attributes:
        kind: Kind to scan.
        order: Property to sort on, ascending.
        limit: Maximum number of records in one batch.
        start_cursor: Opaque cursor; results begin strictly after it.
    """

    kind: str
    order: str
    limit: int
    start_cursor: str | None = None

    def __post_init__(self) -> None:
        if not self.kind:
            raise ValueError("Query kind cannot be empty")
        if not self.order:
            raise ValueError("Query order cannot be empty")
        if self.limit <= 0:
            raise ValueError(f"Query limit must be positive, got {self.limit}")


@dataclass
class QueryResult:
    """One batch of query results plus the store's continuation signal."""

    records: list[Record] = field(default_factory=list)
    more_results: MoreResults = MoreResults.NO_MORE_RESULTS
    end_cursor: str | None = None


class Page(NamedTuple):
    """
    A page of decoded entities.

    ``next_cursor`` is False once the store reports no more results.
    """

    entities: list[dict[str, Any]]
    next_cursor: str | Literal[False]

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not False
