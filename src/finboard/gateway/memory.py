"""In-memory gateway implementation.

Rows are kept as plain dictionaries, the way a JSON query API would return
them (dates as ISO text). Comparisons follow the value types: text is
compared lexically, numbers numerically.
"""

import asyncio
from datetime import datetime, UTC
from typing import Any, Optional

from finboard.gateway.base import (
    COLLECTION_FIELDS,
    FilterOp,
    Gateway,
    QueryResult,
    QuerySpec,
    Row,
    unknown_collection,
)


def _matches(row: Row, field_name: str, op: FilterOp, value: Any) -> bool:
    current = row.get(field_name)
    if op == FilterOp.EQ:
        return current == value
    if current is None:
        return False
    try:
        if op == FilterOp.GTE:
            return current >= value
        return current <= value
    except TypeError:
        return False


def _sorted(rows: list[Row], field_name: str, ascending: bool) -> list[Row]:
    # Nulls sort last in both directions
    present = [r for r in rows if r.get(field_name) is not None]
    missing = [r for r in rows if r.get(field_name) is None]
    try:
        present.sort(key=lambda r: r[field_name], reverse=not ascending)
    except TypeError:
        present.sort(key=lambda r: str(r[field_name]), reverse=not ascending)
    return present + missing


class MemoryGateway(Gateway):
    """Gateway over in-process collections of rows."""

    def __init__(self, collections: Optional[dict[str, list[Row]]] = None):
        """Initialize memory gateway.

        Args:
            collections: Optional initial rows keyed by collection name
        """
        self.collections: dict[str, list[Row]] = {
            name: [] for name in COLLECTION_FIELDS
        }
        for name, rows in (collections or {}).items():
            self.collections.setdefault(name, []).extend(dict(r) for r in rows)
        self.executed: list[QuerySpec] = []
        self.failures: dict[str, str] = {}

    def connect(self) -> None:
        """Connect to the store."""
        # Nothing to connect to
        pass

    def disconnect(self) -> None:
        """Release any connection held to the store."""
        pass

    def fail(self, collection: str, message: str) -> None:
        """Make every following query on collection return an error."""
        self.failures[collection] = message

    async def execute(self, spec: QuerySpec) -> QueryResult:
        """Execute a read query against the in-memory rows."""
        self.executed.append(spec)
        await asyncio.sleep(0)

        error = self.validate(spec)
        if error is not None:
            return QueryResult.failure(error)
        if spec.collection in self.failures:
            return QueryResult.failure(self.failures[spec.collection])

        rows = [
            r
            for r in self.collections[spec.collection]
            if all(_matches(r, f.field, f.op, f.value) for f in spec.filters)
        ]
        # Apply orderings from least to most significant so earlier ones win
        for ordering in reversed(spec.orderings):
            rows = _sorted(rows, ordering.field, ordering.ascending)
        if spec.limit is not None:
            rows = rows[: spec.limit]
        return QueryResult(rows=[dict(r) for r in rows])

    async def insert(self, collection: str, row: Row) -> QueryResult:
        """Insert a row, assigning an id and created_at when missing."""
        if collection not in self.collections:
            return QueryResult.failure(unknown_collection(collection))
        stored = dict(row)
        rows = self.collections[collection]
        if stored.get("id") is None:
            ids = [r["id"] for r in rows if isinstance(r.get("id"), int)]
            stored["id"] = max(ids, default=0) + 1
        if "created_at" in COLLECTION_FIELDS[collection]:
            stored.setdefault("created_at", datetime.now(UTC).isoformat())
        rows.append(stored)
        return QueryResult(rows=[dict(stored)])
