"""Abstract remote data gateway interface.

The dashboard never talks to a store directly. It builds queries through
``Gateway.query(collection)`` and awaits ``QueryBuilder.execute()``, which
returns either rows or an error message, never raises for store failures.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional

Row = dict[str, Any]

COLLECTION_FIELDS: dict[str, tuple[str, ...]] = {
    "transactions": (
        "id",
        "created_at",
        "occurred_on",
        "establishment",
        "amount",
        "details",
        "kind",
        "category_id",
        "owner_id",
    ),
    "reminders": ("id", "created_at", "owner_id", "description", "due_on", "amount"),
    "categories": ("id", "name"),
    "profiles": ("id", "name", "phone", "avatar_url"),
}


def unknown_collection(collection: str) -> str:
    """Return message for a query against an unknown collection."""
    return f"Unknown collection '{collection}'"


def unknown_field(collection: str, field_name: str) -> str:
    """Return message for a filter or ordering on an unknown field."""
    return f"Unknown field '{field_name}' on collection '{collection}'"


class FilterOp(str, Enum):
    """Supported filter operators."""

    EQ = "eq"
    GTE = "gte"
    LTE = "lte"


@dataclass(frozen=True)
class Filter:
    field: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class Ordering:
    field: str
    ascending: bool = True


@dataclass(frozen=True)
class QuerySpec:
    """Immutable description of a read query."""

    collection: str
    filters: tuple[Filter, ...] = ()
    orderings: tuple[Ordering, ...] = ()
    limit: Optional[int] = None

    def fields(self) -> set[str]:
        """All field names referenced by filters and orderings."""
        names = {f.field for f in self.filters}
        names.update(o.field for o in self.orderings)
        return names


@dataclass(frozen=True)
class QueryResult:
    """Outcome of a query: rows on success, an error message otherwise."""

    rows: list[Row] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str) -> "QueryResult":
        return cls(rows=[], error=message)


class QueryBuilder:
    """Chainable query builder bound to a gateway.

    Each call returns a new builder, so partially built queries can be reused.
    """

    def __init__(self, gateway: "Gateway", spec: QuerySpec):
        self.gateway = gateway
        self.spec = spec

    def _with(self, **changes) -> "QueryBuilder":
        return QueryBuilder(self.gateway, replace(self.spec, **changes))

    def _filter(self, field_name: str, op: FilterOp, value: Any) -> "QueryBuilder":
        return self._with(filters=self.spec.filters + (Filter(field_name, op, value),))

    def eq(self, field_name: str, value: Any) -> "QueryBuilder":
        """Keep rows whose field equals value."""
        return self._filter(field_name, FilterOp.EQ, value)

    def gte(self, field_name: str, value: Any) -> "QueryBuilder":
        """Keep rows whose field is greater than or equal to value."""
        return self._filter(field_name, FilterOp.GTE, value)

    def lte(self, field_name: str, value: Any) -> "QueryBuilder":
        """Keep rows whose field is less than or equal to value."""
        return self._filter(field_name, FilterOp.LTE, value)

    def order(self, field_name: str, ascending: bool = True) -> "QueryBuilder":
        """Append an ordering; earlier orderings take precedence."""
        return self._with(
            orderings=self.spec.orderings + (Ordering(field_name, ascending),)
        )

    def limit(self, count: int) -> "QueryBuilder":
        """Return at most count rows."""
        return self._with(limit=count)

    async def execute(self) -> QueryResult:
        """Run the query against the gateway."""
        return await self.gateway.execute(self.spec)


class Gateway(ABC):
    """Abstract remote data gateway for finboard."""

    def query(self, collection: str) -> QueryBuilder:
        """Start a query against a named collection."""
        return QueryBuilder(self, QuerySpec(collection=collection))

    def validate(self, spec: QuerySpec) -> Optional[str]:
        """Return an error message if the query names unknown things."""
        known = COLLECTION_FIELDS.get(spec.collection)
        if known is None:
            return unknown_collection(spec.collection)
        for name in sorted(spec.fields()):
            if name not in known:
                return unknown_field(spec.collection, name)
        if spec.limit is not None and spec.limit < 0:
            return f"Invalid limit {spec.limit}"
        return None

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release any connection held to the store."""
        pass

    @abstractmethod
    async def execute(self, spec: QuerySpec) -> QueryResult:
        """Execute a read query. Store failures are returned, not raised."""
        pass

    @abstractmethod
    async def insert(self, collection: str, row: Row) -> QueryResult:
        """Insert a row. Returns the stored row (with generated fields)."""
        pass
