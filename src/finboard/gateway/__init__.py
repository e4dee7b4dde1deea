"""Remote data gateway layer for finboard."""

from finboard.gateway.base import Gateway, QueryBuilder, QueryResult, QuerySpec
from finboard.gateway.memory import MemoryGateway
from finboard.gateway.factories import create_sqlite_gateway

__all__ = [
    "Gateway",
    "QueryBuilder",
    "QueryResult",
    "QuerySpec",
    "MemoryGateway",
    "create_sqlite_gateway",
]
