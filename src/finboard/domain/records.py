"""Conversion of loosely typed gateway rows into domain entities.

Every collection has one ``*_from_row`` function. Field problems never raise
out of these functions: the offending value is replaced (amounts by zero,
dates by None) and a ``MalformedRecord`` is appended to the caller's
diagnostics list.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar

from finboard.domain.entities import (
    Category,
    Profile,
    Reminder,
    Transaction,
    TransactionKind,
)
from finboard.domain.errors import MalformedRecord
from finboard.utils.amount_parser import coerce_amount
from finboard.utils.date_parser import coerce_date, coerce_datetime

logger = logging.getLogger(__name__)

T = TypeVar("T")

Row = dict[str, Any]


def _field(
    collection: str,
    row: Row,
    name: str,
    parse: Callable[[object], T],
    default: T,
    diagnostics: list[MalformedRecord],
) -> T:
    value = row.get(name)
    try:
        return parse(value)
    except ValueError as e:
        diagnostic = MalformedRecord(collection, row.get("id"), name, value, str(e))
        logger.debug("Malformed record: %s", diagnostic)
        diagnostics.append(diagnostic)
        return default


def _optional_text(value: object) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _optional_int(value: object) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("Boolean is not an identifier")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError("Not an integer identifier")


def _optional_timestamp(value: object) -> Optional[datetime]:
    if value is None:
        return None
    return coerce_datetime(value)


def _owner(value: object) -> str:
    if value is None:
        raise ValueError("Missing owner")
    return str(value)


def _kind(value: object) -> Optional[TransactionKind]:
    kind = TransactionKind.from_value(value)
    if kind is None:
        raise ValueError("Unknown transaction kind")
    return kind


def transaction_from_row(row: Row, diagnostics: list[MalformedRecord]) -> Transaction:
    """Convert a ``transactions`` row into a Transaction entity."""
    collection = "transactions"
    return Transaction(
        id=row.get("id"),
        occurred_on=_field(collection, row, "occurred_on", coerce_date, None, diagnostics),
        amount=_field(collection, row, "amount", coerce_amount, Decimal("0"), diagnostics),
        kind=_field(collection, row, "kind", _kind, None, diagnostics),
        owner_id=_field(collection, row, "owner_id", _owner, "", diagnostics),
        establishment=_optional_text(row.get("establishment")),
        details=_optional_text(row.get("details")),
        category_id=_field(collection, row, "category_id", _optional_int, None, diagnostics),
        created_at=_field(
            collection, row, "created_at", _optional_timestamp, None, diagnostics
        ),
    )


def reminder_from_row(row: Row, diagnostics: list[MalformedRecord]) -> Reminder:
    """Convert a ``reminders`` row into a Reminder entity."""
    collection = "reminders"
    return Reminder(
        id=row.get("id"),
        description=_optional_text(row.get("description")),
        due_on=_field(collection, row, "due_on", coerce_date, None, diagnostics),
        amount=_field(collection, row, "amount", coerce_amount, Decimal("0"), diagnostics),
        owner_id=_field(collection, row, "owner_id", _owner, "", diagnostics),
        created_at=_field(
            collection, row, "created_at", _optional_timestamp, None, diagnostics
        ),
    )


def category_from_row(row: Row) -> Category:
    """Convert a ``categories`` row into a Category entity."""
    return Category(id=row.get("id"), name=str(row.get("name") or ""))


def profile_from_row(row: Row) -> Profile:
    """Convert a ``profiles`` row into a Profile entity."""
    return Profile(
        id=str(row.get("id")),
        name=_optional_text(row.get("name")),
        phone=_optional_text(row.get("phone")),
        avatar_url=_optional_text(row.get("avatar_url")),
    )
