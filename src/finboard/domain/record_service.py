"""Record domain service.

Writes and plain listings of transactions, reminders and categories. The
dashboard itself only reads; these operations exist so the store can be
filled and inspected from the command line.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from finboard.domain.entities import Category, Reminder, Transaction, TransactionKind
from finboard.domain.errors import FetchFailed, MalformedRecord, ValidationError
from finboard.domain.periods import Period
from finboard.domain.records import (
    category_from_row,
    reminder_from_row,
    transaction_from_row,
)
from finboard.gateway.base import Gateway, QueryResult


def _check(result: QueryResult, collection: str) -> QueryResult:
    if not result.ok:
        raise FetchFailed(result.error, collection=collection)
    return result


class RecordService:
    """Service for managing transactions, reminders and categories."""

    def __init__(self, gateway: Gateway):
        """Initialize record service.

        Args:
            gateway: Gateway instance
        """
        self.gateway = gateway

    async def create_category(self, name: str) -> Category:
        """Create a category.

        Raises:
            ValidationError: If the name is empty or already used
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if await self.get_category_by_name(name) is not None:
            raise ValidationError(f"Category '{name}' already exists")
        result = _check(await self.gateway.insert("categories", {"name": name}), "categories")
        return category_from_row(result.rows[0])

    async def list_categories(self) -> list[Category]:
        """List all categories ordered by name."""
        result = _check(
            await self.gateway.query("categories").order("name").execute(), "categories"
        )
        return [category_from_row(row) for row in result.rows]

    async def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by exact name."""
        result = _check(
            await self.gateway.query("categories").eq("name", name).limit(1).execute(),
            "categories",
        )
        return category_from_row(result.rows[0]) if result.rows else None

    async def create_transaction(
        self,
        owner_id: str,
        occurred_on: date,
        amount: Decimal,
        kind: TransactionKind,
        establishment: Optional[str] = None,
        details: Optional[str] = None,
        category_name: Optional[str] = None,
    ) -> Transaction:
        """Create a transaction.

        Args:
            owner_id: Owning user ID
            occurred_on: Transaction date
            amount: Amount, positive; the direction is given by kind
            kind: Income or expense
            establishment: Optional establishment label
            details: Optional free-text details
            category_name: Optional category name

        Returns:
            The stored transaction

        Raises:
            ValidationError: If the amount is negative or the category doesn't exist
        """
        if amount < 0:
            raise ValidationError("Amount must not be negative; use the kind for direction")

        category_id = None
        if category_name is not None:
            category = await self.get_category_by_name(category_name)
            if category is None:
                raise ValidationError(f"Category '{category_name}' not found")
            category_id = category.id

        result = _check(
            await self.gateway.insert(
                "transactions",
                {
                    "owner_id": owner_id,
                    "occurred_on": occurred_on.isoformat(),
                    "amount": str(amount),
                    "kind": kind.value,
                    "establishment": establishment,
                    "details": details,
                    "category_id": category_id,
                },
            ),
            "transactions",
        )
        return transaction_from_row(result.rows[0], [])

    async def list_transactions(
        self, owner_id: str, period: Optional[Period] = None
    ) -> tuple[list[Transaction], list[MalformedRecord]]:
        """List the owner's transactions, most recent first.

        Returns:
            Tuple of (transactions, diagnostics for malformed fields)
        """
        query = self.gateway.query("transactions").eq("owner_id", owner_id)
        if period is not None:
            query = query.gte("occurred_on", period.start_bound).lte(
                "occurred_on", period.end_bound
            )
        query = query.order("occurred_on", ascending=False).order("id", ascending=False)
        result = _check(await query.execute(), "transactions")
        diagnostics: list[MalformedRecord] = []
        transactions = [transaction_from_row(row, diagnostics) for row in result.rows]
        return [t for t in transactions if t.owner_id == owner_id], diagnostics

    async def create_reminder(
        self,
        owner_id: str,
        description: str,
        due_on: date,
        amount: Decimal = Decimal("0"),
    ) -> Reminder:
        """Create a reminder.

        Raises:
            ValidationError: If the description is empty
        """
        if not description.strip():
            raise ValidationError("Reminder description cannot be empty")
        result = _check(
            await self.gateway.insert(
                "reminders",
                {
                    "owner_id": owner_id,
                    "description": description.strip(),
                    "due_on": due_on.isoformat(),
                    "amount": str(amount),
                },
            ),
            "reminders",
        )
        return reminder_from_row(result.rows[0], [])

    async def list_reminders(
        self, owner_id: str, due_from: Optional[date] = None
    ) -> list[Reminder]:
        """List the owner's reminders, soonest first."""
        query = self.gateway.query("reminders").eq("owner_id", owner_id)
        if due_from is not None:
            query = query.gte("due_on", due_from.isoformat())
        result = _check(await query.order("due_on").execute(), "reminders")
        reminders = [reminder_from_row(row, []) for row in result.rows]
        return [r for r in reminders if r.owner_id == owner_id]
