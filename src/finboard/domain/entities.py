"""Domain model entities for finboard.

These are pure data classes representing the records read from the remote
store and the summary derived from them. Rows coming back from a gateway are
loosely typed; they are converted into these entities by
``finboard.domain.records`` before any aggregation happens.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from finboard.domain.errors import MalformedRecord
from finboard.domain.periods import Period


class TransactionKind(str, Enum):
    """Direction of a transaction. Amounts carry no sign of their own."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_value(cls, value: object) -> Optional["TransactionKind"]:
        """Resolve a raw ``kind`` column value, or None if unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return _KIND_ALIASES.get(value.strip().lower())


# Rows written by the first version of the dashboard use Portuguese labels.
_KIND_ALIASES = {
    "income": TransactionKind.INCOME,
    "expense": TransactionKind.EXPENSE,
    "receita": TransactionKind.INCOME,
    "despesa": TransactionKind.EXPENSE,
}


@dataclass(frozen=True)
class User:
    """Authenticated principal supplied by the session provider."""

    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class Category:
    """Category lookup entity."""

    id: int
    name: str


@dataclass(frozen=True)
class Profile:
    """User profile shown next to the dashboard."""

    id: str
    name: Optional[str]
    phone: Optional[str]
    avatar_url: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    occurred_on: Optional[date]
    amount: Decimal
    kind: Optional[TransactionKind]
    owner_id: str
    establishment: Optional[str] = None
    details: Optional[str] = None
    category_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Reminder:
    """Reminder domain entity."""

    id: int
    description: Optional[str]
    due_on: Optional[date]
    amount: Decimal
    owner_id: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CategoryTotal:
    """Sum of one kind of transaction within one category."""

    category_id: Optional[int]
    category_name: str
    kind: TransactionKind
    total: Decimal
    count: int


@dataclass(frozen=True)
class DashboardSummary:
    """Derived view model for one user and one period. Never persisted."""

    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    recent_transactions: tuple[Transaction, ...] = ()
    upcoming_reminders: tuple[Reminder, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    reminders: tuple[Reminder, ...] = ()
    category_totals: tuple[CategoryTotal, ...] = ()
    diagnostics: tuple[MalformedRecord, ...] = ()
    period: Optional[Period] = field(default=None, compare=False)

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expense

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    @property
    def reminder_count(self) -> int:
        return len(self.reminders)

    @classmethod
    def empty(cls) -> "DashboardSummary":
        """Zero-valued summary shown before anything has been loaded."""
        return cls()
