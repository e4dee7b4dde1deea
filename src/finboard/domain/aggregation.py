"""Dashboard aggregation engine.

Fetches the transactions, reminders and categories visible to one user for
one period and reduces them into a ``DashboardSummary``. The reduction
functions are plain module-level functions over domain entities so they can
be used and tested without a gateway.
"""

import asyncio
import logging
from collections import defaultdict
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from finboard.config import AggregationConfig, ReminderWindow, TransactionOrder
from finboard.domain.entities import (
    Category,
    CategoryTotal,
    DashboardSummary,
    Reminder,
    Transaction,
    TransactionKind,
)
from finboard.domain.errors import FetchFailed, MalformedRecord, NoIdentity
from finboard.domain.periods import Period
from finboard.domain.records import (
    category_from_row,
    reminder_from_row,
    transaction_from_row,
)
from finboard.gateway.base import Gateway, QueryResult, Row

logger = logging.getLogger(__name__)

R = TypeVar("R", Transaction, Reminder)

UNCATEGORIZED = "Uncategorized"


def owned_by(records: Iterable[R], owner_id: str) -> list[R]:
    """Keep only records belonging to owner_id.

    The gateway is asked to filter by owner too; this check does not rely on
    it, since row-level security may be disabled or bypassed.
    """
    records = list(records)
    kept = [r for r in records if r.owner_id == owner_id]
    dropped = len(records) - len(kept)
    if dropped:
        logger.warning("Dropped %d record(s) not owned by %s", dropped, owner_id)
    return kept


def compute_totals(transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal]:
    """Sum amounts per kind. Returns ``(total_income, total_expense)``.

    Transactions with an unrecognized kind count towards neither total.
    """
    income = Decimal("0")
    expense = Decimal("0")
    for txn in transactions:
        if txn.kind == TransactionKind.INCOME:
            income += txn.amount
        elif txn.kind == TransactionKind.EXPENSE:
            expense += txn.amount
    return income, expense


def _timestamp_key(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def recent_transactions(
    transactions: Sequence[Transaction],
    limit: int,
    order: TransactionOrder = TransactionOrder.OCCURRED_ON,
) -> tuple[Transaction, ...]:
    """Most recent transactions first, truncated to limit.

    Transactions whose ordering field is missing or malformed are left out of
    the list; the sort is stable, so ties keep the order they were fetched in.
    """
    if order == TransactionOrder.CREATED_AT:
        dated = [t for t in transactions if t.created_at is not None]
        dated.sort(key=lambda t: _timestamp_key(t.created_at), reverse=True)
    else:
        dated = [t for t in transactions if t.occurred_on is not None]
        dated.sort(key=lambda t: t.occurred_on, reverse=True)
    return tuple(dated[:limit])


def upcoming_reminders(
    reminders: Sequence[Reminder], today: date, limit: int
) -> tuple[Reminder, ...]:
    """Reminders due today or later, soonest first, truncated to limit."""
    eligible = [r for r in reminders if r.due_on is not None and r.due_on >= today]
    eligible.sort(key=lambda r: r.due_on)
    return tuple(eligible[:limit])


def category_totals(
    transactions: Iterable[Transaction], categories: Iterable[Category]
) -> tuple[CategoryTotal, ...]:
    """Group transaction amounts by category and kind.

    Results are ordered by kind (income first), then by total, largest first.
    """
    names = {c.id: c.name for c in categories}
    sums: dict[tuple[Optional[int], TransactionKind], list] = defaultdict(
        lambda: [Decimal("0"), 0]
    )
    for txn in transactions:
        if txn.kind is None:
            continue
        bucket = sums[(txn.category_id, txn.kind)]
        bucket[0] += txn.amount
        bucket[1] += 1

    results = [
        CategoryTotal(
            category_id=category_id,
            category_name=(
                UNCATEGORIZED if category_id is None else names.get(category_id, "Unknown")
            ),
            kind=kind,
            total=total,
            count=count,
        )
        for (category_id, kind), (total, count) in sums.items()
    ]
    kind_rank = {TransactionKind.INCOME: 0, TransactionKind.EXPENSE: 1}
    results.sort(key=lambda c: (kind_rank[c.kind], -c.total, c.category_name))
    return tuple(results)


def summarize(
    owner_id: str,
    period: Optional[Period],
    transaction_rows: Iterable[Row],
    reminder_rows: Iterable[Row],
    category_rows: Iterable[Row] = (),
    config: Optional[AggregationConfig] = None,
    today: Optional[date] = None,
) -> DashboardSummary:
    """Reduce raw gateway rows into a DashboardSummary for owner_id."""
    config = config or AggregationConfig()
    today = today or date.today()
    diagnostics: list[MalformedRecord] = []

    transactions = owned_by(
        (transaction_from_row(row, diagnostics) for row in transaction_rows), owner_id
    )
    reminders = owned_by(
        (reminder_from_row(row, diagnostics) for row in reminder_rows), owner_id
    )
    categories = [category_from_row(row) for row in category_rows]

    if diagnostics:
        logger.info("Tolerated %d malformed field(s)", len(diagnostics))

    total_income, total_expense = compute_totals(transactions)
    return DashboardSummary(
        total_income=total_income,
        total_expense=total_expense,
        recent_transactions=recent_transactions(
            transactions, config.recent_limit, config.transaction_order
        ),
        upcoming_reminders=upcoming_reminders(reminders, today, config.reminder_limit),
        transactions=tuple(transactions),
        reminders=tuple(reminders),
        category_totals=category_totals(transactions, categories),
        diagnostics=tuple(diagnostics),
        period=period,
    )


class AggregationEngine:
    """Builds dashboard summaries from a gateway.

    Every call is a fresh read; nothing is cached between calls.
    """

    def __init__(
        self,
        gateway: Gateway,
        config: Optional[AggregationConfig] = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize aggregation engine.

        Args:
            gateway: Gateway to read records from
            config: Aggregation settings (defaults apply when None)
            today: Callable returning the current date
        """
        self.gateway = gateway
        self.config = config or AggregationConfig()
        self.today = today

    async def fetch_transactions(self, owner_id: str, period: Period) -> QueryResult:
        """Query the owner's transactions within period, most recent first."""
        order_field = self.config.transaction_order.value
        query = (
            self.gateway.query("transactions")
            .eq("owner_id", owner_id)
            .gte("occurred_on", period.start_bound)
            .lte("occurred_on", period.end_bound)
            .order(order_field, ascending=False)
        )
        return await query.execute()

    async def fetch_reminders(self, owner_id: str, period: Period) -> QueryResult:
        """Query the owner's reminders, soonest first.

        The upcoming window has no upper bound, so the query itself is
        limited to reminder_limit. The period window fetches every reminder
        in the period: past ones still count, and a query limit would let
        them crowd out the ones still to come.
        """
        query = self.gateway.query("reminders").eq("owner_id", owner_id)
        if self.config.reminder_window == ReminderWindow.UPCOMING:
            query = (
                query.gte("due_on", self.today().isoformat())
                .order("due_on", ascending=True)
                .limit(self.config.reminder_limit)
            )
        else:
            query = (
                query.gte("due_on", period.start_bound)
                .lte("due_on", period.end_bound)
                .order("due_on", ascending=True)
            )
        return await query.execute()

    async def fetch_categories(self) -> QueryResult:
        """Query all categories for name lookups."""
        return await self.gateway.query("categories").order("name").execute()

    async def build_summary(
        self, owner_id: Optional[str], period: Period
    ) -> DashboardSummary:
        """Fetch and aggregate the dashboard for owner_id and period.

        Raises:
            NoIdentity: If owner_id is empty; no query is issued
            FetchFailed: If any query fails; no partial summary is returned
        """
        if not owner_id:
            raise NoIdentity()

        logger.debug("Fetching dashboard for %s, period %s", owner_id, period)
        transactions, reminders, categories = await asyncio.gather(
            self.fetch_transactions(owner_id, period),
            self.fetch_reminders(owner_id, period),
            self.fetch_categories(),
        )
        for collection, result in (
            ("transactions", transactions),
            ("reminders", reminders),
            ("categories", categories),
        ):
            if not result.ok:
                logger.error("Error fetching %s: %s", collection, result.error)
                raise FetchFailed(result.error, collection=collection)

        logger.debug(
            "Fetched %d transaction(s), %d reminder(s)",
            len(transactions.rows),
            len(reminders.rows),
        )
        return summarize(
            owner_id,
            period,
            transactions.rows,
            reminders.rows,
            categories.rows,
            config=self.config,
            today=self.today(),
        )
