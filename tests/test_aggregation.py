"""Tests for dashboard aggregation."""

import asyncio
from datetime import date, datetime, timedelta, UTC
from decimal import Decimal

import pytest

from finboard.config import AggregationConfig, ReminderWindow, TransactionOrder
from finboard.domain.aggregation import (
    AggregationEngine,
    category_totals,
    compute_totals,
    owned_by,
    recent_transactions,
    summarize,
    upcoming_reminders,
)
from finboard.domain.entities import (
    Category,
    DashboardSummary,
    Reminder,
    Transaction,
    TransactionKind,
)
from finboard.domain.errors import FetchFailed, NoIdentity
from finboard.domain.periods import PeriodPolicy, month_period
from finboard.gateway.base import FilterOp, QuerySpec
from finboard.gateway.memory import MemoryGateway


def _txn(id, day, amount, kind=TransactionKind.EXPENSE, owner="alice", category_id=None):
    return Transaction(
        id=id,
        occurred_on=day,
        amount=Decimal(amount),
        kind=kind,
        owner_id=owner,
        category_id=category_id,
    )


def _txn_row(id, day, amount, kind="expense", owner="alice", **extra):
    row = {
        "id": id,
        "occurred_on": day,
        "amount": amount,
        "kind": kind,
        "owner_id": owner,
    }
    row.update(extra)
    return row


def _reminder_row(id, day, description="Bill", amount="10.00", owner="alice"):
    return {
        "id": id,
        "due_on": day,
        "description": description,
        "amount": amount,
        "owner_id": owner,
    }


class LeakyGateway(MemoryGateway):
    """Gateway whose owner filter is bypassed, like a misconfigured store."""

    async def execute(self, spec: QuerySpec):
        filters = tuple(f for f in spec.filters if f.field != "owner_id")
        return await super().execute(QuerySpec(spec.collection, filters, spec.orderings, spec.limit))


# Totals


def test_totals_of_empty_set_are_zero():
    summary = summarize("alice", None, [], [])

    assert summary.total_income == Decimal("0")
    assert summary.total_expense == Decimal("0")
    assert summary.balance == Decimal("0")
    assert summary == DashboardSummary.empty()


def test_totals_partition_by_kind():
    transactions = [
        _txn(1, date(2024, 6, 1), "3000.00", TransactionKind.INCOME),
        _txn(2, date(2024, 6, 2), "120.50"),
        _txn(3, date(2024, 6, 3), "79.50"),
        _txn(4, date(2024, 6, 4), "250.00", TransactionKind.INCOME),
    ]

    income, expense = compute_totals(transactions)

    assert income == Decimal("3250.00")
    assert expense == Decimal("200.00")


def test_balance_is_difference_of_totals():
    summary = summarize(
        "alice",
        None,
        [
            _txn_row(1, "2024-06-01", "100.00", "income"),
            _txn_row(2, "2024-06-02", "150.25", "expense"),
        ],
        [],
    )

    assert summary.balance == summary.total_income - summary.total_expense
    assert summary.balance == Decimal("-50.25")


def test_unknown_kind_counts_towards_neither_total():
    summary = summarize(
        "alice",
        None,
        [_txn_row(1, "2024-06-01", "100", "income"), _txn_row(2, "2024-06-01", "40", "transfer")],
        [],
    )

    assert summary.total_income == Decimal("100")
    assert summary.total_expense == Decimal("0")
    assert summary.transaction_count == 2
    assert len(summary.diagnostics) == 1


# Zero-coercion


@pytest.mark.parametrize("bad_amount", [None, "abc", "", float("nan"), True, {"v": 1}])
def test_malformed_amount_contributes_zero(bad_amount):
    summary = summarize(
        "alice",
        None,
        [
            _txn_row(1, "2024-06-01", "10.00", "expense"),
            _txn_row(2, "2024-06-02", bad_amount, "expense"),
        ],
        [],
    )

    assert summary.total_expense == Decimal("10.00")
    assert any(d.field == "amount" for d in summary.diagnostics)


@pytest.mark.parametrize("huge_amount", ["1e1000000", Decimal("1E+400"), 10**40])
def test_out_of_range_amount_contributes_zero(huge_amount):
    summary = summarize(
        "alice",
        None,
        [
            _txn_row(1, "2024-06-01", "10.00", "income"),
            _txn_row(2, "2024-06-02", huge_amount, "income"),
        ],
        [],
    )

    assert summary.total_income == Decimal("10.00")
    assert [d.field for d in summary.diagnostics] == ["amount"]


# Owner isolation


def test_owned_by_drops_foreign_records():
    records = [_txn(1, date(2024, 6, 1), "1"), _txn(2, date(2024, 6, 1), "2", owner="bob")]

    assert [r.id for r in owned_by(records, "alice")] == [1]


def test_summary_ignores_foreign_rows_even_if_returned():
    summary = summarize(
        "alice",
        None,
        [
            _txn_row(1, "2024-06-01", "100", "income"),
            _txn_row(2, "2024-06-01", "5000", "income", owner="bob"),
            _txn_row(3, "2024-06-02", "30", "expense", owner="bob"),
        ],
        [_reminder_row(1, "2024-06-20", owner="bob")],
        today=date(2024, 6, 15),
    )

    assert summary.total_income == Decimal("100")
    assert summary.total_expense == Decimal("0")
    assert all(t.owner_id == "alice" for t in summary.transactions)
    assert summary.reminders == ()
    assert summary.upcoming_reminders == ()


def test_engine_isolates_owner_when_gateway_filter_is_bypassed(today):
    gateway = LeakyGateway(
        {
            "transactions": [
                _txn_row(1, "2024-06-01", "10", "expense"),
                _txn_row(2, "2024-06-02", "99", "expense", owner="bob"),
            ],
            "reminders": [_reminder_row(1, "2024-06-20", owner="bob")],
        }
    )
    engine = AggregationEngine(gateway, today=lambda: today)

    summary = asyncio.run(engine.build_summary("alice", month_period("2024-06")))

    assert summary.total_expense == Decimal("10")
    assert [t.id for t in summary.recent_transactions] == [1]
    assert summary.upcoming_reminders == ()


# Truncation


def test_recent_transactions_is_prefix_of_date_desc_order():
    start = date(2024, 6, 1)
    transactions = [_txn(i, start + timedelta(days=(i * 7) % 11), "1") for i in range(1, 9)]

    recent = recent_transactions(transactions, 5)
    expected = sorted(transactions, key=lambda t: t.occurred_on, reverse=True)[:5]

    assert len(recent) == 5
    assert list(recent) == expected


def test_recent_transactions_shorter_than_limit():
    transactions = [_txn(1, date(2024, 6, 1), "1"), _txn(2, date(2024, 6, 3), "1")]

    assert [t.id for t in recent_transactions(transactions, 5)] == [2, 1]


def test_recent_transactions_skip_undated_and_keep_tie_order():
    transactions = [
        _txn(1, date(2024, 6, 3), "1"),
        _txn(2, None, "1"),
        _txn(3, date(2024, 6, 3), "1"),
        _txn(4, date(2024, 6, 5), "1"),
    ]

    assert [t.id for t in recent_transactions(transactions, 5)] == [4, 1, 3]


def test_recent_transactions_by_creation_time():
    base = datetime(2024, 6, 1, tzinfo=UTC)
    transactions = [
        Transaction(1, date(2024, 6, 9), Decimal("1"), TransactionKind.EXPENSE, "a", created_at=base),
        Transaction(2, date(2024, 6, 1), Decimal("1"), TransactionKind.EXPENSE, "a", created_at=base + timedelta(hours=2)),
        Transaction(3, date(2024, 6, 5), Decimal("1"), TransactionKind.EXPENSE, "a"),
    ]

    recent = recent_transactions(transactions, 5, TransactionOrder.CREATED_AT)

    assert [t.id for t in recent] == [2, 1]


def test_upcoming_reminders_sorted_and_truncated():
    today = date(2024, 6, 15)
    reminders = [
        Reminder(i, f"r{i}", today + timedelta(days=offset), Decimal("1"), "alice")
        for i, offset in enumerate([9, -3, 0, 4, 1, 12, -1, 7, 2], start=1)
    ]

    upcoming = upcoming_reminders(reminders, today, 5)

    assert [r.due_on - today for r in upcoming] == [timedelta(days=d) for d in (0, 1, 2, 4, 7)]


def test_upcoming_reminders_fewer_than_limit():
    today = date(2024, 6, 15)
    reminders = [
        Reminder(1, "past", date(2024, 6, 1), Decimal("1"), "alice"),
        Reminder(2, "soon", date(2024, 6, 16), Decimal("1"), "alice"),
        Reminder(3, "undated", None, Decimal("1"), "alice"),
    ]

    assert [r.id for r in upcoming_reminders(reminders, today, 5)] == [2]


def test_category_totals_group_by_category_and_kind():
    transactions = [
        _txn(1, date(2024, 6, 1), "40", category_id=1),
        _txn(2, date(2024, 6, 2), "60", category_id=1),
        _txn(3, date(2024, 6, 3), "15", category_id=None),
        _txn(4, date(2024, 6, 4), "3000", TransactionKind.INCOME, category_id=2),
        _txn(5, date(2024, 6, 5), "5", category_id=99),
    ]
    categories = [Category(1, "Groceries"), Category(2, "Salary")]

    totals = category_totals(transactions, categories)

    assert [(t.category_name, t.kind, t.total, t.count) for t in totals] == [
        ("Salary", TransactionKind.INCOME, Decimal("3000"), 1),
        ("Groceries", TransactionKind.EXPENSE, Decimal("100"), 2),
        ("Uncategorized", TransactionKind.EXPENSE, Decimal("15"), 1),
        ("Unknown", TransactionKind.EXPENSE, Decimal("5"), 1),
    ]


# Engine


@pytest.fixture
def june_gateway():
    return MemoryGateway(
        {
            "transactions": [
                _txn_row(1, "2024-05-31", "999", "expense"),
                _txn_row(2, "2024-06-01", "3000", "income", category_id=2),
                _txn_row(3, "2024-06-10", "45.90", "expense", category_id=1),
                _txn_row(4, "2024-06-30", "20.10", "expense", category_id=1),
                _txn_row(5, "2024-07-01", "999", "expense"),
            ],
            "reminders": [
                _reminder_row(1, "2024-06-05", "Water"),
                _reminder_row(2, "2024-06-25", "Rent"),
                _reminder_row(3, "2024-06-16", "Phone"),
                _reminder_row(4, "2024-08-01", "Insurance"),
            ],
            "categories": [{"id": 1, "name": "Groceries"}, {"id": 2, "name": "Salary"}],
        }
    )


def test_engine_builds_summary_for_period(june_gateway, today):
    engine = AggregationEngine(june_gateway, today=lambda: today)
    period = month_period("2024-06")

    summary = asyncio.run(engine.build_summary("alice", period))

    assert summary.total_income == Decimal("3000")
    assert summary.total_expense == Decimal("66.00")
    assert summary.balance == Decimal("2934.00")
    assert [t.id for t in summary.recent_transactions] == [4, 3, 2]
    assert [r.description for r in summary.upcoming_reminders] == ["Phone", "Rent"]
    assert summary.reminder_count == 3
    assert summary.period == period
    assert {c.category_name for c in summary.category_totals} == {"Groceries", "Salary"}


def test_engine_issues_scoped_queries(june_gateway, today):
    engine = AggregationEngine(june_gateway, today=lambda: today)

    asyncio.run(engine.build_summary("alice", month_period("2024-06")))

    by_collection = {spec.collection: spec for spec in june_gateway.executed}
    txn_spec = by_collection["transactions"]
    assert ("owner_id", FilterOp.EQ, "alice") in [(f.field, f.op, f.value) for f in txn_spec.filters]
    assert ("occurred_on", FilterOp.LTE, "2024-06-30") in [
        (f.field, f.op, f.value) for f in txn_spec.filters
    ]
    assert txn_spec.orderings[0].field == "occurred_on"
    assert txn_spec.orderings[0].ascending is False
    assert by_collection["reminders"].orderings[0].ascending is True
    assert by_collection["reminders"].limit is None


def test_past_reminders_in_period_do_not_hide_upcoming_ones(today):
    reminders = [_reminder_row(i, f"2024-06-0{i}", f"Past {i}") for i in range(1, 7)]
    reminders.append(_reminder_row(7, "2024-06-20", "Insurance"))
    gateway = MemoryGateway({"reminders": reminders})
    engine = AggregationEngine(gateway, today=lambda: today)

    summary = asyncio.run(engine.build_summary("alice", month_period("2024-06")))

    assert [r.description for r in summary.upcoming_reminders] == ["Insurance"]
    assert summary.reminder_count == 7


def test_engine_upcoming_window_has_no_upper_bound(june_gateway, today):
    config = AggregationConfig(reminder_window=ReminderWindow.UPCOMING, reminder_limit=2)
    engine = AggregationEngine(june_gateway, config, today=lambda: today)

    summary = asyncio.run(engine.build_summary("alice", month_period("2024-06")))

    reminder_spec = next(s for s in june_gateway.executed if s.collection == "reminders")
    assert reminder_spec.limit == 2
    assert [f.field for f in reminder_spec.filters if f.op == FilterOp.LTE] == []
    assert [r.description for r in summary.upcoming_reminders] == ["Phone", "Rent"]


def test_engine_respects_recent_limit(june_gateway, today):
    engine = AggregationEngine(june_gateway, AggregationConfig(recent_limit=1), today=lambda: today)

    summary = asyncio.run(engine.build_summary("alice", month_period("2024-06")))

    assert [t.id for t in summary.recent_transactions] == [4]
    assert summary.transaction_count == 3


def test_engine_includes_april_30_with_calendar_month(today):
    gateway = MemoryGateway(
        {"transactions": [_txn_row(1, "2024-04-30", "12.00"), _txn_row(2, "2024-04-01", "8.00")]}
    )
    engine = AggregationEngine(gateway, today=lambda: today)

    summary = asyncio.run(engine.build_summary("alice", month_period("2024-04")))

    assert summary.total_expense == Decimal("20.00")
    assert summary.recent_transactions[0].occurred_on == date(2024, 4, 30)


def test_june_on_lexical_store_matches_in_both_policies(today):
    rows = [_txn_row(1, "2024-06-30", "30.00"), _txn_row(2, "2024-07-01", "1.00")]
    engine = AggregationEngine(MemoryGateway({"transactions": rows}), today=lambda: today)

    clamped = asyncio.run(engine.build_summary("alice", month_period("2024-06")))
    legacy = asyncio.run(
        engine.build_summary("alice", month_period("2024-06", PeriodPolicy.LEGACY_LEXICAL))
    )

    assert clamped.total_expense == Decimal("30.00")
    assert legacy.total_expense == Decimal("30.00")


def test_june_on_date_typed_store_rejects_legacy_bound(temp_gateway, today):
    asyncio.run(temp_gateway.insert("transactions", _txn_row(None, "2024-06-30", "30.00")))
    engine = AggregationEngine(temp_gateway, today=lambda: today)

    clamped = asyncio.run(engine.build_summary("alice", month_period("2024-06")))
    assert clamped.total_expense == Decimal("30.00")

    with pytest.raises(FetchFailed) as excinfo:
        asyncio.run(
            engine.build_summary("alice", month_period("2024-06", PeriodPolicy.LEGACY_LEXICAL))
        )
    assert "2024-06-31" in str(excinfo.value)


def test_engine_without_owner_issues_no_query(june_gateway):
    engine = AggregationEngine(june_gateway)

    with pytest.raises(NoIdentity):
        asyncio.run(engine.build_summary(None, month_period("2024-06")))

    assert june_gateway.executed == []


@pytest.mark.parametrize("collection", ["transactions", "reminders", "categories"])
def test_engine_raises_fetch_failed_on_any_query_error(june_gateway, collection):
    june_gateway.fail(collection, "permission denied for table")
    engine = AggregationEngine(june_gateway)

    with pytest.raises(FetchFailed) as excinfo:
        asyncio.run(engine.build_summary("alice", month_period("2024-06")))

    assert excinfo.value.message == "permission denied for table"
    assert excinfo.value.collection == collection


def test_engine_reads_fresh_data_on_every_call(june_gateway, today):
    engine = AggregationEngine(june_gateway, today=lambda: today)
    period = month_period("2024-06")

    first = asyncio.run(engine.build_summary("alice", period))
    asyncio.run(june_gateway.insert("transactions", _txn_row(None, "2024-06-11", "4.00")))
    second = asyncio.run(engine.build_summary("alice", period))

    assert second.total_expense == first.total_expense + Decimal("4.00")
