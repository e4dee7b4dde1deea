"""Transaction commands."""

import asyncio

import click
from finboard.cli.error_handling import handle_domain_error, require_user
from finboard.cli.formatting import format_currency, format_date, truncate
from finboard.cli.period_options import resolve_cli_period
from finboard.domain.entities import TransactionKind
from finboard.domain.errors import DomainError
from finboard.domain.record_service import RecordService
from finboard.utils.amount_parser import parse_amount
from finboard.utils.date_parser import parse_date


@click.group("transaction")
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option(
    "--date",
    "date_str",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in TransactionKind], case_sensitive=False),
    required=True,
    help="Whether the transaction is income or an expense",
)
@click.option("--establishment", help="Where the transaction happened")
@click.option("--details", help="Free-text details")
@click.option("--category", help="Category name")
@click.pass_context
def add_transaction(
    ctx,
    date_str: str,
    amount: str,
    kind: str,
    establishment: str | None,
    details: str | None,
    category: str | None,
):
    """Add a transaction for the signed-in user.

    Examples:
        finboard --user u1 transaction add --date 2024-01-15 --amount 50.00 --kind expense --establishment "Market"
        finboard --user u1 transaction add --date today --amount 3000 --kind income --category Salary
    """
    user = require_user(ctx)
    service = RecordService(ctx.obj["gateway"])

    try:
        occurred_on = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    try:
        txn = asyncio.run(
            service.create_transaction(
                owner_id=user.id,
                occurred_on=occurred_on,
                amount=txn_amount,
                kind=TransactionKind(kind.lower()),
                establishment=establishment,
                details=details,
                category_name=category,
            )
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Added {txn.kind.value} of {format_currency(txn.amount)} on "
        f"{format_date(txn.occurred_on)} (ID: {txn.id})"
    )


@transaction_group.command("list")
@click.option("--month", help="Only show this month (YYYY-MM)")
@click.pass_context
def list_transactions(ctx, month: str | None):
    """List transactions of the signed-in user, most recent first."""
    user = require_user(ctx)
    service = RecordService(ctx.obj["gateway"])

    period = None
    if month:
        period = resolve_cli_period(ctx, month=month, year=None, month_number=None)

    try:
        transactions, diagnostics = asyncio.run(service.list_transactions(user.id, period))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 80)
    click.echo(f"{'ID':<6} {'Date':<12} {'Kind':<8} {'Amount':>14}  {'Establishment':<30}")
    click.echo("-" * 80)
    for txn in transactions:
        kind = txn.kind.value if txn.kind else "?"
        click.echo(
            f"{txn.id:<6} {format_date(txn.occurred_on):<12} {kind:<8} "
            f"{format_currency(txn.amount):>14}  {truncate(txn.establishment, 30):<30}"
        )
    for diagnostic in diagnostics:
        click.echo(f"Warning: {diagnostic}", err=True)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group)
