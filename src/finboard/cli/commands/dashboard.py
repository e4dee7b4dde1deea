"""Dashboard command."""

import asyncio
from dataclasses import replace

import click
from finboard.cli.formatting import format_currency, format_date, truncate
from finboard.cli.period_options import resolve_cli_period
from finboard.config import AggregationConfig, ReminderWindow, TransactionOrder
from finboard.domain.aggregation import AggregationEngine
from finboard.domain.dashboard import DashboardController, DashboardState, LoadStatus
from finboard.domain.entities import DashboardSummary, TransactionKind
from finboard.domain.errors import ValidationError
from finboard.domain.periods import PeriodPolicy


def _display_summary(summary: DashboardSummary, category_names: dict) -> None:
    """Print totals, recent transactions, upcoming reminders and categories."""
    click.echo("-" * 60)
    click.echo(f"{'Income':<20} {format_currency(summary.total_income):>20}")
    click.echo(f"{'Expenses':<20} {format_currency(summary.total_expense):>20}")
    click.echo(f"{'Balance':<20} {format_currency(summary.balance):>20}")
    click.echo("-" * 60)
    click.echo(
        f"{summary.transaction_count} transaction(s), {summary.reminder_count} reminder(s)"
    )

    click.echo("\nRecent transactions:")
    if not summary.recent_transactions:
        click.echo("  No transactions found.")
    for txn in summary.recent_transactions:
        kind = txn.kind.value if txn.kind else "?"
        category = category_names.get(txn.category_id, "")
        click.echo(
            f"  {format_date(txn.occurred_on):<12} {kind:<8} "
            f"{format_currency(txn.amount):>14}  {truncate(txn.establishment, 24):<24} {category}"
        )

    click.echo("\nUpcoming reminders:")
    if not summary.upcoming_reminders:
        click.echo("  No upcoming reminders.")
    for reminder in summary.upcoming_reminders:
        click.echo(
            f"  {format_date(reminder.due_on):<12} {truncate(reminder.description, 30):<30} "
            f"{format_currency(reminder.amount):>14}"
        )

    if summary.category_totals:
        click.echo("\nBy category:")
        for total in summary.category_totals:
            label = "+" if total.kind == TransactionKind.INCOME else "-"
            click.echo(
                f"  {label} {truncate(total.category_name, 36):<36} "
                f"{format_currency(total.total):>14}  ({total.count})"
            )


@click.command("dashboard")
@click.option("--month", help="Month to show (YYYY-MM); defaults to the current month")
@click.option("--year", type=int, help="Year of the month selector (use with --month-number)")
@click.option("--month-number", type=click.IntRange(1, 12), help="Month of the selector, 1-12")
@click.option(
    "--legacy-month-bounds",
    is_flag=True,
    help="Use the literal day 31 as the end of --month (compatibility mode)",
)
@click.option("--upcoming", is_flag=True, help="Show all reminders due from today on")
@click.option("--recent-limit", type=int, help="Number of recent transactions to show")
@click.option("--reminder-limit", type=int, help="Number of reminders to show")
@click.option(
    "--order-by",
    type=click.Choice([o.value for o in TransactionOrder]),
    help="Order recent transactions by transaction date or creation time",
)
@click.pass_context
def show_dashboard(
    ctx,
    month: str | None,
    year: int | None,
    month_number: int | None,
    legacy_month_bounds: bool,
    upcoming: bool,
    recent_limit: int | None,
    reminder_limit: int | None,
    order_by: str | None,
):
    """Show the dashboard for a month.

    Examples:
        finboard --user u1 dashboard --month 2024-06
        finboard --user u1 dashboard --year 2024 --month-number 2 --upcoming
    """
    gateway = ctx.obj["gateway"]
    session = ctx.obj["session"]

    try:
        config = AggregationConfig.from_env()
        overrides = {}
        if legacy_month_bounds:
            overrides["period_policy"] = PeriodPolicy.LEGACY_LEXICAL
        if upcoming:
            overrides["reminder_window"] = ReminderWindow.UPCOMING
        if recent_limit is not None:
            overrides["recent_limit"] = recent_limit
        if reminder_limit is not None:
            overrides["reminder_limit"] = reminder_limit
        if order_by is not None:
            overrides["transaction_order"] = TransactionOrder(order_by)
        config = replace(config, **overrides)
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if legacy_month_bounds and not month:
        click.echo("Error: --legacy-month-bounds applies to --month only.", err=True)
        ctx.exit(1)

    period = resolve_cli_period(
        ctx,
        month=month,
        year=year,
        month_number=month_number,
        policy=config.period_policy,
    )

    notifications: list[str] = []
    controller = DashboardController(
        AggregationEngine(gateway, config), session, notify=notifications.append
    )
    state: DashboardState = asyncio.run(controller.refresh(period))

    if state.status == LoadStatus.NO_IDENTITY:
        click.echo("No user signed in.")
        click.echo("Pass --user or set FINBOARD_USER to view your dashboard.")
        return

    for message in notifications:
        click.echo(f"Error loading dashboard: {message}", err=True)
    if state.status == LoadStatus.FAILED:
        ctx.exit(1)

    summary = state.summary
    click.echo(f"\nDashboard {period.label} ({period})")
    names = {c.category_id: c.category_name for c in summary.category_totals}
    _display_summary(summary, names)

    if summary.diagnostics:
        click.echo(
            f"\nWarning: {len(summary.diagnostics)} malformed field(s) were ignored.",
            err=True,
        )


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(show_dashboard)
