"""Reminder commands."""

import asyncio
from datetime import date

import click
from finboard.cli.error_handling import handle_domain_error, require_user
from finboard.cli.formatting import format_currency, format_date, truncate
from finboard.domain.errors import DomainError
from finboard.domain.record_service import RecordService
from finboard.utils.amount_parser import parse_amount
from finboard.utils.date_parser import parse_date


@click.group("reminder")
def reminder_group():
    """Manage reminders."""
    pass


@reminder_group.command("add")
@click.argument("description")
@click.option("--due", required=True, help="Due date (YYYY-MM-DD or 'tomorrow', ...)")
@click.option("--amount", default="0", help="Amount due")
@click.pass_context
def add_reminder(ctx, description: str, due: str, amount: str):
    """Add a reminder for the signed-in user."""
    user = require_user(ctx)
    service = RecordService(ctx.obj["gateway"])

    try:
        due_on = parse_date(due)
        reminder_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        reminder = asyncio.run(
            service.create_reminder(user.id, description, due_on, reminder_amount)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Added reminder '{reminder.description}' due {format_date(reminder.due_on)} "
        f"(ID: {reminder.id})"
    )


@reminder_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include reminders already due")
@click.pass_context
def list_reminders(ctx, show_all: bool):
    """List reminders of the signed-in user, soonest first."""
    user = require_user(ctx)
    service = RecordService(ctx.obj["gateway"])

    due_from = None if show_all else date.today()
    try:
        reminders = asyncio.run(service.list_reminders(user.id, due_from))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not reminders:
        click.echo("No reminders found.")
        return

    for reminder in reminders:
        click.echo(
            f"{reminder.id:<6} {format_date(reminder.due_on):<12} "
            f"{truncate(reminder.description, 40):<40} {format_currency(reminder.amount):>14}"
        )


def register_commands(cli):
    """Register reminder commands with main CLI."""
    cli.add_command(reminder_group)
