"""Main CLI entry point."""

import logging

import click
from finboard.domain.entities import User
from finboard.domain.session import StaticSessionProvider
from finboard.gateway.factories import create_sqlite_gateway

# Import and register all commands at module level
from finboard.cli.commands import (
    category,
    dashboard,
    profile,
    reminder,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINBOARD_DB_PATH environment variable)",
    envvar="FINBOARD_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    help="ID of the signed-in user (overrides FINBOARD_USER environment variable)",
    envvar="FINBOARD_USER",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str | None, verbose: bool):
    """Finboard - personal finance dashboard.

    Shows income and expense totals, recent transactions and upcoming
    reminders for the signed-in user.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ctx.obj["session"] = StaticSessionProvider(User(id=user_id) if user_id else None)

    # Open the store only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        gateway = create_sqlite_gateway(database_path=db_path)
        gateway.connect()
        ctx.obj["gateway"] = gateway
        ctx.call_on_close(gateway.disconnect)


# Register all commands
dashboard.register_commands(cli)
transaction.register_commands(cli)
reminder.register_commands(cli)
category.register_commands(cli)
profile.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
