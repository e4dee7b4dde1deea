"""CLI error handling helpers."""

import click

from finboard.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def require_user(ctx: click.Context):
    """Return the signed-in user or exit with a hint."""
    user = ctx.obj["session"].current_user()
    if user is None:
        click.echo("Error: No user signed in. Pass --user or set FINBOARD_USER.", err=True)
        ctx.exit(1)
    return user
