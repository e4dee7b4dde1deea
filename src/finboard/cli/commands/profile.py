"""Profile commands."""

import asyncio

import click
from finboard.cli.error_handling import handle_domain_error, require_user
from finboard.domain.errors import DomainError
from finboard.domain.profile import ProfileService, initials


@click.group("profile")
def profile_group():
    """Show or create the signed-in user's profile."""
    pass


@profile_group.command("show")
@click.pass_context
def show_profile(ctx):
    """Show the signed-in user's profile."""
    user = require_user(ctx)
    service = ProfileService(ctx.obj["gateway"])

    try:
        profile = asyncio.run(service.get_profile(user))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if profile is None:
        click.echo("No profile found. Run 'profile create' to add one.")
        return

    click.echo(f"[{initials(profile.name)}] {profile.name or ''}")
    if profile.phone:
        click.echo(f"  Phone: {profile.phone}")
    if profile.avatar_url:
        click.echo(f"  Avatar: {profile.avatar_url}")


@profile_group.command("create")
@click.argument("name")
@click.option("--phone", help="Phone number")
@click.option("--avatar-url", help="Avatar image URL")
@click.pass_context
def create_profile(ctx, name: str, phone: str | None, avatar_url: str | None):
    """Create the signed-in user's profile."""
    user = require_user(ctx)
    service = ProfileService(ctx.obj["gateway"])

    try:
        profile = asyncio.run(service.save_profile(user, name, phone, avatar_url))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created profile for '{profile.name}'")


def register_commands(cli):
    """Register profile commands with main CLI."""
    cli.add_command(profile_group)
