"""Category management commands."""

import asyncio

import click
from finboard.cli.error_handling import handle_domain_error
from finboard.domain.errors import DomainError
from finboard.domain.record_service import RecordService


@click.group("category")
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories."""
    service = RecordService(ctx.obj["gateway"])

    try:
        categories = asyncio.run(service.list_categories())
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        click.echo(f"{cat.name} (ID: {cat.id})")


@category_group.command("create")
@click.argument("name")
@click.pass_context
def create_category(ctx, name: str):
    """Create a new category."""
    service = RecordService(ctx.obj["gateway"])

    try:
        category = asyncio.run(service.create_category(name))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created category '{category.name}' (ID: {category.id})")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group)
