"""CLI helpers for period resolution."""

from datetime import date
from typing import Optional

import click

from finboard.domain.errors import ValidationError
from finboard.domain.periods import (
    Period,
    PeriodPolicy,
    current_month,
    month_period,
    month_year_period,
)


def resolve_cli_period(
    ctx,
    *,
    month: Optional[str],
    year: Optional[int],
    month_number: Optional[int],
    policy: PeriodPolicy = PeriodPolicy.CALENDAR_MONTH,
    today: Optional[date] = None,
) -> Period:
    """Resolve the dashboard period from --month or --year/--month-number."""
    if month and (year is not None or month_number is not None):
        click.echo(
            "Error: --month cannot be combined with --year or --month-number.",
            err=True,
        )
        ctx.exit(1)

    if (year is None) != (month_number is None):
        click.echo(
            "Error: --year and --month-number must be given together.",
            err=True,
        )
        ctx.exit(1)

    try:
        if month:
            return month_period(month, policy)
        if year is not None:
            return month_year_period(year, month_number)
        return current_month(today, policy)
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
