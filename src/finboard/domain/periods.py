"""Period selection for dashboard queries.

A period is an inclusive range of calendar days. Bounds are kept as ISO
``YYYY-MM-DD`` text because that is what gets sent to the remote store, and
because the legacy month policy produces an end bound that is not a real day.
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from dateutil.relativedelta import relativedelta

from finboard.domain.errors import ValidationError, invalid_month

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


class PeriodPolicy(str, Enum):
    """How a ``YYYY-MM`` month string is turned into a date range."""

    # First day through the month's real last day.
    CALENDAR_MONTH = "calendar_month"
    # First day through the literal day "31", whatever the month length.
    LEGACY_LEXICAL = "legacy_lexical"
    # Explicit year/month selector: day 0 of the following month.
    MONTH_YEAR = "month_year"


@dataclass(frozen=True)
class Period:
    """Inclusive date range with ISO text bounds."""

    start_bound: str
    end_bound: str
    policy: PeriodPolicy = PeriodPolicy.CALENDAR_MONTH

    @property
    def start(self) -> date:
        return date.fromisoformat(self.start_bound)

    @property
    def end(self) -> Optional[date]:
        """End bound as a date, or None when it names a non-existent day."""
        try:
            return date.fromisoformat(self.end_bound)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return self.start_bound[:7]

    def contains(self, value: date) -> bool:
        """Check membership the way a text-comparing store would."""
        text = value.isoformat()
        return self.start_bound <= text <= self.end_bound

    def __str__(self) -> str:
        return f"{self.start_bound}..{self.end_bound}"


def parse_month(value: str) -> tuple[int, int]:
    """Parse a ``YYYY-MM`` string into ``(year, month)``.

    Raises:
        ValidationError: If the string is not a valid month
    """
    match = _MONTH_RE.match(value.strip())
    if match is None:
        raise ValidationError(invalid_month(value))
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(invalid_month(value))
    return year, month


def month_period(
    value: str, policy: PeriodPolicy = PeriodPolicy.CALENDAR_MONTH
) -> Period:
    """Build the period for a ``YYYY-MM`` month string.

    Args:
        value: Month string, e.g. "2024-04"
        policy: CALENDAR_MONTH clamps to the real last day of the month.
            LEGACY_LEXICAL uses the literal day "31" as the end bound, which
            is not a valid date for 30-day months or February.

    Returns:
        Period covering the month
    """
    year, month = parse_month(value)
    if policy == PeriodPolicy.LEGACY_LEXICAL:
        prefix = f"{year:04d}-{month:02d}"
        return Period(f"{prefix}-01", f"{prefix}-31", policy)
    if policy == PeriodPolicy.MONTH_YEAR:
        return month_year_period(year, month)

    first = date(year, month, 1)
    last = first + relativedelta(day=31)
    return Period(first.isoformat(), last.isoformat(), policy)


def month_year_period(year: int, month: int) -> Period:
    """Build the period for an explicit year and 1-based month selector.

    The end is the day before the first of the following month, i.e. the
    last day of the selected month, whole day included.
    """
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month number {month}: expected 1-12")
    if not 1 <= year < 9999:
        raise ValidationError(f"Invalid year {year}")
    first = date(year, month, 1)
    last = first + relativedelta(months=1) - timedelta(days=1)
    return Period(first.isoformat(), last.isoformat(), PeriodPolicy.MONTH_YEAR)


def current_month(
    today: Optional[date] = None, policy: PeriodPolicy = PeriodPolicy.CALENDAR_MONTH
) -> Period:
    """Period for the month containing ``today``."""
    today = today or date.today()
    if policy == PeriodPolicy.MONTH_YEAR:
        return month_year_period(today.year, today.month)
    return month_period(today.strftime("%Y-%m"), policy)
