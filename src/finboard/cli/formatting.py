"""Text formatting for the presentation layer.

The domain hands over raw Decimals and dates; everything locale or display
related happens here.
"""

from datetime import date
from decimal import Decimal
from typing import Optional


def format_currency(amount: Decimal, symbol: str = "$") -> str:
    """Format an amount like ``$1,234.56`` or ``-$12.00``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_date(value: Optional[date]) -> str:
    """ISO date, or a dash when the date is unknown."""
    return value.isoformat() if value is not None else "-"


def truncate(text: Optional[str], width: int) -> str:
    """Cut text to width characters, marking the cut with an ellipsis."""
    text = text or ""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"
