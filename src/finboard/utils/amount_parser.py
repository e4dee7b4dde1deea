"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

# Largest accepted order of magnitude; beyond it sums overflow the context
MAX_AMOUNT_EXPONENT = 15


def _check_amount(amount: Decimal, text: object) -> Decimal:
    if not amount.is_finite():
        raise ValueError(f"Amount '{text}' is not a finite number")
    if amount and amount.adjusted() > MAX_AMOUNT_EXPONENT:
        raise ValueError(f"Amount '{text}' is out of range")
    return amount


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "R$ 123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is out of range
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and thousands separators
    amount_str = re.sub(r"R?[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    _check_amount(amount, amount_str)
    return -amount if is_negative else amount


def coerce_amount(value: object) -> Decimal:
    """Convert a raw column value into a Decimal.

    Accepts Decimals, ints, floats and amount strings.

    Raises:
        ValueError: If the value is missing, boolean, non-numeric, not finite
            or out of range
    """
    if value is None:
        raise ValueError("Missing amount")
    if isinstance(value, bool):
        raise ValueError("Boolean is not an amount")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 becomes Decimal("0.1")
        amount = Decimal(str(value))
    elif isinstance(value, str):
        return parse_amount(value)
    else:
        raise ValueError(f"Unsupported amount type {type(value).__name__}")

    return _check_amount(amount, value)
