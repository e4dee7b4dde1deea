"""Utility functions for finboard."""

from finboard.utils.date_parser import parse_date, coerce_date, coerce_datetime
from finboard.utils.amount_parser import parse_amount, coerce_amount

__all__ = ["parse_date", "coerce_date", "coerce_datetime", "parse_amount", "coerce_amount"]
