"""Mapper functions to convert SQLAlchemy models into wire rows.

Rows leave the gateway in the shape a JSON query API would return them:
dates and timestamps as ISO text, everything else as stored.
"""

from datetime import date, datetime
from typing import Any

from finboard.gateway.base import Row
from finboard.gateway.models import Base


def _wire_value(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def model_to_row(instance: Base) -> Row:
    """Convert any finboard ORM instance into a wire row."""
    return {
        column.name: _wire_value(getattr(instance, column.name))
        for column in instance.__table__.columns
    }
