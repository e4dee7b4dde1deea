"""Aggregation settings.

Defaults can be overridden through ``FINBOARD_*`` environment variables; the
CLI exposes the same settings as options.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from finboard.domain.errors import ValidationError, invalid_limit
from finboard.domain.periods import PeriodPolicy


class ReminderWindow(str, Enum):
    """Which reminders are fetched for the dashboard."""

    # Reminders due within the selected period
    PERIOD = "period"
    # Reminders due today or later, no upper bound
    UPCOMING = "upcoming"


class TransactionOrder(str, Enum):
    """Field transactions are ordered by, most recent first."""

    OCCURRED_ON = "occurred_on"
    CREATED_AT = "created_at"


DEFAULT_RECENT_LIMIT = 5
DEFAULT_REMINDER_LIMIT = 5


def _enum_value(enum_cls, raw: str, name: str):
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"{name} must be one of: {choices} (got '{raw}')")


def _limit_value(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(invalid_limit(name, raw))


@dataclass(frozen=True)
class AggregationConfig:
    """Settings for one dashboard aggregation."""

    recent_limit: int = DEFAULT_RECENT_LIMIT
    reminder_limit: int = DEFAULT_REMINDER_LIMIT
    period_policy: PeriodPolicy = PeriodPolicy.CALENDAR_MONTH
    reminder_window: ReminderWindow = ReminderWindow.PERIOD
    transaction_order: TransactionOrder = TransactionOrder.OCCURRED_ON

    def __post_init__(self):
        for name in ("recent_limit", "reminder_limit"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValidationError(invalid_limit(name, value))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AggregationConfig":
        """Build a config from FINBOARD_* environment variables.

        Recognized variables: FINBOARD_RECENT_LIMIT, FINBOARD_REMINDER_LIMIT,
        FINBOARD_PERIOD_POLICY, FINBOARD_REMINDER_WINDOW and
        FINBOARD_TRANSACTION_ORDER. Unset variables keep their defaults.

        Raises:
            ValidationError: If a variable holds an invalid value
        """
        environ = os.environ if environ is None else environ
        values = {}
        if environ.get("FINBOARD_RECENT_LIMIT"):
            values["recent_limit"] = _limit_value(
                environ["FINBOARD_RECENT_LIMIT"], "recent_limit"
            )
        if environ.get("FINBOARD_REMINDER_LIMIT"):
            values["reminder_limit"] = _limit_value(
                environ["FINBOARD_REMINDER_LIMIT"], "reminder_limit"
            )
        if environ.get("FINBOARD_PERIOD_POLICY"):
            values["period_policy"] = _enum_value(
                PeriodPolicy, environ["FINBOARD_PERIOD_POLICY"], "period_policy"
            )
        if environ.get("FINBOARD_REMINDER_WINDOW"):
            values["reminder_window"] = _enum_value(
                ReminderWindow, environ["FINBOARD_REMINDER_WINDOW"], "reminder_window"
            )
        if environ.get("FINBOARD_TRANSACTION_ORDER"):
            values["transaction_order"] = _enum_value(
                TransactionOrder, environ["FINBOARD_TRANSACTION_ORDER"], "transaction_order"
            )
        return cls(**values)
