"""Tests for aggregation settings."""

import pytest

from finboard.config import (
    DEFAULT_RECENT_LIMIT,
    DEFAULT_REMINDER_LIMIT,
    AggregationConfig,
    ReminderWindow,
    TransactionOrder,
)
from finboard.domain.errors import ValidationError
from finboard.domain.periods import PeriodPolicy


def test_defaults():
    config = AggregationConfig()

    assert config.recent_limit == DEFAULT_RECENT_LIMIT == 5
    assert config.reminder_limit == DEFAULT_REMINDER_LIMIT == 5
    assert config.period_policy == PeriodPolicy.CALENDAR_MONTH
    assert config.reminder_window == ReminderWindow.PERIOD
    assert config.transaction_order == TransactionOrder.OCCURRED_ON


def test_from_empty_environment_uses_defaults():
    assert AggregationConfig.from_env({}) == AggregationConfig()


def test_from_environment():
    config = AggregationConfig.from_env(
        {
            "FINBOARD_RECENT_LIMIT": "10",
            "FINBOARD_REMINDER_LIMIT": "3",
            "FINBOARD_PERIOD_POLICY": "legacy_lexical",
            "FINBOARD_REMINDER_WINDOW": "Upcoming",
            "FINBOARD_TRANSACTION_ORDER": "created_at",
        }
    )

    assert config.recent_limit == 10
    assert config.reminder_limit == 3
    assert config.period_policy == PeriodPolicy.LEGACY_LEXICAL
    assert config.reminder_window == ReminderWindow.UPCOMING
    assert config.transaction_order == TransactionOrder.CREATED_AT


@pytest.mark.parametrize(
    "environ",
    [
        {"FINBOARD_RECENT_LIMIT": "many"},
        {"FINBOARD_REMINDER_LIMIT": "0"},
        {"FINBOARD_REMINDER_WINDOW": "forever"},
        {"FINBOARD_PERIOD_POLICY": "fiscal"},
    ],
)
def test_invalid_environment_values(environ):
    with pytest.raises(ValidationError):
        AggregationConfig.from_env(environ)


@pytest.mark.parametrize("limit", [0, -1, True, 2.5])
def test_limits_must_be_positive_integers(limit):
    with pytest.raises(ValidationError, match="recent_limit"):
        AggregationConfig(recent_limit=limit)
