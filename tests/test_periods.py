"""Tests for period selection policies."""

from datetime import date

import pytest

from finboard.domain.errors import ValidationError
from finboard.domain.periods import (
    Period,
    PeriodPolicy,
    current_month,
    month_period,
    month_year_period,
    parse_month,
)


def test_calendar_month_clamps_to_last_day_of_april():
    period = month_period("2024-04")

    assert period.start_bound == "2024-04-01"
    assert period.end_bound == "2024-04-30"
    assert period.contains(date(2024, 4, 30))
    assert not period.contains(date(2024, 5, 1))


def test_calendar_month_handles_leap_february():
    assert month_period("2024-02").end_bound == "2024-02-29"
    assert month_period("2023-02").end_bound == "2023-02-28"


def test_legacy_lexical_uses_literal_day_31():
    period = month_period("2024-06", PeriodPolicy.LEGACY_LEXICAL)

    assert period.start_bound == "2024-06-01"
    assert period.end_bound == "2024-06-31"
    # Not a real calendar day
    assert period.end is None


def test_june_bounds_diverge_between_policies():
    clamped = month_period("2024-06")
    legacy = month_period("2024-06", PeriodPolicy.LEGACY_LEXICAL)

    assert clamped.end == date(2024, 6, 30)
    assert legacy.end is None
    assert clamped.end_bound != legacy.end_bound
    # Compared as text, both still cover June 30 and exclude July 1
    assert clamped.contains(date(2024, 6, 30))
    assert legacy.contains(date(2024, 6, 30))
    assert not legacy.contains(date(2024, 7, 1))


def test_policies_agree_on_31_day_months():
    clamped = month_period("2024-07")
    legacy = month_period("2024-07", PeriodPolicy.LEGACY_LEXICAL)

    assert clamped.end_bound == legacy.end_bound == "2024-07-31"


def test_month_year_selector_ends_on_last_day():
    period = month_year_period(2024, 2)

    assert period.start == date(2024, 2, 1)
    assert period.end == date(2024, 2, 29)
    assert period.policy == PeriodPolicy.MONTH_YEAR


def test_month_year_selector_december_rolls_over_year():
    period = month_year_period(2023, 12)

    assert period.end_bound == "2023-12-31"


def test_month_year_selector_rejects_bad_month():
    with pytest.raises(ValidationError):
        month_year_period(2024, 13)


@pytest.mark.parametrize("value", ["2024-13", "2024-1", "June", "", "2024-00"])
def test_parse_month_rejects_invalid(value):
    with pytest.raises(ValidationError):
        parse_month(value)


def test_parse_month():
    assert parse_month(" 2024-06 ") == (2024, 6)


def test_current_month_uses_today():
    period = current_month(date(2024, 9, 17))

    assert period == Period("2024-09-01", "2024-09-30", PeriodPolicy.CALENDAR_MONTH)
    assert period.label == "2024-09"
    assert str(period) == "2024-09-01..2024-09-30"
