"""Tests for billing period calculation."""

from datetime import date

import pytest

from billfold.domain.errors import ValidationError
from billfold.domain.period import compute_billing_period, day_in_month, month_range


def test_period_for_february():
    period = compute_billing_period(date(2026, 2, 1), closing_day=10, due_day=17)

    assert period.reference_month == date(2026, 2, 1)
    assert period.period_start == date(2026, 1, 11)
    assert period.period_end == date(2026, 2, 10)
    assert period.closing_date == date(2026, 2, 10)
    assert period.due_date == date(2026, 2, 17)


def test_any_day_of_the_month_selects_the_same_period():
    first = compute_billing_period(date(2026, 2, 1), 10, 17)
    last = compute_billing_period(date(2026, 2, 28), 10, 17)
    assert first == last


def test_period_bounds_are_inclusive():
    period = compute_billing_period(date(2026, 2, 1), 10, 17)
    assert period.contains(date(2026, 1, 11))
    assert period.contains(date(2026, 2, 10))
    assert not period.contains(date(2026, 1, 10))
    assert not period.contains(date(2026, 2, 11))


def test_consecutive_periods_do_not_overlap():
    january = compute_billing_period(date(2026, 1, 1), 10, 17)
    february = compute_billing_period(date(2026, 2, 1), 10, 17)
    assert (february.period_start - january.period_end).days == 1


def test_period_across_year_boundary():
    period = compute_billing_period(date(2026, 1, 15), 10, 17)
    assert period.period_start == date(2025, 12, 11)
    assert period.period_end == date(2026, 1, 10)


def test_closing_day_clamped_in_short_month():
    period = compute_billing_period(date(2026, 2, 1), closing_day=31, due_day=31)
    assert period.closing_date == date(2026, 2, 28)
    assert period.due_date == date(2026, 2, 28)
    assert period.period_start == date(2026, 2, 1)


def test_closing_day_clamped_in_previous_month():
    period = compute_billing_period(date(2026, 3, 1), closing_day=30, due_day=5)
    assert period.period_start == date(2026, 3, 1)
    assert period.period_end == date(2026, 3, 30)


def test_leap_year_february():
    period = compute_billing_period(date(2028, 3, 1), closing_day=29, due_day=10)
    assert period.period_start == date(2028, 3, 1)
    assert compute_billing_period(date(2028, 2, 1), 29, 10).closing_date == date(2028, 2, 29)


@pytest.mark.parametrize("closing_day,due_day", [(0, 10), (32, 10), (10, 0), (10, 32)])
def test_days_out_of_range_rejected(closing_day, due_day):
    with pytest.raises(ValidationError):
        compute_billing_period(date(2026, 2, 1), closing_day, due_day)


def test_day_in_month():
    assert day_in_month(date(2026, 4, 20), 31) == date(2026, 4, 30)
    assert day_in_month(date(2026, 4, 20), 5) == date(2026, 4, 5)


def test_month_range():
    assert month_range(date(2025, 11, 5), date(2026, 2, 20)) == [
        date(2025, 11, 1),
        date(2025, 12, 1),
        date(2026, 1, 1),
        date(2026, 2, 1),
    ]
    assert month_range(date(2026, 3, 1), date(2026, 2, 1)) == []
