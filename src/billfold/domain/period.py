"""Credit card billing cycle calculation."""

from dataclasses import dataclass
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from billfold.domain.errors import ValidationError


@dataclass(frozen=True)
class BillingPeriod:
    """One statement cycle of a credit card.

    Transactions dated from ``period_start`` through ``period_end`` (both
    inclusive) belong to the bill identified by ``reference_month``.
    """

    reference_month: date
    period_start: date
    period_end: date
    closing_date: date
    due_date: date

    def contains(self, day: date) -> bool:
        return self.period_start <= day <= self.period_end


def _validate_day(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or not 1 <= value <= 31:
        raise ValidationError(f"{name} must be between 1 and 31, got {value!r}")


def day_in_month(month: date, day: int) -> date:
    """Return ``day`` of the month containing ``month``, clamped to its last day."""
    return month.replace(day=1) + relativedelta(day=day)


def compute_billing_period(reference_date: date, closing_day: int, due_day: int) -> BillingPeriod:
    """Compute the billing cycle that closes in the month of ``reference_date``.

    The bill closes on ``closing_day`` of the reference month and is due on
    ``due_day`` of that same month. Days past the end of a short month are
    clamped to its last day.

    Args:
        reference_date: Any day in the reference month
        closing_day: Card closing day (1-31)
        due_day: Card due day (1-31)

    Returns:
        BillingPeriod for the reference month

    Raises:
        ValidationError: If closing_day or due_day is outside 1-31
    """
    _validate_day("closing_day", closing_day)
    _validate_day("due_day", due_day)

    reference_month = reference_date.replace(day=1)
    closing_date = day_in_month(reference_month, closing_day)
    previous_closing = day_in_month(reference_month - relativedelta(months=1), closing_day)

    return BillingPeriod(
        reference_month=reference_month,
        period_start=previous_closing + timedelta(days=1),
        period_end=closing_date,
        closing_date=closing_date,
        due_date=day_in_month(reference_month, due_day),
    )


def billing_period_for(card, reference_date: date) -> BillingPeriod:
    """Compute the billing period of ``card`` for the month of ``reference_date``."""
    return compute_billing_period(reference_date, card.closing_day, card.due_day)


def month_range(first_month: date, last_month: date) -> list[date]:
    """List first-of-month dates from ``first_month`` through ``last_month``."""
    current = first_month.replace(day=1)
    last = last_month.replace(day=1)
    months = []
    while current <= last:
        months.append(current)
        current = current + relativedelta(months=1)
    return months
