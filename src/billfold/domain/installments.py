"""Installment plan generation for split credit card purchases."""

from dataclasses import replace
from datetime import date

from dateutil.relativedelta import relativedelta

from billfold.domain.entities import Transaction, TransactionStatus, new_id
from billfold.domain.errors import ValidationError
from billfold.domain.money import Money

MAX_INSTALLMENTS = 100


def installment_amount(total: Money, count: int) -> Money:
    """Amount charged per installment: ``total / count`` rounded to a minor unit."""
    return total / count


def installment_date(first_date: date, number: int) -> date:
    """Date of installment ``number`` (1-based), same day-of-month as the first.

    Months shorter than the first date's day are clamped to their last day.
    """
    return first_date + relativedelta(months=number - 1)


def plan_installments(
    template: Transaction, total: Money, count: int, first_date: date
) -> list[Transaction]:
    """Expand a purchase into ``count`` monthly PENDING installments.

    Each installment amount is rounded independently, so the sum may differ
    from ``total`` by up to ``count // 2`` minor units. The first record's id
    is generated up front and becomes the parent id of the whole series.

    Args:
        template: Transaction carrying the shared fields (owner, description,
            direction, funding method, card, category)
        total: Full purchase amount
        count: Number of installments (1-100)
        first_date: Date of the first installment

    Returns:
        List of installment transactions ordered by installment number

    Raises:
        ValidationError: If count is out of range
    """
    if count < 1 or count > MAX_INSTALLMENTS:
        raise ValidationError(f"Installments must be between 1 and {MAX_INSTALLMENTS}, got {count}")

    amount = installment_amount(total, count)
    parent_id = new_id()

    installments = []
    for number in range(1, count + 1):
        installments.append(
            replace(
                template,
                id=parent_id if number == 1 else new_id(),
                description=f"{template.description} ({number}/{count})",
                amount=amount,
                date=installment_date(first_date, number),
                status=TransactionStatus.PENDING,
                is_installment=True,
                installment_number=number,
                total_installments=count,
                parent_id=parent_id,
            )
        )
    return installments
