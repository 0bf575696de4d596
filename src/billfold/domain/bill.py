"""Credit card bill domain service."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Optional

from billfold.domain.entities import (
    BillStatus,
    CreditCard,
    CreditCardBill,
    Direction,
    FundingMethod,
    Transaction as TransactionEntity,
    TransactionIntent,
)
from billfold.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    bill_not_found,
    credit_card_not_found,
    duplicate_bill,
)
from billfold.domain.money import Money
from billfold.domain.period import BillingPeriod, billing_period_for, month_range
from billfold.domain.transaction import TransactionService

if TYPE_CHECKING:
    from billfold.database.base import Database

logger = logging.getLogger(__name__)


class BillService:
    """Service for generating, paying and closing credit card bills."""

    def __init__(self, db: Database):
        """Initialize bill service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)

    def _visible_card(self, card_id: str, user_id: str) -> CreditCard:
        card = self.db.get_credit_card(card_id)
        if card is None or card.deleted or card.owner_id != user_id:
            raise NotFoundError(credit_card_not_found(card_id))
        return card

    def _visible_bill(self, bill_id: str, user_id: str) -> CreditCardBill:
        """Load a bill through its card; bills on other users' or deleted cards are invisible."""
        bill = self.db.get_bill(bill_id)
        if bill is None:
            raise NotFoundError(bill_not_found(bill_id))
        card = self.db.get_credit_card(bill.credit_card_id)
        if card is None or card.deleted or card.owner_id != user_id:
            raise NotFoundError(bill_not_found(bill_id))
        return bill

    def billing_period(self, card_id: str, reference_month: date, user_id: str) -> BillingPeriod:
        """Billing period of a card for a reference month."""
        return billing_period_for(self._visible_card(card_id, user_id), reference_month)

    def generate_bill(self, card_id: str, reference_month: date, user_id: str) -> CreditCardBill:
        """Generate the bill of a card for a reference month.

        Every live, non-cancelled, not yet billed card transaction dated in
        the cycle window is bound to the new bill, and the bill total is the
        sum of what was bound.

        Args:
            card_id: Credit card ID
            reference_month: Any day in the month the bill closes in
            user_id: Acting user

        Returns:
            The new OPEN bill

        Raises:
            NotFoundError: If the card is missing, deleted or not owned
            ConflictError: If the card already has a bill for that month
        """
        card = self._visible_card(card_id, user_id)
        period = billing_period_for(card, reference_month)

        if self.db.get_bill_by_reference_month(card.id, period.reference_month) is not None:
            raise ConflictError(duplicate_bill(card.id, period.reference_month))

        transactions = self.db.find_billable_transactions(card.id, period.period_start, period.period_end)
        # The unique constraint decides races between the check above and this insert
        bill_id = self.db.create_bill(
            credit_card_id=card.id,
            reference_month=period.reference_month,
            closing_date=period.closing_date,
            due_date=period.due_date,
            transaction_ids=[t.id for t in transactions],
        )
        bill = self.db.get_bill(bill_id)

        logger.info(
            "Bill generated",
            extra={
                "bill_id": bill.id,
                "credit_card_id": card.id,
                "reference_month": period.reference_month.isoformat(),
                "period_start": period.period_start.isoformat(),
                "period_end": period.period_end.isoformat(),
                "transaction_count": len(transactions),
                "total_cents": bill.total.minor_units,
            },
        )
        return bill

    def sync_bill(self, card_id: str, reference_month: date, user_id: str) -> CreditCardBill:
        """Link newly discovered transactions to a cycle's bill, generating it if missing.

        A bill that was PAID and receives new charges goes back to CLOSED.

        Args:
            card_id: Credit card ID
            reference_month: Any day in the month the bill closes in
            user_id: Acting user

        Returns:
            The up-to-date bill

        Raises:
            NotFoundError: If the card is missing, deleted or not owned
        """
        card = self._visible_card(card_id, user_id)
        period = billing_period_for(card, reference_month)

        existing = self.db.get_bill_by_reference_month(card.id, period.reference_month)
        if existing is None:
            try:
                return self.generate_bill(card.id, reference_month, user_id)
            except ConflictError:
                existing = self.db.get_bill_by_reference_month(card.id, period.reference_month)

        transactions = self.db.find_billable_transactions(card.id, period.period_start, period.period_end)
        if not transactions:
            return existing

        added = Money(sum(t.amount.minor_units for t in transactions))
        status = None
        if existing.status == BillStatus.PAID and existing.paid < existing.total + added:
            status = BillStatus.CLOSED

        bound = self.db.bind_transactions_to_bill(existing.id, [t.id for t in transactions], status=status)
        logger.info(
            "Bill synchronized",
            extra={"bill_id": existing.id, "credit_card_id": card.id, "transaction_count": bound},
        )
        return self.db.get_bill(existing.id)

    def backfill_bills(
        self, card_id: str, first_month: date, last_month: date, user_id: str
    ) -> list[CreditCardBill]:
        """Populate bills for a range of months.

        Months with neither transactions nor an existing bill are skipped.

        Returns:
            Bills created or updated, oldest first
        """
        card = self._visible_card(card_id, user_id)
        if first_month > last_month:
            raise ValidationError("First month must not be after last month")

        bills = []
        for month in month_range(first_month, last_month):
            period = billing_period_for(card, month)
            existing = self.db.get_bill_by_reference_month(card.id, period.reference_month)
            pending = self.db.find_billable_transactions(card.id, period.period_start, period.period_end)
            if existing is None and not pending:
                continue
            if existing is not None and not pending:
                bills.append(existing)
                continue
            bills.append(self.sync_bill(card.id, month, user_id))
        return bills

    def get_bill(self, bill_id: str, user_id: str) -> CreditCardBill:
        """Get a bill visible to the user.

        Raises:
            NotFoundError: If the bill is missing or not visible
        """
        return self._visible_bill(bill_id, user_id)

    def get_bill_transactions(self, bill_id: str, user_id: str) -> list[TransactionEntity]:
        """Transactions bound to a bill, oldest first."""
        self._visible_bill(bill_id, user_id)
        transactions = self.db.list_transactions(owner_id=user_id, bill_id=bill_id, include_deleted=True)
        return sorted(transactions, key=lambda t: (t.date, t.installment_number or 0))

    def list_bills(
        self,
        user_id: str,
        credit_card_id: Optional[str] = None,
        status: Optional[BillStatus] = None,
    ) -> list[CreditCardBill]:
        """List bills on the user's cards, newest first."""
        return self.db.list_bills(owner_id=user_id, credit_card_id=credit_card_id, status=status)

    def pay_bill(
        self,
        bill_id: str,
        amount: Money,
        user_id: str,
        bank_account_id: Optional[str] = None,
        payment_date: Optional[date] = None,
    ) -> CreditCardBill:
        """Register a payment against a bill.

        The bill becomes PAID once the paid amount reaches the total; its
        pending transactions are then completed, releasing card exposure.
        With a bank account, the payment is also recorded as a completed
        debit on that account.

        Args:
            bill_id: Bill ID
            amount: Payment amount
            user_id: Acting user
            bank_account_id: Optional account the payment is drawn from
            payment_date: Date of the account debit (defaults to today)

        Returns:
            Updated bill

        Raises:
            ValidationError: If the amount is not positive
            NotFoundError: If the bill or bank account is not visible
            ConflictError: If the bill is already paid
        """
        if not isinstance(amount, Money) or not amount.is_positive():
            raise ValidationError("Payment amount must be positive")

        bill = self._visible_bill(bill_id, user_id)
        if bill.status == BillStatus.PAID:
            raise ConflictError(f"Bill {bill_id} is already paid")

        if bank_account_id is not None:
            self.transactions.create_transaction(
                TransactionIntent(
                    description=f"Credit card bill {bill.reference_month:%Y-%m}",
                    amount=amount,
                    direction=Direction.EXPENSE,
                    funding_method=FundingMethod.DEBIT,
                    date=payment_date or date.today(),
                    bank_account_id=bank_account_id,
                ),
                user_id,
            )

        status = self.db.record_bill_payment(bill.id, amount.minor_units)
        updated = self.db.get_bill(bill.id)

        logger.info(
            "Bill payment recorded",
            extra={
                "bill_id": bill.id,
                "amount_cents": amount.minor_units,
                "paid_cents": updated.paid.minor_units,
                "total_cents": updated.total.minor_units,
                "status": status.value,
            },
        )
        return updated

    def close_bill(self, bill_id: str, user_id: str) -> CreditCardBill:
        """Close a bill.

        Raises:
            NotFoundError: If the bill is not visible
            ConflictError: If the bill is already paid
        """
        bill = self._visible_bill(bill_id, user_id)
        if bill.status == BillStatus.PAID:
            raise ConflictError(f"Cannot close bill {bill_id}: it is already paid")

        self.db.update_bill_status(bill.id, BillStatus.CLOSED)
        logger.info("Bill closed", extra={"bill_id": bill.id})
        return self.db.get_bill(bill.id)
