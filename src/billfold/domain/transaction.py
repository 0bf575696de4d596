"""Transaction domain service."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Optional

from billfold.domain.credit_guard import CreditExposureGuard
from billfold.domain.entities import (
    BankAccount,
    CreditCard,
    Direction,
    FundingMethod,
    Transaction as TransactionEntity,
    TransactionIntent,
    TransactionStatus,
    new_id,
    utcnow,
)
from billfold.domain.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    bank_account_not_found,
    credit_card_not_found,
    not_deleted,
    not_owner,
    transaction_not_found,
)
from billfold.domain.events import (
    balance_adjustments,
    creation_events,
    edit_events,
    status_change_events,
)
from billfold.domain.installments import MAX_INSTALLMENTS, plan_installments
from billfold.domain.money import Money

if TYPE_CHECKING:
    from billfold.database.base import Database

logger = logging.getLogger(__name__)

# Funding methods settled at creation time
IMMEDIATE_FUNDING = (FundingMethod.DEBIT, FundingMethod.CASH, FundingMethod.TRANSFER)
ACCOUNT_FUNDING = (FundingMethod.DEBIT, FundingMethod.TRANSFER)


def validate_intent(intent: TransactionIntent) -> None:
    """Check that a transaction intent is internally coherent.

    Raises:
        ValidationError: If fields contradict each other or are missing
    """
    if not intent.description or not intent.description.strip():
        raise ValidationError("Description is required")
    if not isinstance(intent.amount, Money) or not intent.amount.is_positive():
        raise ValidationError("Amount must be positive")

    if intent.funding_method == FundingMethod.CREDIT_CARD:
        if intent.credit_card_id is None:
            raise ValidationError("credit_card_id is required for credit card transactions")
        if intent.bank_account_id is not None:
            raise ValidationError("Credit card transactions cannot reference a bank account")
    else:
        if intent.credit_card_id is not None:
            raise ValidationError(
                f"{intent.funding_method.value} transactions cannot reference a credit card"
            )
        if intent.funding_method in ACCOUNT_FUNDING and intent.bank_account_id is None:
            raise ValidationError("bank_account_id is required for debit/transfer transactions")

    if intent.is_recurring and intent.recurrence_rule is None:
        raise ValidationError("recurrence_rule is required for recurring transactions")
    if intent.recurrence_end_date is not None and intent.recurrence_end_date < intent.date:
        raise ValidationError("Recurrence end date cannot be before the transaction date")

    if intent.installments < 1 or intent.installments > MAX_INSTALLMENTS:
        raise ValidationError(f"Installments must be between 1 and {MAX_INSTALLMENTS}")
    if intent.installments > 1 and intent.funding_method != FundingMethod.CREDIT_CARD:
        raise ValidationError("Installments are only allowed for credit card transactions")


class TransactionService:
    """Service for recording transactions and keeping balances consistent."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.guard = CreditExposureGuard(db)

    def _visible_bank_account(self, account_id: str, user_id: str) -> BankAccount:
        account = self.db.get_bank_account(account_id)
        if account is None or account.deleted or account.owner_id != user_id:
            raise NotFoundError(bank_account_not_found(account_id))
        return account

    def _visible_credit_card(self, card_id: str, user_id: str) -> CreditCard:
        card = self.db.get_credit_card(card_id)
        if card is None or card.deleted or card.owner_id != user_id:
            raise NotFoundError(credit_card_not_found(card_id))
        return card

    def _load_owned(self, transaction_id: str, user_id: str) -> TransactionEntity:
        """Load a live transaction for modification by its owner."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None or txn.deleted:
            raise NotFoundError(transaction_not_found(transaction_id))
        if txn.owner_id != user_id:
            raise ForbiddenError(not_owner("transaction", transaction_id))
        return txn

    def create_transaction(self, intent: TransactionIntent, user_id: str) -> list[TransactionEntity]:
        """Record a transaction, or an installment series for a split purchase.

        Debit, cash and transfer transactions are completed immediately and
        move the bank account balance in the same database transaction.
        Credit card transactions start pending and count against the card
        limit.

        Args:
            intent: What to record
            user_id: Acting user

        Returns:
            Created transactions (one per installment)

        Raises:
            ValidationError: If the intent is incoherent
            NotFoundError: If the bank account or card is not visible
            LimitExceededError: If a card expense would exceed the limit
        """
        validate_intent(intent)

        if intent.bank_account_id is not None:
            self._visible_bank_account(intent.bank_account_id, user_id)
        if intent.credit_card_id is not None:
            card = self._visible_credit_card(intent.credit_card_id, user_id)
            if intent.direction == Direction.EXPENSE:
                self.guard.check(card, intent.amount, installments=intent.installments)

        status = (
            TransactionStatus.COMPLETED
            if intent.funding_method in IMMEDIATE_FUNDING
            else TransactionStatus.PENDING
        )
        template = TransactionEntity(
            id=new_id(),
            owner_id=user_id,
            description=intent.description.strip(),
            amount=intent.amount,
            direction=intent.direction,
            funding_method=intent.funding_method,
            date=intent.date,
            status=status,
            category_id=intent.category_id,
            bank_account_id=intent.bank_account_id,
            credit_card_id=intent.credit_card_id,
            is_recurring=intent.is_recurring,
            recurrence_rule=intent.recurrence_rule if intent.is_recurring else None,
            recurrence_end_date=intent.recurrence_end_date if intent.is_recurring else None,
        )

        if intent.installments > 1:
            records = plan_installments(template, intent.amount, intent.installments, intent.date)
        else:
            records = [template]

        events = [event for record in records for event in creation_events(record)]
        self.db.create_transactions(records, balance_adjustments(events))

        logger.info(
            "Transaction created",
            extra={
                "transaction_id": records[0].id,
                "user_id": user_id,
                "funding_method": intent.funding_method.value,
                "status": status.value,
                "amount_cents": intent.amount.minor_units,
                "installments": len(records),
            },
        )
        return records

    def get_transaction(self, transaction_id: str, user_id: str) -> TransactionEntity:
        """Get a live transaction owned by the user.

        Raises:
            NotFoundError: If it does not exist, is deleted or is not owned
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None or txn.deleted or txn.owner_id != user_id:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(self, user_id: str, **filters) -> list[TransactionEntity]:
        """List the user's transactions.

        Keyword filters are passed to ``Database.list_transactions``
        (start_date, end_date, direction, funding_method, status,
        category_id, bank_account_id, credit_card_id, is_installment,
        bill_id, include_deleted).
        """
        return self.db.list_transactions(owner_id=user_id, **filters)

    def update_status(
        self, transaction_id: str, new_status: TransactionStatus, user_id: str
    ) -> TransactionEntity:
        """Move a transaction to a new status.

        Entering COMPLETED applies the signed amount to the attached bank
        account; leaving COMPLETED reverses it. The write only succeeds from
        the status that was read, so a repeated or racing transition cannot
        move the balance twice.

        Args:
            transaction_id: Transaction ID
            new_status: Target status
            user_id: Acting user

        Returns:
            Updated transaction

        Raises:
            NotFoundError: If the transaction is missing or deleted
            ForbiddenError: If the transaction belongs to another user
            LimitExceededError: If reviving a card expense exceeds the limit
            ConflictError: If the status changed concurrently
        """
        txn = self._load_owned(transaction_id, user_id)
        if txn.status == new_status:
            return txn

        if (
            new_status == TransactionStatus.PENDING
            and txn.credit_card_id is not None
            and txn.direction == Direction.EXPENSE
        ):
            card = self._visible_credit_card(txn.credit_card_id, user_id)
            self.guard.check(card, txn.amount, exclude_transaction_id=txn.id)

        adjustments = balance_adjustments(status_change_events(txn, new_status))
        if not self.db.change_transaction_status(txn.id, txn.status, new_status, adjustments):
            raise ConflictError(
                f"Transaction {transaction_id} is no longer {txn.status.value}; reload and retry"
            )

        logger.info(
            "Transaction status changed",
            extra={
                "transaction_id": txn.id,
                "from_status": txn.status.value,
                "to_status": new_status.value,
                "balance_deltas": {a.account_id: a.delta.minor_units for a in adjustments},
            },
        )
        return replace(txn, status=new_status)

    def update_transaction(
        self,
        transaction_id: str,
        user_id: str,
        description: Optional[str] = None,
        amount: Optional[Money] = None,
        direction: Optional[Direction] = None,
        date: Optional[date] = None,
        category_id: Optional[str] = None,
        clear_category: bool = False,
    ) -> TransactionEntity:
        """Update transaction fields.

        Editing the amount or direction of a completed transaction re-applies
        its balance effect. Billed transactions keep their amount and date.

        Args:
            transaction_id: Transaction ID to update
            user_id: Acting user
            description: Optional new description
            amount: Optional new amount
            direction: Optional new direction
            date: Optional new date
            category_id: Optional new category ID
            clear_category: If True, clear the category (category_id must be None)

        Returns:
            Updated transaction

        Raises:
            ValidationError: If values are invalid
            NotFoundError: If the transaction is missing or deleted
            ForbiddenError: If the transaction belongs to another user
            ConflictError: If amount or date change on a billed transaction
            LimitExceededError: If a pending card expense grows past the limit
        """
        txn = self._load_owned(transaction_id, user_id)

        if clear_category and category_id is not None:
            raise ValidationError("Cannot set both category_id and clear_category")
        if description is not None and not description.strip():
            raise ValidationError("Description is required")
        if amount is not None and not amount.is_positive():
            raise ValidationError("Amount must be positive")

        amount_changes = amount is not None and amount != txn.amount
        date_changes = date is not None and date != txn.date
        if txn.bill_id is not None and (amount_changes or date_changes):
            raise ConflictError(
                f"Transaction {transaction_id} is billed on {txn.bill_id}; its amount and date are fixed"
            )

        after = replace(
            txn,
            amount=amount if amount is not None else txn.amount,
            direction=direction if direction is not None else txn.direction,
        )

        if (
            txn.credit_card_id is not None
            and txn.status == TransactionStatus.PENDING
            and after.direction == Direction.EXPENSE
            and (amount_changes or after.direction != txn.direction)
        ):
            card = self._visible_credit_card(txn.credit_card_id, user_id)
            self.guard.check(card, after.amount, exclude_transaction_id=txn.id)

        self.db.update_transaction(
            transaction_id=txn.id,
            adjustments=balance_adjustments(edit_events(txn, after)),
            description=description.strip() if description is not None else None,
            amount_cents=amount.minor_units if amount is not None else None,
            direction=direction,
            date=date,
            category_id=category_id,
            update_category=clear_category,
        )
        return self.db.get_transaction(txn.id)

    def delete_transaction(self, transaction_id: str, user_id: str) -> int:
        """Soft delete a transaction.

        Deleting the first installment of a series deletes the whole series.
        Balances are not touched; they follow status, not deletion.

        Returns:
            Number of transactions deleted

        Raises:
            NotFoundError: If the transaction is missing or already deleted
            ForbiddenError: If the transaction belongs to another user
        """
        txn = self._load_owned(transaction_id, user_id)

        if txn.is_series_parent:
            ids = [t.id for t in self.db.list_installment_series(txn.id) if not t.deleted]
        else:
            ids = [txn.id]

        self.db.set_transactions_deleted(ids, utcnow())
        logger.info("Transaction deleted", extra={"transaction_id": txn.id, "count": len(ids)})
        return len(ids)

    def restore_transaction(self, transaction_id: str, user_id: str) -> int:
        """Restore a soft-deleted transaction (or whole installment series).

        Returns:
            Number of transactions restored

        Raises:
            NotFoundError: If the transaction does not exist
            ForbiddenError: If the transaction belongs to another user
            ConflictError: If the transaction is not deleted
            LimitExceededError: If a restored pending card expense exceeds the limit
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if txn.owner_id != user_id:
            raise ForbiddenError(not_owner("transaction", transaction_id))
        if not txn.deleted:
            raise ConflictError(not_deleted("transaction", transaction_id))

        if txn.is_series_parent:
            restored = [t for t in self.db.list_installment_series(txn.id) if t.deleted]
        else:
            restored = [txn]

        exposing = [
            t
            for t in restored
            if t.status == TransactionStatus.PENDING
            and t.credit_card_id is not None
            and t.direction == Direction.EXPENSE
        ]
        if exposing:
            card = self._visible_credit_card(exposing[0].credit_card_id, user_id)
            # A series counts like a new split purchase: one installment's share
            self.guard.check(
                card, sum((t.amount for t in exposing), Money.zero()), installments=len(exposing)
            )

        ids = [t.id for t in restored]
        self.db.set_transactions_deleted(ids, None)
        logger.info("Transaction restored", extra={"transaction_id": txn.id, "count": len(ids)})
        return len(ids)
