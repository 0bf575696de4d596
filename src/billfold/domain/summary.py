"""Summary domain service."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from billfold.domain.entities import (
    BillStatus,
    CashFlow,
    Direction,
    FinancialSummary,
    TransactionStatus,
)
from billfold.domain.money import Money, sum_money

if TYPE_CHECKING:
    from billfold.database.base import Database

UNPAID_BILL_STATUSES = (BillStatus.OPEN, BillStatus.CLOSED, BillStatus.OVERDUE)


class SummaryService:
    """Service for building financial summaries."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_summary(self, user_id: str) -> FinancialSummary:
        """Build a financial overview for a user.

        Credit card debt is the outstanding balance of unpaid bills on live
        cards. Pending income and expenses cover every live PENDING
        transaction, card purchases included.

        Args:
            user_id: Acting user

        Returns:
            FinancialSummary for the user
        """
        accounts = self.db.list_bank_accounts(user_id)
        cards = self.db.list_credit_cards(user_id)
        bills = [
            bill
            for bill in self.db.list_bills(owner_id=user_id)
            if bill.status in UNPAID_BILL_STATUSES
        ]
        pending = self.db.list_transactions(owner_id=user_id, status=TransactionStatus.PENDING)

        return FinancialSummary(
            total_balance=sum_money(acc.balance for acc in accounts),
            total_credit_limit=sum_money(card.limit for card in cards),
            credit_card_debt=sum_money(bill.balance for bill in bills),
            pending_income=sum_money(t.amount for t in pending if t.direction == Direction.INCOME),
            pending_expenses=sum_money(t.amount for t in pending if t.direction == Direction.EXPENSE),
        )

    def cash_flow(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> CashFlow:
        """Completed income and expenses between two dates (inclusive)."""
        transactions = self.db.list_transactions(
            owner_id=user_id,
            start_date=start_date,
            end_date=end_date,
            status=TransactionStatus.COMPLETED,
        )
        income = Money.zero()
        expenses = Money.zero()
        for txn in transactions:
            if txn.direction == Direction.INCOME:
                income = income + txn.amount
            else:
                expenses = expenses + txn.amount

        return CashFlow(
            start_date=start_date,
            end_date=end_date,
            income=income,
            expenses=expenses,
            transaction_count=len(transactions),
        )
