"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date, datetime

# Import entities directly to avoid circular import through domain/__init__.py
from billfold.domain.entities import (
    AccountType,
    BankAccount,
    BillStatus,
    CreditCard,
    CreditCardBill,
    Direction,
    FundingMethod,
    Transaction,
    TransactionStatus,
)
from billfold.domain.events import BalanceAdjustment


class Database(ABC):
    """Abstract database interface for billfold.

    Getters by id return soft-deleted rows too; callers decide visibility.
    Methods that take ``adjustments`` apply them in the same database
    transaction as the write they accompany.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(
        self, owner_id: str, name: str, account_type: AccountType, balance_cents: int = 0
    ) -> str:
        """Create a bank account. Returns account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, account_id: str) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def list_bank_accounts(self, owner_id: str, include_deleted: bool = False) -> list[BankAccount]:
        """List bank accounts of an owner."""
        pass

    @abstractmethod
    def update_bank_account(
        self, account_id: str, name: Optional[str] = None, account_type: Optional[AccountType] = None
    ) -> None:
        """Update bank account name and/or type."""
        pass

    @abstractmethod
    def set_bank_account_balance(self, account_id: str, balance_cents: int) -> None:
        """Overwrite a bank account balance."""
        pass

    @abstractmethod
    def soft_delete_bank_account(self, account_id: str, deleted_at: datetime) -> int:
        """Soft delete an account and its live transactions. Returns transactions deleted."""
        pass

    @abstractmethod
    def restore_bank_account(self, account_id: str) -> int:
        """Restore an account and the transactions its deletion removed. Returns transactions restored."""
        pass

    # Credit card operations
    @abstractmethod
    def create_credit_card(
        self,
        owner_id: str,
        name: str,
        last_four_digits: str,
        limit_cents: int,
        closing_day: int,
        due_day: int,
    ) -> str:
        """Create a credit card. Returns card ID."""
        pass

    @abstractmethod
    def get_credit_card(self, card_id: str) -> Optional[CreditCard]:
        """Get credit card by ID."""
        pass

    @abstractmethod
    def list_credit_cards(self, owner_id: str, include_deleted: bool = False) -> list[CreditCard]:
        """List credit cards of an owner."""
        pass

    @abstractmethod
    def update_credit_card(
        self,
        card_id: str,
        name: Optional[str] = None,
        last_four_digits: Optional[str] = None,
        limit_cents: Optional[int] = None,
        closing_day: Optional[int] = None,
        due_day: Optional[int] = None,
    ) -> None:
        """Update credit card fields."""
        pass

    @abstractmethod
    def soft_delete_credit_card(self, card_id: str, deleted_at: datetime) -> int:
        """Soft delete a card and its live transactions. Returns transactions deleted."""
        pass

    @abstractmethod
    def restore_credit_card(self, card_id: str) -> int:
        """Restore a card and the transactions its deletion removed. Returns transactions restored."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transactions(
        self, transactions: list[Transaction], adjustments: list[BalanceAdjustment]
    ) -> list[str]:
        """Insert transactions with pre-assigned IDs. Returns their IDs."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        direction: Optional[Direction] = None,
        funding_method: Optional[FundingMethod] = None,
        status: Optional[TransactionStatus] = None,
        category_id: Optional[str] = None,
        bank_account_id: Optional[str] = None,
        credit_card_id: Optional[str] = None,
        is_installment: Optional[bool] = None,
        bill_id: Optional[str] = None,
        include_deleted: bool = False,
    ) -> list[Transaction]:
        """List an owner's transactions with optional filters, newest first."""
        pass

    @abstractmethod
    def list_installment_series(self, parent_id: str) -> list[Transaction]:
        """List every installment of a series, including deleted ones."""
        pass

    @abstractmethod
    def change_transaction_status(
        self,
        transaction_id: str,
        expected_status: TransactionStatus,
        new_status: TransactionStatus,
        adjustments: list[BalanceAdjustment],
    ) -> bool:
        """Move a transaction from ``expected_status`` to ``new_status``.

        Balance adjustments and the total of the bill holding the transaction
        are updated in the same commit. Returns False without writing anything
        when the recorded status is no longer ``expected_status``.
        """
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: str,
        adjustments: list[BalanceAdjustment],
        description: Optional[str] = None,
        amount_cents: Optional[int] = None,
        direction: Optional[Direction] = None,
        date: Optional[date] = None,
        category_id: Optional[str] = None,
        update_category: bool = False,
    ) -> None:
        """Update transaction fields.

        Args:
            update_category: If True, update category_id even if it's None (to clear it)
        """
        pass

    @abstractmethod
    def set_transactions_deleted(self, transaction_ids: list[str], deleted_at: Optional[datetime]) -> None:
        """Soft delete (or restore, when deleted_at is None) the given transactions.

        Totals of the bills holding them are recomputed in the same commit.
        """
        pass

    @abstractmethod
    def sum_pending_card_cents(self, card_id: str, exclude_transaction_id: Optional[str] = None) -> int:
        """Sum the live PENDING transaction amounts on a card."""
        pass

    @abstractmethod
    def find_billable_transactions(self, card_id: str, start_date: date, end_date: date) -> list[Transaction]:
        """Live, non-cancelled, unbilled card transactions dated within [start_date, end_date]."""
        pass

    # Bill operations
    @abstractmethod
    def create_bill(
        self,
        credit_card_id: str,
        reference_month: date,
        closing_date: date,
        due_date: date,
        transaction_ids: list[str],
    ) -> str:
        """Create an OPEN bill, bind the transactions and total them. Returns bill ID.

        Raises:
            ConflictError: If a bill already exists for the card and month
        """
        pass

    @abstractmethod
    def get_bill(self, bill_id: str) -> Optional[CreditCardBill]:
        """Get bill by ID."""
        pass

    @abstractmethod
    def get_bill_by_reference_month(self, credit_card_id: str, reference_month: date) -> Optional[CreditCardBill]:
        """Get the bill of a card for a reference month."""
        pass

    @abstractmethod
    def list_bills(
        self,
        owner_id: str,
        credit_card_id: Optional[str] = None,
        status: Optional[BillStatus] = None,
    ) -> list[CreditCardBill]:
        """List bills on an owner's live cards, newest reference month first."""
        pass

    @abstractmethod
    def bind_transactions_to_bill(
        self, bill_id: str, transaction_ids: list[str], status: Optional[BillStatus] = None
    ) -> int:
        """Bind unbilled transactions to a bill and recompute its total. Returns rows bound."""
        pass

    @abstractmethod
    def record_bill_payment(self, bill_id: str, amount_cents: int) -> BillStatus:
        """Add a payment to an unpaid bill, settling it once paid reaches the total.

        Returns the resulting status. Raises ConflictError if the bill is already PAID.
        """
        pass

    @abstractmethod
    def update_bill_status(self, bill_id: str, status: BillStatus) -> None:
        """Set a bill status."""
        pass
