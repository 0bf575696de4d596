"""Domain model entities for billfold.

These are pure data classes representing business concepts, independent of
database schema. Monetary fields are always Money, never bare numbers.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, date, UTC
from enum import Enum
from typing import Optional

from billfold.domain.money import Money


class AccountType(str, Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"


class Direction(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class FundingMethod(str, Enum):
    DEBIT = "DEBIT"
    CREDIT_CARD = "CREDIT_CARD"
    CASH = "CASH"
    TRANSFER = "TRANSFER"


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class RecurrenceRule(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class BillStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


def new_id() -> str:
    """Generate an entity identifier before insertion."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class BankAccount:
    """Bank account domain entity."""

    id: str
    owner_id: str
    name: str
    account_type: AccountType
    balance: Money
    created_at: datetime
    deleted: bool = False
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class CreditCard:
    """Credit card domain entity."""

    id: str
    owner_id: str
    name: str
    last_four_digits: str
    limit: Money
    closing_day: int
    due_day: int
    created_at: datetime
    deleted: bool = False
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: str
    owner_id: str
    description: str
    amount: Money
    direction: Direction
    funding_method: FundingMethod
    date: date
    status: TransactionStatus
    category_id: Optional[str] = None
    bank_account_id: Optional[str] = None
    credit_card_id: Optional[str] = None
    is_installment: bool = False
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    parent_id: Optional[str] = None
    is_recurring: bool = False
    recurrence_rule: Optional[RecurrenceRule] = None
    recurrence_end_date: Optional[date] = None
    bill_id: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    deleted: bool = False
    deleted_at: Optional[datetime] = None

    @property
    def is_series_parent(self) -> bool:
        """True for the first installment, which is its own parent."""
        return self.is_installment and self.parent_id == self.id


@dataclass(frozen=True)
class CreditCardBill:
    """Monthly credit card bill domain entity."""

    id: str
    credit_card_id: str
    reference_month: date
    closing_date: date
    due_date: date
    total: Money
    paid: Money
    status: BillStatus
    created_at: datetime

    @property
    def balance(self) -> Money:
        return self.total - self.paid


@dataclass(frozen=True)
class TransactionIntent:
    """Request to record a purchase, income or transfer.

    ``installments`` greater than one splits a credit card purchase into a
    monthly series.
    """

    description: str
    amount: Money
    direction: Direction
    funding_method: FundingMethod
    date: date
    category_id: Optional[str] = None
    bank_account_id: Optional[str] = None
    credit_card_id: Optional[str] = None
    installments: int = 1
    is_recurring: bool = False
    recurrence_rule: Optional[RecurrenceRule] = None
    recurrence_end_date: Optional[date] = None


@dataclass(frozen=True)
class FinancialSummary:
    """Point-in-time overview of a user's money."""

    total_balance: Money
    total_credit_limit: Money
    credit_card_debt: Money
    pending_income: Money
    pending_expenses: Money

    @property
    def available_credit(self) -> Money:
        return self.total_credit_limit - self.credit_card_debt


@dataclass(frozen=True)
class CashFlow:
    """Completed income and expenses over a date range."""

    start_date: Optional[date]
    end_date: Optional[date]
    income: Money
    expenses: Money
    transaction_count: int

    @property
    def balance(self) -> Money:
        return self.income - self.expenses
