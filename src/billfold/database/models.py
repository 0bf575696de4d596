"""SQLAlchemy models for billfold database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    Enum,
    UniqueConstraint,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from billfold.domain.entities import (
    AccountType,
    BillStatus,
    Direction,
    FundingMethod,
    RecurrenceRule,
    TransactionStatus,
    new_id,
)

Base = declarative_base()


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    account_type = Column(Enum(AccountType), nullable=False)
    balance_cents = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    transactions = relationship("Transaction", back_populates="bank_account")


class CreditCard(Base):
    """Credit card model."""

    __tablename__ = "credit_cards"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    last_four_digits = Column(String(4), nullable=False)
    limit_cents = Column(Integer, nullable=False)
    closing_day = Column(Integer, nullable=False)
    due_day = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    transactions = relationship("Transaction", back_populates="credit_card")
    bills = relationship("CreditCardBill", back_populates="credit_card")


class CreditCardBill(Base):
    """Monthly credit card bill model."""

    __tablename__ = "credit_card_bills"

    id = Column(String(36), primary_key=True, default=new_id)
    credit_card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=False)
    reference_month = Column(Date, nullable=False)
    closing_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    total_cents = Column(Integer, default=0, nullable=False)
    paid_cents = Column(Integer, default=0, nullable=False)
    status = Column(Enum(BillStatus), default=BillStatus.OPEN, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # One bill per card per cycle
    __table_args__ = (
        UniqueConstraint("credit_card_id", "reference_month", name="uq_card_reference_month"),
    )

    # Relationships
    credit_card = relationship("CreditCard", back_populates="bills")
    transactions = relationship("Transaction", back_populates="bill")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount_cents = Column(Integer, nullable=False)
    direction = Column(Enum(Direction), nullable=False)
    funding_method = Column(Enum(FundingMethod), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(Enum(TransactionStatus), nullable=False)
    category_id = Column(String, nullable=True)
    bank_account_id = Column(String(36), ForeignKey("bank_accounts.id"), nullable=True)
    credit_card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=True)
    is_installment = Column(Boolean, default=False, nullable=False)
    installment_number = Column(Integer, nullable=True)
    total_installments = Column(Integer, nullable=True)
    parent_id = Column(String(36), ForeignKey("transactions.id"), nullable=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurrence_rule = Column(Enum(RecurrenceRule), nullable=True)
    recurrence_end_date = Column(Date, nullable=True)
    bill_id = Column(String(36), ForeignKey("credit_card_bills.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    __table_args__ = (Index("ix_transactions_card_date", "credit_card_id", "date"),)

    # Relationships
    bank_account = relationship("BankAccount", back_populates="transactions")
    credit_card = relationship("CreditCard", back_populates="transactions")
    bill = relationship("CreditCardBill", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
