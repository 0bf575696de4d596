"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the change of monetary
representation: the schema stores integer cents, the domain uses Money.
"""

from billfold.domain import entities as domain
from billfold.domain.money import Money
from billfold.database.models import (
    BankAccount as ORMBankAccount,
    CreditCard as ORMCreditCard,
    CreditCardBill as ORMCreditCardBill,
    Transaction as ORMTransaction,
)


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        owner_id=orm_account.owner_id,
        name=orm_account.name,
        account_type=orm_account.account_type,
        balance=Money(orm_account.balance_cents),
        created_at=orm_account.created_at,
        deleted=orm_account.deleted,
        deleted_at=orm_account.deleted_at,
    )


def credit_card_to_domain(orm_card: ORMCreditCard) -> domain.CreditCard:
    """Convert SQLAlchemy CreditCard model to domain CreditCard entity."""
    return domain.CreditCard(
        id=orm_card.id,
        owner_id=orm_card.owner_id,
        name=orm_card.name,
        last_four_digits=orm_card.last_four_digits,
        limit=Money(orm_card.limit_cents),
        closing_day=orm_card.closing_day,
        due_day=orm_card.due_day,
        created_at=orm_card.created_at,
        deleted=orm_card.deleted,
        deleted_at=orm_card.deleted_at,
    )


def bill_to_domain(orm_bill: ORMCreditCardBill) -> domain.CreditCardBill:
    """Convert SQLAlchemy CreditCardBill model to domain CreditCardBill entity."""
    return domain.CreditCardBill(
        id=orm_bill.id,
        credit_card_id=orm_bill.credit_card_id,
        reference_month=orm_bill.reference_month,
        closing_date=orm_bill.closing_date,
        due_date=orm_bill.due_date,
        total=Money(orm_bill.total_cents),
        paid=Money(orm_bill.paid_cents),
        status=orm_bill.status,
        created_at=orm_bill.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        owner_id=orm_transaction.owner_id,
        description=orm_transaction.description,
        amount=Money(orm_transaction.amount_cents),
        direction=orm_transaction.direction,
        funding_method=orm_transaction.funding_method,
        date=orm_transaction.date,
        status=orm_transaction.status,
        category_id=orm_transaction.category_id,
        bank_account_id=orm_transaction.bank_account_id,
        credit_card_id=orm_transaction.credit_card_id,
        is_installment=orm_transaction.is_installment,
        installment_number=orm_transaction.installment_number,
        total_installments=orm_transaction.total_installments,
        parent_id=orm_transaction.parent_id,
        is_recurring=orm_transaction.is_recurring,
        recurrence_rule=orm_transaction.recurrence_rule,
        recurrence_end_date=orm_transaction.recurrence_end_date,
        bill_id=orm_transaction.bill_id,
        created_at=orm_transaction.created_at,
        deleted=orm_transaction.deleted,
        deleted_at=orm_transaction.deleted_at,
    )


def transaction_to_orm(transaction: domain.Transaction) -> ORMTransaction:
    """Convert domain Transaction entity to a new SQLAlchemy Transaction row."""
    return ORMTransaction(
        id=transaction.id,
        owner_id=transaction.owner_id,
        description=transaction.description,
        amount_cents=transaction.amount.minor_units,
        direction=transaction.direction,
        funding_method=transaction.funding_method,
        date=transaction.date,
        status=transaction.status,
        category_id=transaction.category_id,
        bank_account_id=transaction.bank_account_id,
        credit_card_id=transaction.credit_card_id,
        is_installment=transaction.is_installment,
        installment_number=transaction.installment_number,
        total_installments=transaction.total_installments,
        parent_id=transaction.parent_id,
        is_recurring=transaction.is_recurring,
        recurrence_rule=transaction.recurrence_rule,
        recurrence_end_date=transaction.recurrence_end_date,
        bill_id=transaction.bill_id,
        created_at=transaction.created_at,
        deleted=transaction.deleted,
        deleted_at=transaction.deleted_at,
    )
