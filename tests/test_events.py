"""Tests for balance events."""

from dataclasses import replace
from datetime import date

from billfold.domain.entities import (
    Direction,
    FundingMethod,
    Transaction,
    TransactionStatus,
)
from billfold.domain.events import (
    TransactionCompleted,
    TransactionUncompleted,
    balance_adjustments,
    creation_events,
    edit_events,
    status_change_events,
)
from billfold.domain.money import Money


def _txn(**overrides):
    values = dict(
        id="t1",
        owner_id="alice",
        description="Rent",
        amount=Money(80000),
        direction=Direction.EXPENSE,
        funding_method=FundingMethod.DEBIT,
        date=date(2026, 1, 5),
        status=TransactionStatus.COMPLETED,
        bank_account_id="acc-1",
    )
    values.update(overrides)
    return Transaction(**values)


def test_completion_raises_completed_event():
    txn = _txn(status=TransactionStatus.PENDING)
    events = status_change_events(txn, TransactionStatus.COMPLETED)
    assert events == [TransactionCompleted(txn)]


def test_leaving_completed_raises_uncompleted_event():
    txn = _txn()
    assert status_change_events(txn, TransactionStatus.CANCELLED) == [TransactionUncompleted(txn)]
    assert status_change_events(txn, TransactionStatus.PENDING) == [TransactionUncompleted(txn)]


def test_non_completed_transitions_raise_nothing():
    txn = _txn(status=TransactionStatus.PENDING)
    assert status_change_events(txn, TransactionStatus.CANCELLED) == []
    assert status_change_events(_txn(), TransactionStatus.COMPLETED) == []


def test_expense_adjustments():
    txn = _txn()
    [completed] = balance_adjustments([TransactionCompleted(txn)])
    [uncompleted] = balance_adjustments([TransactionUncompleted(txn)])
    assert completed.account_id == "acc-1"
    assert completed.delta == Money(-80000)
    assert uncompleted.delta == Money(80000)


def test_income_adjustments():
    txn = _txn(direction=Direction.INCOME)
    [adjustment] = balance_adjustments([TransactionCompleted(txn)])
    assert adjustment.delta == Money(80000)


def test_transactions_without_bank_account_have_no_effect():
    cash = _txn(funding_method=FundingMethod.CASH, bank_account_id=None)
    assert balance_adjustments([TransactionCompleted(cash)]) == []


def test_creation_events_only_for_completed():
    assert creation_events(_txn()) == [TransactionCompleted(_txn())]
    assert creation_events(_txn(status=TransactionStatus.PENDING)) == []


def test_edit_of_completed_amount_reapplies():
    before = _txn()
    after = replace(before, amount=Money(90000))
    deltas = [a.delta for a in balance_adjustments(edit_events(before, after))]
    assert deltas == [Money(80000), Money(-90000)]


def test_edit_without_money_change_is_silent():
    before = _txn()
    assert edit_events(before, replace(before, description="Other")) == []
    pending = _txn(status=TransactionStatus.PENDING)
    assert edit_events(pending, replace(pending, amount=Money(1))) == []
