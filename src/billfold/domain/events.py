"""Balance events raised by transaction status changes.

A transaction affects its bank account balance only while it is COMPLETED.
Crossing into COMPLETED raises TransactionCompleted, crossing out of it
raises TransactionUncompleted, and ``balance_adjustments`` is the single
place that turns those events into signed account deltas.
"""

from dataclasses import dataclass
from typing import Union

from billfold.domain.entities import Direction, Transaction, TransactionStatus
from billfold.domain.money import Money


@dataclass(frozen=True)
class TransactionCompleted:
    transaction: Transaction


@dataclass(frozen=True)
class TransactionUncompleted:
    transaction: Transaction


BalanceEvent = Union[TransactionCompleted, TransactionUncompleted]


@dataclass(frozen=True)
class BalanceAdjustment:
    """Signed change to apply atomically to a bank account balance."""

    account_id: str
    delta: Money


def status_change_events(
    transaction: Transaction, new_status: TransactionStatus
) -> list[BalanceEvent]:
    """Events raised when ``transaction`` moves to ``new_status``."""
    was_completed = transaction.status == TransactionStatus.COMPLETED
    is_completed = new_status == TransactionStatus.COMPLETED
    if is_completed and not was_completed:
        return [TransactionCompleted(transaction)]
    if was_completed and not is_completed:
        return [TransactionUncompleted(transaction)]
    return []


def creation_events(transaction: Transaction) -> list[BalanceEvent]:
    """Events raised when ``transaction`` is recorded."""
    if transaction.status == TransactionStatus.COMPLETED:
        return [TransactionCompleted(transaction)]
    return []


def edit_events(before: Transaction, after: Transaction) -> list[BalanceEvent]:
    """Events raised when a completed transaction's amount or direction changes."""
    if before.status != TransactionStatus.COMPLETED:
        return []
    if before.amount == after.amount and before.direction == after.direction:
        return []
    return [TransactionUncompleted(before), TransactionCompleted(after)]


def _signed_amount(transaction: Transaction) -> Money:
    if transaction.direction == Direction.INCOME:
        return transaction.amount
    return -transaction.amount


def balance_adjustments(events: list[BalanceEvent]) -> list[BalanceAdjustment]:
    """Translate balance events into per-account adjustments.

    Events for transactions without a bank account (cash, credit card) carry
    no balance effect and are dropped.
    """
    adjustments = []
    for event in events:
        transaction = event.transaction
        if transaction.bank_account_id is None:
            continue
        delta = _signed_amount(transaction)
        if isinstance(event, TransactionUncompleted):
            delta = -delta
        adjustments.append(BalanceAdjustment(account_id=transaction.bank_account_id, delta=delta))
    return adjustments
