"""Domain layer for billfold application."""

from billfold.domain.transaction import TransactionService
from billfold.domain.bill import BillService
from billfold.domain.bank_account import BankAccountService
from billfold.domain.credit_card import CreditCardService
from billfold.domain.summary import SummaryService

__all__ = [
    "TransactionService",
    "BillService",
    "BankAccountService",
    "CreditCardService",
    "SummaryService",
]
