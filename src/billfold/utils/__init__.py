"""Utility functions for billfold."""

from billfold.utils.date_parser import parse_date, parse_reference_month
from billfold.utils.amount_parser import parse_amount
from billfold.utils.account_resolver import resolve_bank_account, resolve_credit_card

__all__ = [
    "parse_date",
    "parse_reference_month",
    "parse_amount",
    "resolve_bank_account",
    "resolve_credit_card",
]
