"""Resolve bank account and credit card names to IDs."""

from billfold.domain.bank_account import BankAccountService
from billfold.domain.credit_card import CreditCardService


def resolve_bank_account(service: BankAccountService, user_id: str, account: str) -> str:
    """Resolve a bank account name or ID to its ID.

    Raises:
        ValueError: If no live account matches
    """
    accounts = service.list_accounts(user_id)
    for acc in accounts:
        if acc.id == account:
            return acc.id
    matches = [acc for acc in accounts if acc.name == account]
    if len(matches) == 1:
        return matches[0].id
    raise ValueError(f"Bank account '{account}' not found")


def resolve_credit_card(service: CreditCardService, user_id: str, card: str) -> str:
    """Resolve a credit card name, last four digits or ID to its ID.

    Raises:
        ValueError: If no live card matches, or the name is ambiguous
    """
    cards = service.list_cards(user_id)
    for c in cards:
        if c.id == card:
            return c.id
    matches = [c for c in cards if c.name == card] or [c for c in cards if c.last_four_digits == card]
    if len(matches) == 1:
        return matches[0].id
    if len(matches) > 1:
        raise ValueError(f"Credit card '{card}' is ambiguous; use its ID")
    raise ValueError(f"Credit card '{card}' not found")
