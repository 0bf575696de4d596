"""CLI helpers for bank account and credit card resolution."""

from __future__ import annotations

import click
from billfold.domain.bank_account import BankAccountService
from billfold.domain.credit_card import CreditCardService
from billfold.utils.account_resolver import resolve_bank_account, resolve_credit_card


def resolve_bank_account_or_exit(
    ctx: click.Context, service: BankAccountService, user_id: str, account: str
) -> str:
    """Resolve a bank account name or ID, or exit with a CLI error."""
    try:
        return resolve_bank_account(service, user_id, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_credit_card_or_exit(
    ctx: click.Context, service: CreditCardService, user_id: str, card: str
) -> str:
    """Resolve a credit card name, last four digits or ID, or exit with a CLI error."""
    try:
        return resolve_credit_card(service, user_id, card)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
