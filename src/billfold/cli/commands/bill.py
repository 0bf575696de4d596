"""Credit card bill commands."""

import click
from billfold.cli.account_resolution import (
    resolve_bank_account_or_exit,
    resolve_credit_card_or_exit,
)
from billfold.cli.error_handling import handle_domain_error
from billfold.domain.bank_account import BankAccountService
from billfold.domain.bill import BillService
from billfold.domain.credit_card import CreditCardService
from billfold.domain.entities import BillStatus
from billfold.domain.errors import DomainError
from billfold.utils.amount_parser import parse_amount
from billfold.utils.date_parser import parse_date, parse_reference_month


def _parse_month_or_exit(ctx, value: str):
    try:
        return parse_reference_month(value)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def _echo_bill(bill) -> None:
    click.echo(
        f"{bill.reference_month:%Y-%m} | {bill.status.value:7s} | total {bill.total.format():>12s} | "
        f"paid {bill.paid.format():>12s} | closes {bill.closing_date} | due {bill.due_date} | {bill.id}"
    )


@click.group()
def bill_group():
    """Generate, pay and close credit card bills."""
    pass


@bill_group.command("generate")
@click.argument("card", metavar="CARD")
@click.argument("month", metavar="YYYY-MM")
@click.pass_context
def generate_bill(ctx, card: str, month: str):
    """Generate the bill of CARD closing in MONTH.

    Examples:
        billfold bill generate Visa 2026-02
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    card_id = resolve_credit_card_or_exit(ctx, CreditCardService(db), user_id, card)
    reference_month = _parse_month_or_exit(ctx, month)

    try:
        bill = BillService(db).generate_bill(card_id, reference_month, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Generated bill {bill.id} for {bill.reference_month:%Y-%m}: {bill.total.format()}")


@bill_group.command("sync")
@click.argument("card", metavar="CARD")
@click.argument("month", metavar="YYYY-MM")
@click.pass_context
def sync_bill(ctx, card: str, month: str):
    """Link new transactions to the bill of MONTH, generating it if missing."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    card_id = resolve_credit_card_or_exit(ctx, CreditCardService(db), user_id, card)
    reference_month = _parse_month_or_exit(ctx, month)

    try:
        bill = BillService(db).sync_bill(card_id, reference_month, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Bill {bill.id} for {bill.reference_month:%Y-%m}: {bill.total.format()}")


@bill_group.command("backfill")
@click.argument("card", metavar="CARD")
@click.argument("first_month", metavar="FROM")
@click.argument("last_month", metavar="TO")
@click.pass_context
def backfill_bills(ctx, card: str, first_month: str, last_month: str):
    """Generate or update bills for every month from FROM to TO (YYYY-MM)."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    card_id = resolve_credit_card_or_exit(ctx, CreditCardService(db), user_id, card)
    first = _parse_month_or_exit(ctx, first_month)
    last = _parse_month_or_exit(ctx, last_month)

    try:
        bills = BillService(db).backfill_bills(card_id, first, last, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not bills:
        click.echo("No bills to create.")
        return
    click.echo(f"{len(bills)} bill(s):")
    for bill in bills:
        _echo_bill(bill)


@bill_group.command("list")
@click.option("--card", help="Credit card name, last four digits or ID")
@click.option(
    "--status",
    type=click.Choice([s.value for s in BillStatus], case_sensitive=False),
    help="Only bills in this status",
)
@click.pass_context
def list_bills(ctx, card: str | None, status: str | None):
    """List bills, newest first."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]

    card_id = None
    if card is not None:
        card_id = resolve_credit_card_or_exit(ctx, CreditCardService(db), user_id, card)

    bills = BillService(db).list_bills(
        user_id, credit_card_id=card_id, status=BillStatus(status.upper()) if status else None
    )
    if not bills:
        click.echo("No bills found.")
        return

    click.echo("\nBills:")
    click.echo("-" * 120)
    for bill in bills:
        _echo_bill(bill)


@bill_group.command("show")
@click.argument("bill_id")
@click.pass_context
def show_bill(ctx, bill_id: str):
    """Show a bill and the transactions on it."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = BillService(db)

    try:
        bill = service.get_bill(bill_id, user_id)
        transactions = service.get_bill_transactions(bill_id, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Bill {bill.id} ({bill.reference_month:%Y-%m})")
    click.echo(f"  Status: {bill.status.value}")
    click.echo(f"  Closing date: {bill.closing_date}")
    click.echo(f"  Due date: {bill.due_date}")
    click.echo(f"  Total: {bill.total.format()}")
    click.echo(f"  Paid: {bill.paid.format()}")
    click.echo(f"  Balance: {bill.balance.format()}")
    click.echo(f"\n{len(transactions)} transaction(s):")
    for txn in transactions:
        click.echo(f"  {txn.date} | {txn.amount.format():>12s} | {txn.status.value:9s} | {txn.description}")


@bill_group.command("pay")
@click.argument("bill_id")
@click.option("--amount", help="Payment amount (defaults to the outstanding balance)")
@click.option("--account", help="Bank account the payment is drawn from")
@click.option("--date", "payment_date", help="Payment date (defaults to today)")
@click.pass_context
def pay_bill(ctx, bill_id: str, amount: str | None, account: str | None, payment_date: str | None):
    """Register a payment against a bill.

    Examples:
        billfold bill pay <BILL_ID> --account Checking
        billfold bill pay <BILL_ID> --amount 50.00
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = BillService(db)

    bank_account_id = None
    if account is not None:
        bank_account_id = resolve_bank_account_or_exit(ctx, BankAccountService(db), user_id, account)

    paid_on = None
    if payment_date is not None:
        try:
            paid_on = parse_date(payment_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        if amount is None:
            payment = service.get_bill(bill_id, user_id).balance
        else:
            payment = parse_amount(amount)
        bill = service.pay_bill(
            bill_id, payment, user_id, bank_account_id=bank_account_id, payment_date=paid_on
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Paid {payment.format()} on bill {bill.id}; status {bill.status.value}")


@bill_group.command("close")
@click.argument("bill_id")
@click.pass_context
def close_bill(ctx, bill_id: str):
    """Close a bill so it stops being the open statement."""
    db = ctx.obj["db"]

    try:
        bill = BillService(db).close_bill(bill_id, ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Bill {bill.id} is now {bill.status.value}")


def register_commands(cli):
    """Register bill commands with main CLI."""
    cli.add_command(bill_group, name="bill")
