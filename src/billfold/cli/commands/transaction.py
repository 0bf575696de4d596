"""Transaction management commands."""

import click
from billfold.cli.account_resolution import (
    resolve_bank_account_or_exit,
    resolve_credit_card_or_exit,
)
from billfold.cli.date_filters import resolve_cli_date_range
from billfold.cli.error_handling import handle_domain_error
from billfold.domain.bank_account import BankAccountService
from billfold.domain.credit_card import CreditCardService
from billfold.domain.entities import (
    Direction,
    FundingMethod,
    RecurrenceRule,
    TransactionIntent,
    TransactionStatus,
)
from billfold.domain.errors import DomainError
from billfold.domain.transaction import TransactionService
from billfold.utils.amount_parser import parse_amount
from billfold.utils.date_parser import parse_date


def _choice(enum_cls) -> click.Choice:
    return click.Choice([member.value for member in enum_cls], case_sensitive=False)


def _format_row(txn) -> str:
    sign = "+" if txn.direction == Direction.INCOME else "-"
    installment = ""
    if txn.is_installment:
        installment = f" [{txn.installment_number}/{txn.total_installments}]"
    deleted = " (deleted)" if txn.deleted else ""
    return (
        f"{txn.date} | {sign}{txn.amount.format():>12s} | {txn.status.value:9s} | "
        f"{txn.funding_method.value:11s} | {txn.description}{installment}{deleted} | {txn.id}"
    )


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--description", required=True, help="Transaction description")
@click.option("--amount", required=True, help="Transaction amount, always positive (e.g., 123.45)")
@click.option(
    "--direction",
    type=_choice(Direction),
    default=Direction.EXPENSE.value,
    show_default=True,
    help="INCOME or EXPENSE",
)
@click.option(
    "--method",
    "funding_method",
    type=_choice(FundingMethod),
    required=True,
    help="How the transaction is funded",
)
@click.option("--date", "txn_date", default="today", show_default=True, help="Transaction date")
@click.option("--account", help="Bank account name or ID (DEBIT and TRANSFER)")
@click.option("--card", help="Credit card name, last four digits or ID (CREDIT_CARD)")
@click.option("--installments", type=click.IntRange(1, 100), default=1, show_default=True)
@click.option("--category", "category_id", help="Category identifier")
@click.option("--recurring", type=_choice(RecurrenceRule), help="Mark as recurring with this rule")
@click.option("--recurring-until", help="Last date of the recurrence")
@click.pass_context
def add_transaction(
    ctx,
    description: str,
    amount: str,
    direction: str,
    funding_method: str,
    txn_date: str,
    account: str | None,
    card: str | None,
    installments: int,
    category_id: str | None,
    recurring: str | None,
    recurring_until: str | None,
):
    """Record a transaction.

    Debit, cash and transfer transactions are completed right away. Credit
    card purchases stay pending until their bill is paid.

    Examples:
        billfold transaction add --description "Salary" --amount 3000 --direction INCOME --method TRANSFER --account Checking
        billfold transaction add --description "TV" --amount 1000 --method CREDIT_CARD --card Visa --installments 10
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = TransactionService(db)

    bank_account_id = None
    if account is not None:
        bank_account_id = resolve_bank_account_or_exit(ctx, BankAccountService(db), user_id, account)
    credit_card_id = None
    if card is not None:
        credit_card_id = resolve_credit_card_or_exit(ctx, CreditCardService(db), user_id, card)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        parsed_date = parse_date(txn_date)
        end_date = parse_date(recurring_until) if recurring_until else None
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    intent = TransactionIntent(
        description=description,
        amount=txn_amount,
        direction=Direction(direction.upper()),
        funding_method=FundingMethod(funding_method.upper()),
        date=parsed_date,
        category_id=category_id,
        bank_account_id=bank_account_id,
        credit_card_id=credit_card_id,
        installments=installments,
        is_recurring=recurring is not None,
        recurrence_rule=RecurrenceRule(recurring.upper()) if recurring else None,
        recurrence_end_date=end_date,
    )

    try:
        created = service.create_transaction(intent, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if len(created) == 1:
        click.echo(f"Created transaction {created[0].id} ({created[0].status.value})")
    else:
        click.echo(f"Created {len(created)} installments (series {created[0].id})")
        for txn in created:
            click.echo(f"  {txn.date} | {txn.amount.format():>12s} | {txn.description}")


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", help="this-month, this-year, last-month or last-year")
@click.option("--direction", type=_choice(Direction))
@click.option("--method", "funding_method", type=_choice(FundingMethod))
@click.option("--status", type=_choice(TransactionStatus))
@click.option("--category", "category_id", help="Category identifier")
@click.option("--account", help="Bank account name or ID")
@click.option("--card", help="Credit card name, last four digits or ID")
@click.option("--installments-only", is_flag=True, help="Only installment purchases")
@click.option("--include-deleted", is_flag=True, help="Also show deleted transactions")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    direction: str | None,
    funding_method: str | None,
    status: str | None,
    category_id: str | None,
    account: str | None,
    card: str | None,
    installments_only: bool,
    include_deleted: bool,
):
    """View transactions with optional filters."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = TransactionService(db)

    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)

    filters = {}
    if account is not None:
        filters["bank_account_id"] = resolve_bank_account_or_exit(ctx, BankAccountService(db), user_id, account)
    if card is not None:
        filters["credit_card_id"] = resolve_credit_card_or_exit(ctx, CreditCardService(db), user_id, card)
    if direction is not None:
        filters["direction"] = Direction(direction.upper())
    if funding_method is not None:
        filters["funding_method"] = FundingMethod(funding_method.upper())
    if status is not None:
        filters["status"] = TransactionStatus(status.upper())
    if installments_only:
        filters["is_installment"] = True

    transactions = service.list_transactions(
        user_id,
        start_date=start,
        end_date=end,
        category_id=category_id,
        include_deleted=include_deleted,
        **filters,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 120)
    for txn in transactions:
        click.echo(_format_row(txn))


@transaction_group.command("show")
@click.argument("transaction_id")
@click.pass_context
def show_transaction(ctx, transaction_id: str):
    """Show all fields of a transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        txn = service.get_transaction(transaction_id, ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Transaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Description: {txn.description}")
    click.echo(f"  Amount: {txn.amount.format()} ({txn.direction.value})")
    click.echo(f"  Method: {txn.funding_method.value}")
    click.echo(f"  Status: {txn.status.value}")
    if txn.bank_account_id:
        click.echo(f"  Bank account: {txn.bank_account_id}")
    if txn.credit_card_id:
        click.echo(f"  Credit card: {txn.credit_card_id}")
    if txn.is_installment:
        click.echo(f"  Installment: {txn.installment_number}/{txn.total_installments} (series {txn.parent_id})")
    if txn.is_recurring:
        until = f" until {txn.recurrence_end_date}" if txn.recurrence_end_date else ""
        click.echo(f"  Recurring: {txn.recurrence_rule.value}{until}")
    if txn.category_id:
        click.echo(f"  Category: {txn.category_id}")
    if txn.bill_id:
        click.echo(f"  Bill: {txn.bill_id}")


@transaction_group.command("status")
@click.argument("transaction_id")
@click.argument("new_status", type=_choice(TransactionStatus))
@click.pass_context
def change_status(ctx, transaction_id: str, new_status: str) -> None:
    """Move a transaction to PENDING, COMPLETED or CANCELLED.

    Completing a transaction on a bank account applies it to the balance;
    leaving COMPLETED reverses it.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        txn = service.update_status(transaction_id, TransactionStatus(new_status.upper()), ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Transaction {txn.id} is now {txn.status.value}")


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--description", help="Transaction description")
@click.option("--amount", help="Transaction amount")
@click.option("--direction", type=_choice(Direction))
@click.option("--date", "txn_date", help="Transaction date")
@click.option("--category", "category_id", help="Category identifier, or empty string to clear")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    description: str | None,
    amount: str | None,
    direction: str | None,
    txn_date: str | None,
    category_id: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Use --category "" to clear the category.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    parsed_date = None
    if txn_date is not None:
        try:
            parsed_date = parse_date(txn_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    clear_category = category_id == ""
    try:
        service.update_transaction(
            transaction_id=transaction_id,
            user_id=ctx.obj["user_id"],
            description=description,
            amount=txn_amount,
            direction=Direction(direction.upper()) if direction else None,
            date=parsed_date,
            category_id=None if clear_category else category_id,
            clear_category=clear_category,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Deleting the first installment of a series deletes the whole series.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        count = service.delete_transaction(transaction_id, ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {count} transaction(s)")


@transaction_group.command("restore")
@click.argument("transaction_id")
@click.pass_context
def restore_transaction(ctx, transaction_id: str) -> None:
    """Restore a deleted transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        count = service.restore_transaction(transaction_id, ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored {count} transaction(s)")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
