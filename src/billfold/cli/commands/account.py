"""Bank account management commands."""

import click
from billfold.cli.account_resolution import resolve_bank_account_or_exit
from billfold.cli.error_handling import handle_domain_error
from billfold.domain.bank_account import BankAccountService
from billfold.domain.entities import AccountType
from billfold.domain.errors import DomainError
from billfold.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    default=AccountType.CHECKING.value,
    show_default=True,
    help="Account type",
)
@click.option("--balance", help="Opening balance (e.g., 1500.00)")
@click.pass_context
def create_account(ctx, name: str, account_type: str, balance: str | None):
    """Create a new bank account.

    Examples:
        billfold account create "Checking" --balance 1500.00
        billfold account create "Rainy Day" --type SAVINGS
    """
    db = ctx.obj["db"]
    service = BankAccountService(db)

    initial_balance = None
    if balance is not None:
        try:
            initial_balance = parse_amount(balance)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        account = service.create_account(
            user_id=ctx.obj["user_id"],
            name=name,
            account_type=AccountType(account_type.upper()),
            initial_balance=initial_balance,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{account.name}' (ID: {account.id})")


@account_group.command("list")
@click.option("--include-deleted", is_flag=True, help="Also show deleted accounts")
@click.pass_context
def list_accounts(ctx, include_deleted: bool):
    """List bank accounts."""
    db = ctx.obj["db"]
    service = BankAccountService(db)

    accounts = service.list_accounts(ctx.obj["user_id"], include_deleted=include_deleted)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 90)
    for acc in accounts:
        marker = " (deleted)" if acc.deleted else ""
        click.echo(
            f"{acc.id} | {acc.name:20s} | {acc.account_type.value:8s} | {acc.balance.format():>14s}{marker}"
        )


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    help="New account type",
)
@click.pass_context
def update_account(ctx, account: str, name: str | None, account_type: str | None) -> None:
    """Rename an account or change its type.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = BankAccountService(db)
    account_id = resolve_bank_account_or_exit(ctx, service, user_id, account)

    try:
        updated = service.update_account(
            account_id,
            user_id,
            name=name,
            account_type=AccountType(account_type.upper()) if account_type else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account '{updated.name}'")


@account_group.command("set-balance")
@click.argument("account", metavar="ACCOUNT")
@click.argument("balance", metavar="BALANCE")
@click.pass_context
def set_balance(ctx, account: str, balance: str) -> None:
    """Overwrite an account balance to match a bank statement.

    Examples:
        billfold account set-balance "Checking" 1234.56
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = BankAccountService(db)
    account_id = resolve_bank_account_or_exit(ctx, service, user_id, account)

    try:
        amount = parse_amount(balance)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        updated = service.set_balance(account_id, amount, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Balance of '{updated.name}' set to {updated.balance.format()}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account and its transactions.

    The account can be brought back, together with the transactions deleted
    with it, using 'account restore'.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = BankAccountService(db)
    account_id = resolve_bank_account_or_exit(ctx, service, user_id, account)

    if not yes and not click.confirm(f"Are you sure you want to delete account {account}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        count = service.delete_account(account_id, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account {account_id} and {count} transaction(s)")


@account_group.command("restore")
@click.argument("account_id", metavar="ACCOUNT_ID")
@click.pass_context
def restore_account(ctx, account_id: str) -> None:
    """Restore a deleted account by ID."""
    db = ctx.obj["db"]
    service = BankAccountService(db)

    try:
        count = service.restore_account(account_id, ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored account {account_id} and {count} transaction(s)")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
