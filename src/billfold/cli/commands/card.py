"""Credit card management commands."""

import click
from billfold.cli.account_resolution import resolve_credit_card_or_exit
from billfold.cli.error_handling import handle_domain_error
from billfold.domain.credit_card import CreditCardService
from billfold.domain.credit_guard import CreditExposureGuard
from billfold.domain.errors import DomainError
from billfold.utils.amount_parser import parse_amount

DAY = click.IntRange(1, 31)


@click.group()
def card_group():
    """Manage credit cards."""
    pass


@card_group.command("create")
@click.argument("name", metavar="CARD_NAME")
@click.option("--last-four", required=True, help="Last four digits of the card number")
@click.option("--limit", "limit", required=True, help="Credit limit (e.g., 5000.00)")
@click.option("--closing-day", required=True, type=DAY, help="Day of month the statement closes")
@click.option("--due-day", required=True, type=DAY, help="Day of month the statement is due")
@click.pass_context
def create_card(ctx, name: str, last_four: str, limit: str, closing_day: int, due_day: int):
    """Create a new credit card.

    Examples:
        billfold card create "Visa" --last-four 1234 --limit 5000 --closing-day 10 --due-day 17
    """
    db = ctx.obj["db"]
    service = CreditCardService(db)

    try:
        card_limit = parse_amount(limit)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        card = service.create_card(
            user_id=ctx.obj["user_id"],
            name=name,
            last_four_digits=last_four,
            limit=card_limit,
            closing_day=closing_day,
            due_day=due_day,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created card '{card.name}' (ID: {card.id})")


@card_group.command("list")
@click.option("--include-deleted", is_flag=True, help="Also show deleted cards")
@click.pass_context
def list_cards(ctx, include_deleted: bool):
    """List credit cards."""
    db = ctx.obj["db"]
    service = CreditCardService(db)

    cards = service.list_cards(ctx.obj["user_id"], include_deleted=include_deleted)
    if not cards:
        click.echo("No credit cards found.")
        return

    click.echo("\nCredit cards:")
    click.echo("-" * 100)
    for card in cards:
        marker = " (deleted)" if card.deleted else ""
        click.echo(
            f"{card.id} | {card.name:15s} | **** {card.last_four_digits} | "
            f"limit {card.limit.format():>12s} | closes {card.closing_day:2d} | due {card.due_day:2d}{marker}"
        )


@card_group.command("show")
@click.argument("card", metavar="CARD")
@click.pass_context
def show_card(ctx, card: str):
    """Show a card with its current exposure and available credit.

    CARD can be a card name, its last four digits or its ID.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = CreditCardService(db)
    card_id = resolve_credit_card_or_exit(ctx, service, user_id, card)

    card_obj = service.get_card(card_id, user_id)
    guard = CreditExposureGuard(db)
    exposure = guard.exposure(card_obj)

    click.echo(f"Card: {card_obj.name} (**** {card_obj.last_four_digits})")
    click.echo(f"  ID: {card_obj.id}")
    click.echo(f"  Limit: {card_obj.limit.format()}")
    click.echo(f"  Pending: {exposure.format()}")
    click.echo(f"  Available: {(card_obj.limit - exposure).format()}")
    click.echo(f"  Closing day: {card_obj.closing_day}")
    click.echo(f"  Due day: {card_obj.due_day}")


@card_group.command("update")
@click.argument("card", metavar="CARD")
@click.option("--name", help="New card name")
@click.option("--last-four", help="New last four digits")
@click.option("--limit", "limit", help="New credit limit")
@click.option("--closing-day", type=DAY, help="New closing day")
@click.option("--due-day", type=DAY, help="New due day")
@click.pass_context
def update_card(
    ctx,
    card: str,
    name: str | None,
    last_four: str | None,
    limit: str | None,
    closing_day: int | None,
    due_day: int | None,
) -> None:
    """Update a credit card.

    Bills already generated keep their dates.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = CreditCardService(db)
    card_id = resolve_credit_card_or_exit(ctx, service, user_id, card)

    card_limit = None
    if limit is not None:
        try:
            card_limit = parse_amount(limit)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        updated = service.update_card(
            card_id,
            user_id,
            name=name,
            last_four_digits=last_four,
            limit=card_limit,
            closing_day=closing_day,
            due_day=due_day,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated card '{updated.name}'")


@card_group.command("delete")
@click.argument("card", metavar="CARD")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_card(ctx, card: str, yes: bool) -> None:
    """Delete a card and its transactions."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = CreditCardService(db)
    card_id = resolve_credit_card_or_exit(ctx, service, user_id, card)

    if not yes and not click.confirm(f"Are you sure you want to delete card {card}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        count = service.delete_card(card_id, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted card {card_id} and {count} transaction(s)")


@card_group.command("restore")
@click.argument("card_id", metavar="CARD_ID")
@click.pass_context
def restore_card(ctx, card_id: str) -> None:
    """Restore a deleted card by ID."""
    db = ctx.obj["db"]
    service = CreditCardService(db)

    try:
        count = service.restore_card(card_id, ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored card {card_id} and {count} transaction(s)")


def register_commands(cli):
    """Register credit card commands with main CLI."""
    cli.add_command(card_group, name="card")
