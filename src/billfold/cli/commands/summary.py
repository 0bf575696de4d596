"""Summary command."""

import click
from billfold.cli.date_filters import resolve_cli_date_range
from billfold.domain.summary import SummaryService


@click.command("summary")
@click.option("--start-date", help="Start of the cash flow window")
@click.option("--end-date", help="End of the cash flow window")
@click.option("--period", help="this-month, this-year, last-month or last-year")
@click.pass_context
def summary(ctx, start_date: str | None, end_date: str | None, period: str | None):
    """Show balances, credit card debt, pending amounts and cash flow.

    Cash flow counts completed transactions in the chosen window, or all
    of them when no window is given.

    Examples:
        billfold summary
        billfold summary --period this-month
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = SummaryService(db)

    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)

    overview = service.get_summary(user_id)
    flow = service.cash_flow(user_id, start_date=start, end_date=end)

    click.echo("\nOverview")
    click.echo("-" * 40)
    click.echo(f"Total balance:      {overview.total_balance.format():>15s}")
    click.echo(f"Total credit limit: {overview.total_credit_limit.format():>15s}")
    click.echo(f"Credit card debt:   {overview.credit_card_debt.format():>15s}")
    click.echo(f"Available credit:   {overview.available_credit.format():>15s}")
    click.echo(f"Pending income:     {overview.pending_income.format():>15s}")
    click.echo(f"Pending expenses:   {overview.pending_expenses.format():>15s}")

    window = "all time"
    if start or end:
        window = f"{start or '...'} to {end or '...'}"
    click.echo(f"\nCash flow ({window})")
    click.echo("-" * 40)
    click.echo(f"Income:             {flow.income.format():>15s}")
    click.echo(f"Expenses:           {flow.expenses.format():>15s}")
    click.echo(f"Net:                {flow.balance.format():>15s}")
    click.echo(f"Transactions:       {flow.transaction_count:>15d}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
