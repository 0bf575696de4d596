"""Main CLI entry point."""

import getpass

import click
from billfold.database.factories import create_sqlite_database
from billfold.logging_config import DEFAULT_LOG_LEVEL, setup_logging

# Import and register all commands at module level
from billfold.cli.commands import (
    account,
    card,
    transaction,
    bill,
    summary,
)


def _default_user() -> str:
    return getpass.getuser()


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BILLFOLD_DB_PATH environment variable)",
    envvar="BILLFOLD_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    envvar="BILLFOLD_USER",
    default=_default_user,
    show_default="login name",
    help="User the commands act for",
)
@click.option(
    "--log-level",
    envvar="BILLFOLD_LOG_LEVEL",
    default=DEFAULT_LOG_LEVEL,
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for diagnostics on stderr",
)
@click.option(
    "--json-logs",
    is_flag=True,
    envvar="BILLFOLD_LOG_JSON",
    help="Emit logs as JSON lines",
)
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str, log_level: str, json_logs: bool):
    """Billfold - Personal finance ledger.

    Track bank accounts and credit cards, record purchases (including
    installment purchases), and generate and pay monthly credit card bills.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level, json_format=json_logs)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user_id"] = user_id
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
card.register_commands(cli)
transaction.register_commands(cli)
bill.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
