"""CLI error handling helpers."""

import click

from billfold.domain.errors import DomainError, LimitExceededError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, LimitExceededError):
        click.echo(f"Over the limit by {(error.required - error.limit).format()}", err=True)
    ctx.exit(1)
