"""CLI error handling helpers."""

import click

from xpense.domain.errors import DomainError


def format_cli_error(error: DomainError | ValueError | OSError) -> str:
    """Render an error for stderr, naming the failing record when known."""
    record_index = getattr(error, "record_index", None)
    if record_index is not None:
        return f"Error: Record {record_index + 1}: {error}"
    return f"Error: {error}"


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError | OSError) -> None:
    """Print the error and exit with failure."""
    click.echo(format_cli_error(error), err=True)
    ctx.exit(1)
