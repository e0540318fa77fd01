"""Main CLI entry point."""

import click

from xpense.config import load_config
from xpense.domain.errors import DomainError
from xpense.logging_setup import configure_logging

# Import and register all commands at module level
from xpense.cli.commands import balance, report, view

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--timezone",
    help="IANA timezone used for month/year boundaries (overrides XPENSE_TIMEZONE environment variable)",
    envvar="XPENSE_TIMEZONE",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (overrides XPENSE_LOG_LEVEL environment variable)",
    envvar="XPENSE_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, timezone: str | None, log_level: str | None):
    """Xpense - Personal finance reports.

    Build monthly and yearly earnings/expense reports from a CSV or JSON
    export of your transactions.
    """
    ctx.ensure_object(dict)

    # Only resolve configuration when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if log_level:
            configure_logging(log_level)
        try:
            ctx.obj["config"] = load_config().with_overrides(reference_timezone=timezone)
        except DomainError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


# Register all commands
report.register_commands(cli)
balance.register_commands(cli)
view.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
