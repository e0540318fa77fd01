"""CLI helpers for period resolution and transaction loading."""

from datetime import date

import click

from xpense.cli.error_handling import handle_domain_error
from xpense.config import ReportConfig
from xpense.domain.entities import Period, Transaction
from xpense.domain.errors import DomainError
from xpense.domain.transaction_import import TransactionLoader
from xpense.utils.date_parser import get_relative_period, parse_period


def resolve_cli_period(
    ctx,
    *,
    period_str: str | None,
    period_flags: dict[str, bool],
    default_period: str,
    want_month: bool,
    today: date | None = None,
) -> Period:
    """Resolve the report period from a period flag or an explicit value."""
    flag_count = sum(1 for is_set in period_flags.values() if is_set)
    flag_names = ", ".join(f"--{name}" for name in period_flags)

    if flag_count > 1:
        click.echo(
            f"Error: Only one period option ({flag_names}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if flag_count > 0 and period_str:
        click.echo(
            f"Error: Period options ({flag_names}) cannot be combined with an explicit period.",
            err=True,
        )
        ctx.exit(1)

    try:
        if flag_count == 1:
            name = next(name for name, is_set in period_flags.items() if is_set)
            period = get_relative_period(name, today)
        elif period_str:
            period = parse_period(period_str, today)
        else:
            period = get_relative_period(default_period, today)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if want_month and not period.is_month:
        click.echo(f"Error: Expected a month (YYYY-MM), got '{period.key}'", err=True)
        ctx.exit(1)
    if not want_month and period.is_month:
        click.echo(f"Error: Expected a year (YYYY), got '{period.key}'", err=True)
        ctx.exit(1)

    return period


def load_cli_transactions(ctx, transactions_file: str, strict: bool) -> list[Transaction]:
    """Load transactions for a command, reporting skipped rows on stderr."""
    config: ReportConfig = ctx.obj["config"]
    loader = TransactionLoader(default_timezone=config.reference_timezone, strict=strict)

    try:
        result = loader.load(transactions_file)
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)

    if result["errors"]:
        click.echo(f"Skipped {len(result['errors'])} invalid row(s):", err=True)
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)

    return result["transactions"]
