"""Transaction viewing commands."""

import click

from xpense.cli.commands.report import format_amount
from xpense.cli.error_handling import handle_domain_error
from xpense.cli.period_options import load_cli_transactions
from xpense.domain.entities import Flow
from xpense.domain.errors import DomainError
from xpense.domain.period import period_bounds, resolve_timezone, select_in_period
from xpense.utils.date_parser import parse_period

TIME_FORMAT = "%d %b %Y %H:%M"


@click.command("list")
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--period", "period_str", help="Only show a month (YYYY-MM) or year (YYYY)")
@click.option("--category", help="Only show one category (case-insensitive)")
@click.option("--verbose", "-v", is_flag=True, help="Show details and payment method")
@click.option("--strict", is_flag=True, help="Abort on the first invalid row instead of skipping it")
@click.pass_context
def list_transactions(
    ctx, transactions_file: str, period_str: str, category: str, verbose: bool, strict: bool
):
    """List transactions, newest first."""
    config = ctx.obj["config"]
    zone = resolve_timezone(config.reference_timezone)
    transactions = load_cli_transactions(ctx, transactions_file, strict)

    bounds = None
    if period_str:
        try:
            period = parse_period(period_str)
            bounds = period_bounds(period, zone)
        except DomainError as e:
            handle_domain_error(ctx, e)
        transactions = select_in_period(transactions, period, zone)

    if category:
        key = " ".join(category.split()).lower()
        transactions = [txn for txn in transactions if txn.category == key]

    if not transactions:
        click.echo("No transactions found.")
        return

    transactions = sorted(transactions, key=lambda txn: txn.timestamp, reverse=True)

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if bounds is not None:
        start, end = bounds
        click.echo(
            f"From {start.strftime(TIME_FORMAT)} up to {end.strftime(TIME_FORMAT)} "
            f"({config.reference_timezone})"
        )
    click.echo("-" * 100)
    click.echo(f"{'ID':<10} {'Date':<18} {'Type':<10} {'Amount':>14} {'Category':<24} {'Method':<10}")
    click.echo("-" * 100)

    for txn in transactions:
        sign = "+" if txn.flow is Flow.INFLOW else "-" if txn.flow is Flow.OUTFLOW else " "
        amount_str = f"{sign}{format_amount(txn.amount)}"
        when = txn.timestamp.astimezone(zone).strftime(TIME_FORMAT)
        click.echo(
            f"{txn.id[:10]:<10} {when:<18} {txn.source_flow or txn.flow.value:<10} "
            f"{amount_str:>14} {txn.category_label[:24]:<24} {(txn.payment_method or ''):<10}"
        )
        if verbose and txn.detail:
            click.echo(f"{'':<10} {txn.detail}")


def register_commands(cli):
    """Register list command with main CLI."""
    cli.add_command(list_transactions)
