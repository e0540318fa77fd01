"""Balance command."""

import json

import click

from xpense.cli.commands.report import WIDTH, format_amount
from xpense.cli.period_options import load_cli_transactions
from xpense.domain.report import ReportService


@click.command("balance")
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the totals as JSON")
@click.option("--strict", is_flag=True, help="Abort on the first invalid row instead of skipping it")
@click.pass_context
def balance(ctx, transactions_file: str, as_json: bool, strict: bool):
    """Show all-time balance, earnings and expense totals."""
    transactions = load_cli_transactions(ctx, transactions_file, strict)
    result = ReportService(ctx.obj["config"]).summarize_balance(transactions)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo("\nBalance:")
    click.echo("-" * WIDTH)
    click.echo(f"{'Total Balance':<50} {format_amount(result.balance):>20}")
    click.echo(f"{'Total Income':<50} {format_amount(result.total_inflow):>20}")
    click.echo(f"{'Total Expense':<50} {format_amount(result.total_outflow):>20}")
    if result.aggregate.total_transfers:
        transfers = format_amount(result.aggregate.total_transfers)
        click.echo(f"{'Bank Transfers':<50} {transfers:>20}")


def register_commands(cli):
    """Register balance command with main CLI."""
    cli.add_command(balance)
