"""Monthly and yearly report commands."""

import json
from decimal import Decimal

import click

from xpense.cli.error_handling import handle_domain_error
from xpense.cli.palette import category_color
from xpense.cli.period_options import load_cli_transactions, resolve_cli_period
from xpense.domain.entities import Comparison, Period, Report, round_amount
from xpense.domain.errors import DomainError
from xpense.domain.report import ReportService

WIDTH = 80


def format_amount(value: Decimal) -> str:
    """Format an amount with thousands separators and 2 decimals."""
    return f"{round_amount(value):,.2f}"


def report_to_json(report: Report) -> str:
    """Serialize a report, attaching a stable color to each category."""
    data = report.to_dict()
    for section in ("current", "previous"):
        for entry in data[section]["by_category"]:
            entry["color"] = category_color(entry["key"])
    if data["top_category"] is not None:
        data["top_category"]["color"] = category_color(data["top_category"]["key"])
    return json.dumps(data, indent=2, ensure_ascii=False)


def _echo_row(label: str, value: str, indent: int = 0) -> None:
    click.echo(f"{' ' * indent}{label:<{50 - indent}} {value:>20}")


def _echo_comparison(title: str, comparison: Comparison, previous_period: Period) -> None:
    arrow = "↑" if comparison.delta >= 0 else "↓"
    change = f"{arrow} {format_amount(abs(comparison.delta))}"
    percent = f"{comparison.delta_percent}%"
    if not comparison.has_baseline:
        percent += " (no baseline)"
    _echo_row(f"{title} vs {previous_period.label}", change)
    more_or_less = "More" if comparison.delta > 0 else "Less"
    _echo_row(f"    {more_or_less} than {previous_period.label}", percent)


def display_report(report: Report) -> None:
    """Print a report as text tables."""
    click.echo(f"\nReport: {report.period.label} ({report.reference_timezone})")
    click.echo("-" * WIDTH)
    _echo_row("Earnings", format_amount(report.current.total_inflow))
    _echo_row("Expense", format_amount(report.current.total_outflow))
    if report.current.total_transfers:
        _echo_row("Transfers", format_amount(report.current.total_transfers))
    _echo_row("Net Savings", format_amount(report.net_savings))
    click.echo("-" * WIDTH)

    _echo_comparison("Expense", report.outflow_comparison, report.previous_period)
    _echo_comparison("Earnings", report.inflow_comparison, report.previous_period)
    click.echo("-" * WIDTH)

    if report.top_category is not None:
        _echo_row(
            f"Top Spending Category: {report.top_category.label}",
            format_amount(report.top_category.value),
        )
        click.echo("-" * WIDTH)

    if report.by_category:
        click.echo("\nCategory Breakdown:")
        click.echo("-" * WIDTH)
        _echo_row("Category", "Total")
        click.echo("-" * WIDTH)
        for entry in report.by_category:
            _echo_row(entry.label, format_amount(entry.value), indent=4)
    else:
        click.echo(f"\nNo expense data available for {report.period.label}")

    if report.payment_methods:
        click.echo("\nPayment Methods:")
        click.echo("-" * WIDTH)
        for entry in report.payment_methods:
            _echo_row(entry.label, format_amount(entry.value), indent=4)

    if report.monthly_series:
        click.echo("\nMonthly Earnings vs Expenses:")
        click.echo("-" * WIDTH)
        click.echo(f"{'Month':<30} {'Earnings':>20} {'Expense':>20}")
        click.echo("-" * WIDTH)
        for month in report.monthly_series:
            click.echo(
                f"{month.period.label:<30} {format_amount(month.inflow):>20} "
                f"{format_amount(month.outflow):>20}"
            )


def _run_report(ctx, transactions_file, period, include_transfers, include_inflow, as_json, strict):
    config = ctx.obj["config"].with_overrides(
        include_transfers_in_breakdown=include_transfers or None,
        include_inflow_in_breakdown=include_inflow or None,
    )
    transactions = load_cli_transactions(ctx, transactions_file, strict)
    try:
        report = ReportService(config).build_report(transactions, period)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(report_to_json(report))
    else:
        display_report(report)


def report_options(func):
    """Options shared by the report commands."""
    func = click.option(
        "--strict", is_flag=True, help="Abort on the first invalid row instead of skipping it"
    )(func)
    func = click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")(func)
    func = click.option(
        "--include-inflow", is_flag=True, help="Include earnings categories in the breakdown"
    )(func)
    func = click.option(
        "--include-transfers", is_flag=True, help="Show bank transfers as a breakdown entry"
    )(func)
    return func


@click.command("monthly")
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--month", help="Month to report (YYYY-MM or 'March 2024')")
@click.option("--this-month", is_flag=True, help="Report on the current month (default)")
@click.option("--last-month", is_flag=True, help="Report on the previous month")
@report_options
@click.pass_context
def monthly(
    ctx,
    transactions_file: str,
    month: str,
    this_month: bool,
    last_month: bool,
    include_transfers: bool,
    include_inflow: bool,
    as_json: bool,
    strict: bool,
):
    """Show the monthly report compared with the previous month."""
    period = resolve_cli_period(
        ctx,
        period_str=month,
        period_flags={"this-month": this_month, "last-month": last_month},
        default_period="this-month",
        want_month=True,
    )
    _run_report(ctx, transactions_file, period, include_transfers, include_inflow, as_json, strict)


@click.command("yearly")
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--year", help="Year to report (YYYY)")
@click.option("--this-year", is_flag=True, help="Report on the current year (default)")
@click.option("--last-year", is_flag=True, help="Report on the previous year")
@report_options
@click.pass_context
def yearly(
    ctx,
    transactions_file: str,
    year: str,
    this_year: bool,
    last_year: bool,
    include_transfers: bool,
    include_inflow: bool,
    as_json: bool,
    strict: bool,
):
    """Show the yearly report with monthly earnings and expenses."""
    period = resolve_cli_period(
        ctx,
        period_str=year,
        period_flags={"this-year": this_year, "last-year": last_year},
        default_period="this-year",
        want_month=False,
    )
    _run_report(ctx, transactions_file, period, include_transfers, include_inflow, as_json, strict)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(monthly)
    cli.add_command(yearly)
