"""Tests for the command line interface."""

import json

from xpense.cli.error_handling import format_cli_error
from xpense.cli.main import cli
from xpense.cli.palette import CATEGORY_COLORS, category_color
from xpense.domain.errors import ValidationError


def test_help(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "monthly" in result.output
    assert "yearly" in result.output


def test_monthly_report(cli_runner, transactions_file):
    result = cli_runner.invoke(cli, ["monthly", transactions_file, "--month", "2024-03"])

    assert result.exit_code == 0
    assert "Report: March 2024 (UTC)" in result.output
    assert "200.00" in result.output
    assert "80.00" in result.output
    assert "120.00" in result.output
    assert "Top Spending Category: Food" in result.output
    assert "Expense vs February 2024" in result.output
    assert "100.0%" in result.output
    # Transfers are reported separately, not in the breakdown
    assert "Transfers" in result.output
    assert "500.00" in result.output


def test_monthly_report_json(cli_runner, transactions_file):
    result = cli_runner.invoke(
        cli, ["monthly", transactions_file, "--month", "March 2024", "--json"]
    )

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["period"] == "2024-03"
    assert data["net_savings"] == "120.00"
    assert data["current"]["by_category"][0]["label"] == "Food"
    assert data["current"]["by_category"][0]["color"] == CATEGORY_COLORS["food"]
    assert data["top_category"]["label"] == "Food"


def test_monthly_include_transfers(cli_runner, transactions_file):
    result = cli_runner.invoke(
        cli, ["monthly", transactions_file, "--month", "2024-03", "--include-transfers", "--json"]
    )

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["current"]["by_category"][0]["is_transfer"] is True
    assert data["top_category"]["label"] == "Food"


def test_monthly_rejects_year(cli_runner, transactions_file):
    result = cli_runner.invoke(cli, ["monthly", transactions_file, "--month", "2024"])

    assert result.exit_code == 1
    assert "Expected a month" in result.output


def test_monthly_rejects_two_period_flags(cli_runner, transactions_file):
    result = cli_runner.invoke(
        cli, ["monthly", transactions_file, "--this-month", "--last-month"]
    )

    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_monthly_invalid_period(cli_runner, transactions_file):
    result = cli_runner.invoke(cli, ["monthly", transactions_file, "--month", "soon"])

    assert result.exit_code == 1
    assert "Unknown period" in result.output


def test_yearly_report(cli_runner, transactions_file):
    result = cli_runner.invoke(cli, ["yearly", transactions_file, "--year", "2024"])

    assert result.exit_code == 0
    assert "Report: 2024 (UTC)" in result.output
    assert "Monthly Earnings vs Expenses" in result.output
    assert "February 2024" in result.output
    assert "Expense vs 2023" in result.output


def test_timezone_option(cli_runner, transactions_file):
    result = cli_runner.invoke(
        cli,
        ["--timezone", "Asia/Dhaka", "monthly", transactions_file, "--month", "2024-01", "--json"],
    )

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["reference_timezone"] == "Asia/Dhaka"
    assert data["current"]["total_outflow"] == "25.50"


def test_timezone_from_environment(cli_runner, transactions_file):
    result = cli_runner.invoke(
        cli,
        ["monthly", transactions_file, "--month", "2024-01", "--json"],
        env={"XPENSE_TIMEZONE": "Asia/Dhaka"},
    )

    assert result.exit_code == 0
    assert json.loads(result.output)["reference_timezone"] == "Asia/Dhaka"


def test_unknown_timezone(cli_runner, transactions_file):
    result = cli_runner.invoke(
        cli, ["--timezone", "Nowhere/Land", "monthly", transactions_file]
    )

    assert result.exit_code == 1
    assert "Unknown timezone" in result.output


def test_balance(cli_runner, transactions_file):
    result = cli_runner.invoke(cli, ["balance", transactions_file])

    assert result.exit_code == 0
    assert "Total Balance" in result.output
    assert "204.50" in result.output
    assert "350.00" in result.output
    assert "145.50" in result.output


def test_balance_empty(cli_runner, tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("[]", encoding="utf-8")

    result = cli_runner.invoke(cli, ["balance", str(path)])

    assert result.exit_code == 0
    assert "No transactions found" in result.output


def test_invalid_rows_are_reported(cli_runner, tmp_path):
    path = tmp_path / "export.json"
    path.write_text(
        json.dumps(
            [
                {"id": "1", "type": "expense", "amount": "5", "date": "2024-03-05"},
                {"id": "2", "type": "refund", "amount": "5", "date": "2024-03-05"},
            ]
        ),
        encoding="utf-8",
    )

    result = cli_runner.invoke(cli, ["balance", str(path)])

    assert result.exit_code == 0
    assert "Skipped 1 invalid row(s)" in result.output
    assert "refund" in result.output


def test_strict_aborts_on_invalid_row(cli_runner, tmp_path):
    path = tmp_path / "export.json"
    path.write_text(
        json.dumps([{"id": "1", "type": "refund", "amount": "5", "date": "2024-03-05"}]),
        encoding="utf-8",
    )

    result = cli_runner.invoke(cli, ["monthly", str(path), "--month", "2024-03", "--strict"])

    assert result.exit_code == 1
    assert "Error: Record 1: Unknown transaction type 'refund'" in result.output


def test_list_transactions(cli_runner, transactions_file):
    result = cli_runner.invoke(cli, ["list", transactions_file, "--period", "2024-03"])

    assert result.exit_code == 0
    assert "Found 4 transaction(s)" in result.output
    assert "From 01 Mar 2024 00:00 up to 01 Apr 2024 00:00 (UTC)" in result.output
    assert "bank_deposit" in result.output
    assert "Transport" not in result.output


def test_list_by_category(cli_runner, transactions_file):
    result = cli_runner.invoke(cli, ["list", transactions_file, "--category", "FOOD"])

    assert result.exit_code == 0
    assert "Found 2 transaction(s)" in result.output


def test_list_no_match(cli_runner, transactions_file):
    result = cli_runner.invoke(cli, ["list", transactions_file, "--period", "2020"])

    assert result.exit_code == 0
    assert "No transactions found" in result.output


def test_list_rejects_period_at_calendar_edge(cli_runner, transactions_file):
    result = cli_runner.invoke(cli, ["list", transactions_file, "--period", "9999-12"])

    assert result.exit_code == 1
    assert "edge of the supported calendar" in result.output


def test_monthly_report_for_first_supported_month(cli_runner, transactions_file):
    result = cli_runner.invoke(cli, ["monthly", transactions_file, "--month", "0001-01"])

    assert result.exit_code == 1
    assert "Error: Period January 1 is at the edge" in result.output


def test_format_cli_error_without_record_index():
    assert format_cli_error(ValidationError("bad input")) == "Error: bad input"


def test_format_cli_error_with_record_index():
    error = ValidationError("bad input")
    error.record_index = 4

    assert format_cli_error(error) == "Error: Record 5: bad input"


def test_category_color_is_stable():
    assert category_color("Groceries") == category_color("groceries")
    assert category_color("Food") == CATEGORY_COLORS["food"]
