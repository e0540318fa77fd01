"""Tests for the report building service."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from xpense.config import ReportConfig
from xpense.domain.entities import Direction, Period
from xpense.domain.errors import ConfigurationError, ValidationError
from xpense.domain.normalizer import normalize_all
from xpense.domain.report import ReportService, build_report


@pytest.fixture
def history(history_records):
    return normalize_all(history_records)


def test_march_scenario_report(march_transactions):
    report = build_report(march_transactions, Period(2024, 3))

    assert report.current.total_inflow == Decimal("200")
    assert report.current.total_outflow == Decimal("80")
    assert [(entry.label, entry.value) for entry in report.by_category] == [("Food", Decimal("80"))]
    assert report.net_savings == Decimal("120")
    assert report.top_category.label == "Food"
    assert report.previous_period == Period(2024, 2)


def test_empty_report():
    report = build_report([], Period(2024, 3))

    assert report.current.total_inflow == 0
    assert report.current.total_outflow == 0
    assert report.by_category == ()
    assert report.top_category is None
    assert report.net_savings == 0
    assert report.payment_methods == ()


def test_comparisons_against_previous_month(history):
    report = build_report(history, Period(2024, 3))

    # February: 40 expense, 150 earnings
    assert report.previous.total_outflow == Decimal("40")
    assert report.outflow_comparison.delta == Decimal("40")
    assert report.outflow_comparison.delta_percent == Decimal("100.0")
    assert report.outflow_comparison.direction is Direction.INCREASE
    assert report.inflow_comparison.delta == Decimal("50")
    assert report.inflow_comparison.delta_percent == Decimal("33.3")


def test_january_compares_with_december(history):
    report = build_report(history, Period(2024, 1))

    assert report.previous_period == Period(2023, 12)
    assert report.previous.total_outflow == Decimal("25.50")
    assert report.outflow_comparison.delta == Decimal("-25.50")
    assert report.outflow_comparison.direction is Direction.DECREASE


def test_transfers_excluded_from_totals_and_top_category(history):
    config = ReportConfig(include_transfers_in_breakdown=True)
    report = ReportService(config).build_report(history, Period(2024, 3))

    assert report.current.total_transfers == Decimal("500")
    assert report.current.total_outflow == Decimal("80")
    assert report.by_category[0].is_transfer
    assert report.top_category.label == "Food"


def test_top_category_none_when_only_transfers(make_transaction):
    from xpense.domain.entities import Flow

    transactions = [make_transaction(flow=Flow.TRANSFER, category="bank", amount="100")]
    config = ReportConfig(include_transfers_in_breakdown=True)

    report = ReportService(config).build_report(transactions, Period(2024, 3))

    assert len(report.by_category) == 1
    assert report.top_category is None


def test_reference_timezone_applies_to_both_periods(history):
    # Dec 31 2023 20:00 UTC is already Jan 1 2024 in Dhaka (UTC+6)
    utc_report = build_report(history, Period(2024, 1))
    report = build_report(history, Period(2024, 1), reference_timezone="Asia/Dhaka")

    assert utc_report.current.total_outflow == 0
    assert report.reference_timezone == "Asia/Dhaka"
    assert report.current.total_outflow == Decimal("25.50")
    assert report.previous.total_outflow == 0
    assert not report.outflow_comparison.has_baseline
    assert report.outflow_comparison.delta_percent == 0


def test_year_report_has_monthly_series(history):
    report = build_report(history, Period(2024))

    assert report.previous_period == Period(2023)
    assert len(report.monthly_series) == 12
    assert report.monthly_series[2].outflow == Decimal("80")
    assert report.monthly_series[1].inflow == Decimal("150")
    assert report.previous.total_outflow == Decimal("25.50")


def test_month_report_has_no_monthly_series(history):
    assert build_report(history, Period(2024, 3)).monthly_series == ()


def test_payment_methods_in_report(history):
    report = build_report(history, Period(2024, 3))
    assert [(entry.label, entry.value) for entry in report.payment_methods] == [
        ("cash", Decimal("50")),
        ("bkash", Decimal("30")),
    ]


def test_report_is_idempotent(history):
    service = ReportService()
    assert service.build_report(history, Period(2024, 3)) == service.build_report(
        history, Period(2024, 3)
    )


def test_unknown_timezone_raises(history):
    with pytest.raises(ConfigurationError):
        build_report(history, Period(2024, 3), reference_timezone="Atlantis/Capital")


def test_report_to_dict_rounds_for_presentation(make_transaction):
    transactions = [
        make_transaction(category="food", amount="10.005"),
        make_transaction(category="food", amount="0.001"),
    ]

    data = build_report(transactions, Period(2024, 3)).to_dict()

    assert data["period"] == "2024-03"
    assert data["period_label"] == "March 2024"
    assert data["current"]["total_outflow"] == "10.01"
    assert data["current"]["by_category"][0] == {
        "key": "food",
        "label": "Food",
        "value": "10.01",
        "is_transfer": False,
    }
    assert data["outflow_comparison"]["direction"] == "increase"
    assert data["outflow_comparison"]["has_baseline"] is False
    assert data["top_category"]["label"] == "Food"


def test_summarize_balance(history):
    result = ReportService().summarize_balance(history)

    assert result.total_inflow == Decimal("350")
    assert result.total_outflow == Decimal("145.50")
    assert result.balance == Decimal("204.50")
    assert result.aggregate.total_transfers == Decimal("500")


def test_report_to_dict_handles_very_large_amounts(make_transaction):
    previous = make_transaction(amount="0.01", timestamp=datetime(2024, 2, 10, tzinfo=timezone.utc))
    current = make_transaction(amount="1e30")

    data = build_report([previous, current], Period(2024, 3)).to_dict()

    assert data["current"]["total_outflow"] == "1" + "0" * 30 + ".00"
    assert data["outflow_comparison"]["has_baseline"] is True


def test_first_supported_month_has_no_previous_period():
    with pytest.raises(ValidationError):
        build_report([], Period(1, 1))
