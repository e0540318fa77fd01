"""Report building domain service."""

from typing import Optional, Sequence

from xpense.config import ReportConfig
from xpense.domain.aggregator import (
    aggregate,
    monthly_series,
    payment_method_breakdown,
)
from xpense.domain.comparator import Metric, compare_aggregates
from xpense.domain.entities import (
    Aggregate,
    Balance,
    CategoryTotal,
    Period,
    Report,
    Transaction,
)
from xpense.domain.period import select_in_period
from xpense.logging_setup import get_logger

logger = get_logger(__name__)


class ReportService:
    """Service for building period reports from normalized transactions.

    The service holds configuration only. Every call recomputes from the
    transactions it is given, so callers decide what to cache.
    """

    def __init__(self, config: Optional[ReportConfig] = None):
        """Initialize report service.

        Args:
            config: Report configuration (defaults to ReportConfig())
        """
        self.config = config or ReportConfig()

    def aggregate(self, transactions: Sequence[Transaction]) -> Aggregate:
        """Aggregate transactions with the configured breakdown options."""
        return aggregate(
            transactions,
            include_transfers_in_breakdown=self.config.include_transfers_in_breakdown,
            include_inflow_in_breakdown=self.config.include_inflow_in_breakdown,
        )

    def build_report(self, transactions: Sequence[Transaction], period: Period) -> Report:
        """Build the report for a period and compare it with the previous one.

        Args:
            transactions: Normalized transactions, any period
            period: Month or year to report on

        Returns:
            Report for the period
        """
        zone = self.config.reference_timezone
        previous_period = period.previous()

        current = select_in_period(transactions, period, zone)
        previous = select_in_period(transactions, previous_period, zone)

        current_agg = self.aggregate(current)
        previous_agg = self.aggregate(previous)

        series = ()
        if not period.is_month:
            series = monthly_series(current, period.year, zone)

        logger.debug(
            "Built report for %s (%s): %d current, %d previous transactions",
            period.key,
            zone,
            current_agg.transaction_count,
            previous_agg.transaction_count,
        )

        return Report(
            period=period,
            previous_period=previous_period,
            reference_timezone=zone,
            current=current_agg,
            previous=previous_agg,
            inflow_comparison=compare_aggregates(current_agg, previous_agg, Metric.INFLOW),
            outflow_comparison=compare_aggregates(current_agg, previous_agg, Metric.OUTFLOW),
            net_savings=current_agg.total_inflow - current_agg.total_outflow,
            top_category=self.get_top_category(current_agg),
            payment_methods=payment_method_breakdown(current),
            monthly_series=series,
        )

    def get_top_category(self, agg: Aggregate) -> Optional[CategoryTotal]:
        """Return the largest non-transfer category, or None."""
        for entry in agg.by_category:
            if not entry.is_transfer:
                return entry
        return None

    def summarize_balance(self, transactions: Sequence[Transaction]) -> Balance:
        """Summarize all transactions regardless of period."""
        return Balance(aggregate=self.aggregate(transactions))


def build_report(
    transactions: Sequence[Transaction],
    period: Period,
    reference_timezone: Optional[str] = None,
    config: Optional[ReportConfig] = None,
) -> Report:
    """Build a report for a period.

    Args:
        transactions: Normalized transactions
        period: Month or year to report on
        reference_timezone: Overrides config.reference_timezone when given
        config: Report configuration (defaults to ReportConfig())

    Returns:
        Report
    """
    config = (config or ReportConfig()).with_overrides(reference_timezone=reference_timezone)
    return ReportService(config).build_report(transactions, period)
