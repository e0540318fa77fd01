"""Period-over-period comparison of aggregate metrics."""

from decimal import Decimal, localcontext
from enum import Enum

from xpense.domain.entities import (
    TENTHS,
    ZERO,
    Aggregate,
    Comparison,
    Direction,
    quantize_half_up,
)


class Metric(Enum):
    """Aggregate metric that can be compared between periods."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"
    NET_SAVINGS = "net_savings"


def metric_value(agg: Aggregate, metric: Metric) -> Decimal:
    """Read a metric from an aggregate."""
    if metric is Metric.INFLOW:
        return agg.total_inflow
    if metric is Metric.OUTFLOW:
        return agg.total_outflow
    return agg.net


def compare(current: Decimal, previous: Decimal) -> Comparison:
    """Compare a metric's current value against the previous period.

    When previous is zero, delta_percent is reported as 0 rather than
    undefined; Comparison.has_baseline tells the two cases apart.

    Args:
        current: Value for the current period
        previous: Value for the preceding period

    Returns:
        Comparison with delta, delta_percent (one decimal) and direction
    """
    current = Decimal(current)
    previous = Decimal(previous)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _exact_digits(current, previous))
        delta = current - previous

        if previous == 0:
            delta_percent = ZERO
        else:
            # Keep a few fraction digits of the ratio before the final rounding
            ctx.prec = max(ctx.prec, delta.adjusted() - previous.adjusted() + 8)
            delta_percent = quantize_half_up(delta * 100 / previous, TENTHS)

    direction = Direction.INCREASE if delta >= 0 else Direction.DECREASE
    return Comparison(
        current=current,
        previous=previous,
        delta=delta,
        delta_percent=delta_percent,
        direction=direction,
    )


def compare_aggregates(current: Aggregate, previous: Aggregate, metric: Metric) -> Comparison:
    """Compare one metric of two aggregates."""
    return compare(metric_value(current, metric), metric_value(previous, metric))


def _exact_digits(*values: Decimal) -> int:
    """Digits needed to add or subtract values without rounding."""
    highest = max(value.adjusted() for value in values)
    lowest = min(value.as_tuple().exponent for value in values)
    return highest - lowest + 2
