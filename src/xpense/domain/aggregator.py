"""Aggregation of transactions into totals and category breakdowns.

All sums are Decimal. Each transaction contributes to exactly one of the
inflow, outflow or transfer totals.
"""

import string
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from xpense.domain.entities import (
    ZERO,
    Aggregate,
    CategoryTotal,
    Flow,
    LabeledAmount,
    MonthlyTotals,
    Period,
    Transaction,
)
from xpense.domain.period import DEFAULT_TIMEZONE, TimezoneLike, group_by_period

TRANSFERS_KEY = "__transfers__"
TRANSFERS_LABEL = "Transfers"
UNSPECIFIED_PAYMENT_METHOD = "unspecified"


def category_label(key: str) -> str:
    """Return the presentable label for a normalized category key."""
    return string.capwords(key)


def breakdown_sort_key(label: str, value: Decimal, key: str = "") -> tuple:
    """Sort key for breakdowns: highest value first, then label, then key."""
    return (-value, label, key)


def _ordered_categories(
    sums: dict[str, Decimal], transfers: Optional[Decimal] = None
) -> tuple[CategoryTotal, ...]:
    entries = [
        CategoryTotal(key=key, label=category_label(key), value=value)
        for key, value in sums.items()
    ]
    if transfers is not None:
        entries.append(
            CategoryTotal(
                key=TRANSFERS_KEY,
                label=TRANSFERS_LABEL,
                value=transfers,
                is_transfer=True,
            )
        )
    entries.sort(key=lambda entry: breakdown_sort_key(entry.label, entry.value, entry.key))
    return tuple(entries)


def aggregate(
    transactions: Iterable[Transaction],
    include_transfers_in_breakdown: bool = False,
    include_inflow_in_breakdown: bool = False,
) -> Aggregate:
    """Reduce transactions into totals by flow and by category.

    Args:
        transactions: Normalized transactions
        include_transfers_in_breakdown: Add the transfer bucket to by_category
        include_inflow_in_breakdown: Add inflow amounts to by_category

    Returns:
        Aggregate; empty input gives zero totals and an empty breakdown
    """
    total_inflow = ZERO
    total_outflow = ZERO
    total_transfers = ZERO
    has_transfers = False
    count = 0
    category_sums: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for txn in transactions:
        count += 1
        if txn.flow is Flow.INFLOW:
            total_inflow += txn.amount
            if include_inflow_in_breakdown:
                category_sums[txn.category] += txn.amount
        elif txn.flow is Flow.OUTFLOW:
            total_outflow += txn.amount
            category_sums[txn.category] += txn.amount
        else:
            total_transfers += txn.amount
            has_transfers = True

    transfers = None
    if include_transfers_in_breakdown and has_transfers:
        transfers = total_transfers

    return Aggregate(
        total_inflow=total_inflow,
        total_outflow=total_outflow,
        total_transfers=total_transfers,
        by_category=_ordered_categories(dict(category_sums), transfers),
        transaction_count=count,
    )


def merge_aggregates(*aggregates: Aggregate) -> Aggregate:
    """Merge partial aggregates computed over disjoint transaction shards.

    The merge is plain addition per total and per category key, so it is
    associative and commutative. Ordering is applied after the merge.
    """
    category_sums: dict[str, Decimal] = defaultdict(lambda: ZERO)
    transfer_sum: Optional[Decimal] = None
    total_inflow = ZERO
    total_outflow = ZERO
    total_transfers = ZERO
    count = 0

    for agg in aggregates:
        total_inflow += agg.total_inflow
        total_outflow += agg.total_outflow
        total_transfers += agg.total_transfers
        count += agg.transaction_count
        for entry in agg.by_category:
            if entry.is_transfer:
                transfer_sum = (transfer_sum or ZERO) + entry.value
            else:
                category_sums[entry.key] += entry.value

    return Aggregate(
        total_inflow=total_inflow,
        total_outflow=total_outflow,
        total_transfers=total_transfers,
        by_category=_ordered_categories(dict(category_sums), transfer_sum),
        transaction_count=count,
    )


def payment_method_breakdown(transactions: Iterable[Transaction]) -> tuple[LabeledAmount, ...]:
    """Sum outflow per payment method, ordered like category breakdowns."""
    sums: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for txn in transactions:
        if txn.flow is not Flow.OUTFLOW:
            continue
        sums[txn.payment_method or UNSPECIFIED_PAYMENT_METHOD] += txn.amount

    entries = [LabeledAmount(label=method, value=value) for method, value in sums.items()]
    entries.sort(key=lambda entry: breakdown_sort_key(entry.label, entry.value))
    return tuple(entries)


def monthly_totals(period: Period, transactions: Sequence[Transaction]) -> MonthlyTotals:
    """Compute inflow, outflow and payment-method outflow for one month."""
    agg = aggregate(transactions)
    return MonthlyTotals(
        period=period,
        inflow=agg.total_inflow,
        outflow=agg.total_outflow,
        by_payment_method=payment_method_breakdown(transactions),
    )


def monthly_series(
    transactions: Iterable[Transaction],
    year: int,
    reference_timezone: TimezoneLike = DEFAULT_TIMEZONE,
) -> tuple[MonthlyTotals, ...]:
    """Return twelve MonthlyTotals for a calendar year, January first.

    Months without activity are included with zero totals.
    """
    grouped = group_by_period(transactions, reference_timezone, by_month=True)
    return tuple(
        monthly_totals(month, grouped.get(month, []))
        for month in Period(year).months()
    )
