"""Domain model entities for xpense.

These are pure data classes representing the reporting concepts. They are
independent of where transactions come from, so any persistence layer can feed
the reporting engine as long as it hands over raw records.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, localcontext
from enum import Enum
from typing import Any, Optional

from xpense.domain.errors import ValidationError, invalid_period

CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")
ZERO = Decimal("0")


def quantize_half_up(value: Decimal, exponent: Decimal) -> Decimal:
    """Round half-up to the given exponent, whatever the size of value.

    The working precision is widened so that quantize never runs out of
    digits for very large amounts.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exponent.as_tuple().exponent + 2)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def round_amount(value: Decimal) -> Decimal:
    """Round an amount to 2 fraction digits for presentation."""
    return quantize_half_up(value, CENTS)


class Flow(Enum):
    """Canonical direction of a transaction."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"
    TRANSFER = "transfer"


class Direction(Enum):
    """Sign of a period-over-period change."""

    INCREASE = "increase"
    DECREASE = "decrease"


@dataclass(frozen=True)
class Transaction:
    """Normalized transaction entity."""

    id: str
    flow: Flow
    amount: Decimal
    category: str
    category_label: str
    timestamp: datetime
    detail: Optional[str] = None
    payment_method: Optional[str] = None
    source_flow: Optional[str] = None


@dataclass(frozen=True)
class Period:
    """A calendar month, or a full calendar year when month is None."""

    year: int
    month: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.year, bool) or not isinstance(self.year, int):
            raise ValidationError(invalid_period(self.year, self.month))
        if not 1 <= self.year <= 9999:
            raise ValidationError(invalid_period(self.year, self.month))
        if self.month is not None:
            if isinstance(self.month, bool) or not isinstance(self.month, int):
                raise ValidationError(invalid_period(self.year, self.month))
            if not 1 <= self.month <= 12:
                raise ValidationError(invalid_period(self.year, self.month))

    @property
    def is_month(self) -> bool:
        return self.month is not None

    @property
    def key(self) -> str:
        """Sortable key, "2024-03" for months and "2024" for years."""
        if self.month is None:
            return f"{self.year:04d}"
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        """Human-readable label, e.g. "March 2024"."""
        if self.month is None:
            return str(self.year)
        return f"{calendar.month_name[self.month]} {self.year}"

    def previous(self) -> "Period":
        """Return the immediately preceding period of the same kind."""
        from xpense.domain.period import previous_of

        return previous_of(self)

    def months(self) -> tuple["Period", ...]:
        """Return the month periods covered by this period."""
        if self.month is not None:
            return (self,)
        return tuple(Period(self.year, month) for month in range(1, 13))

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class LabeledAmount:
    """A {label, value} pair, the shape presentation layers chart."""

    label: str
    value: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "value": str(round_amount(self.value))}


@dataclass(frozen=True)
class CategoryTotal:
    """Summed amount for one normalized category key."""

    key: str
    label: str
    value: Decimal
    is_transfer: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "value": str(round_amount(self.value)),
            "is_transfer": self.is_transfer,
        }


@dataclass(frozen=True)
class Aggregate:
    """Totals by flow and category for a set of transactions."""

    total_inflow: Decimal = ZERO
    total_outflow: Decimal = ZERO
    total_transfers: Decimal = ZERO
    by_category: tuple[CategoryTotal, ...] = ()
    transaction_count: int = 0

    @property
    def net(self) -> Decimal:
        """Inflow minus outflow; transfers never count."""
        return self.total_inflow - self.total_outflow

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_inflow": str(round_amount(self.total_inflow)),
            "total_outflow": str(round_amount(self.total_outflow)),
            "total_transfers": str(round_amount(self.total_transfers)),
            "by_category": [entry.to_dict() for entry in self.by_category],
            "transaction_count": self.transaction_count,
        }


@dataclass(frozen=True)
class Comparison:
    """Change of one metric between the current and the previous period."""

    current: Decimal
    previous: Decimal
    delta: Decimal
    delta_percent: Decimal
    direction: Direction

    @property
    def has_baseline(self) -> bool:
        """False when the previous period had no activity for the metric.

        A zero delta_percent without a baseline does not mean "no change".
        """
        return self.previous != 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "current": str(round_amount(self.current)),
            "previous": str(round_amount(self.previous)),
            "delta": str(round_amount(self.delta)),
            "delta_percent": str(self.delta_percent),
            "direction": self.direction.value,
            "has_baseline": self.has_baseline,
        }


@dataclass(frozen=True)
class MonthlyTotals:
    """Inflow and outflow of one month inside a yearly report."""

    period: Period
    inflow: Decimal = ZERO
    outflow: Decimal = ZERO
    by_payment_method: tuple[LabeledAmount, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period.key,
            "inflow": str(round_amount(self.inflow)),
            "outflow": str(round_amount(self.outflow)),
            "by_payment_method": [entry.to_dict() for entry in self.by_payment_method],
        }


@dataclass(frozen=True)
class Report:
    """Report for one period, recomputed on demand and never stored."""

    period: Period
    previous_period: Period
    reference_timezone: str
    current: Aggregate
    previous: Aggregate
    inflow_comparison: Comparison
    outflow_comparison: Comparison
    net_savings: Decimal
    top_category: Optional[CategoryTotal] = None
    payment_methods: tuple[LabeledAmount, ...] = ()
    monthly_series: tuple[MonthlyTotals, ...] = ()

    @property
    def by_category(self) -> tuple[CategoryTotal, ...]:
        return self.current.by_category

    def to_dict(self) -> dict[str, Any]:
        """Return plain data with amounts rounded for presentation."""
        return {
            "period": self.period.key,
            "period_label": self.period.label,
            "previous_period": self.previous_period.key,
            "reference_timezone": self.reference_timezone,
            "current": self.current.to_dict(),
            "previous": self.previous.to_dict(),
            "inflow_comparison": self.inflow_comparison.to_dict(),
            "outflow_comparison": self.outflow_comparison.to_dict(),
            "net_savings": str(round_amount(self.net_savings)),
            "top_category": (
                self.top_category.to_dict() if self.top_category is not None else None
            ),
            "payment_methods": [entry.to_dict() for entry in self.payment_methods],
            "monthly_series": [entry.to_dict() for entry in self.monthly_series],
        }


@dataclass(frozen=True)
class Balance:
    """All-time totals across every transaction supplied."""

    aggregate: Aggregate

    @property
    def total_inflow(self) -> Decimal:
        return self.aggregate.total_inflow

    @property
    def total_outflow(self) -> Decimal:
        return self.aggregate.total_outflow

    @property
    def balance(self) -> Decimal:
        return self.aggregate.net

    def to_dict(self) -> dict[str, Any]:
        return {
            "balance": str(round_amount(self.balance)),
            "total_inflow": str(round_amount(self.total_inflow)),
            "total_outflow": str(round_amount(self.total_outflow)),
            "total_transfers": str(round_amount(self.aggregate.total_transfers)),
            "transaction_count": self.aggregate.transaction_count,
        }
