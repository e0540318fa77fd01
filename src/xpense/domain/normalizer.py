"""Transaction normalizer.

Turns raw records, as handed over by a persistence layer or read from a file,
into canonical Transaction entities. Invalid records raise ValidationError;
nothing is coerced to zero or silently dropped.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from xpense.domain.entities import Flow, Transaction
from xpense.domain.errors import (
    DomainError,
    UnknownFlowType,
    ValidationError,
    invalid_amount,
    invalid_timestamp,
    missing_field,
    negative_amount,
)
from xpense.domain.period import DEFAULT_TIMEZONE
from xpense.utils.amount_parser import parse_amount
from xpense.utils.date_parser import parse_timestamp

UNCATEGORIZED = "uncategorized"

# Exclusive upper bound for a single amount. Sums of bounded amounts stay
# within the default 28-digit decimal context.
MAX_AMOUNT = Decimal("1e18")

# Every accepted flow label maps to exactly one canonical flow.
FLOW_SYNONYMS: dict[str, Flow] = {
    "income": Flow.INFLOW,
    "earnings": Flow.INFLOW,
    "earning": Flow.INFLOW,
    "inflow": Flow.INFLOW,
    "expense": Flow.OUTFLOW,
    "expenses": Flow.OUTFLOW,
    "outflow": Flow.OUTFLOW,
    "bank_deposit": Flow.TRANSFER,
    "bank_withdrawal": Flow.TRANSFER,
    "transfer": Flow.TRANSFER,
}

# Accepted field names, first match wins.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "flow": ("flow", "type"),
    "amount": ("amount",),
    "category": ("category",),
    "detail": ("detail", "details"),
    "payment_method": ("payment_method", "paymentMethod"),
    "timestamp": ("timestamp", "date"),
}


def canonical_flow_label(label: str) -> str:
    """Return the lookup form of a flow label ("Bank Deposit" -> "bank_deposit")."""
    return "_".join(label.strip().lower().replace("-", " ").split())


def parse_flow(value: Any) -> tuple[Flow, str]:
    """Map a raw flow label to its canonical Flow.

    Returns:
        Tuple of (flow, canonical synonym label)

    Raises:
        ValidationError: If the flow is missing
        UnknownFlowType: If the label is not in FLOW_SYNONYMS
    """
    if isinstance(value, Flow):
        return value, value.value
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(missing_field("flow"))
    if not isinstance(value, str):
        raise UnknownFlowType(str(value))

    label = canonical_flow_label(value)
    flow = FLOW_SYNONYMS.get(label)
    if flow is None:
        raise UnknownFlowType(value)
    return flow, label


def parse_non_negative_amount(value: Any) -> Decimal:
    """Parse an amount as a non-negative Decimal."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(missing_field("amount"))
    if isinstance(value, bool):
        raise ValidationError(invalid_amount(value, "not a number"))

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        # repr keeps the shortest round-tripping form, 0.1 stays 0.1
        amount = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            amount = parse_amount(value)
        except ValueError as e:
            raise ValidationError(invalid_amount(value, str(e))) from e
    else:
        raise ValidationError(invalid_amount(value, "not a number"))

    if not amount.is_finite():
        raise ValidationError(invalid_amount(value, "not a finite number"))
    if amount < 0:
        raise ValidationError(negative_amount(value))
    if amount >= MAX_AMOUNT:
        raise ValidationError(invalid_amount(value, f"must be below {MAX_AMOUNT:E}"))
    # Normalizes -0 to 0
    return abs(amount)


def normalize_category(value: Any) -> tuple[str, str]:
    """Return (grouping key, display label) for a raw category."""
    if value is None:
        return UNCATEGORIZED, UNCATEGORIZED
    label = " ".join(str(value).split())
    if not label:
        return UNCATEGORIZED, UNCATEGORIZED
    return label.lower(), label


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _field(raw: Mapping[str, Any], name: str) -> Any:
    for alias in FIELD_ALIASES[name]:
        if alias in raw:
            return raw[alias]
    return None


def normalize(raw: Mapping[str, Any], default_timezone: str = DEFAULT_TIMEZONE) -> Transaction:
    """Normalize a raw transaction record.

    Args:
        raw: Mapping with id, flow (or type), amount, category, detail (or
            details), payment_method (or paymentMethod), timestamp (or date)
        default_timezone: Zone applied to timestamps without an offset

    Returns:
        Transaction entity

    Raises:
        ValidationError: If amount, timestamp, flow or id is malformed
        UnknownFlowType: If the flow label is not recognized
    """
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Transaction record must be a mapping, got {type(raw).__name__}")

    txn_id = _field(raw, "id")
    if txn_id is None or (isinstance(txn_id, str) and not txn_id.strip()):
        raise ValidationError(missing_field("id"))

    flow, source_flow = parse_flow(_field(raw, "flow"))
    amount = parse_non_negative_amount(_field(raw, "amount"))
    category, category_label = normalize_category(_field(raw, "category"))

    raw_timestamp = _field(raw, "timestamp")
    if raw_timestamp is None or (isinstance(raw_timestamp, str) and not raw_timestamp.strip()):
        raise ValidationError(missing_field("timestamp"))
    if not isinstance(raw_timestamp, (str, date)):
        raise ValidationError(invalid_timestamp(raw_timestamp, "unsupported type"))
    try:
        timestamp = parse_timestamp(raw_timestamp, default_timezone)
    except DomainError:
        raise
    except ValueError as e:
        raise ValidationError(invalid_timestamp(raw_timestamp, str(e))) from e

    payment_method = _optional_text(_field(raw, "payment_method"))

    return Transaction(
        id=str(txn_id).strip(),
        flow=flow,
        amount=amount,
        category=category,
        category_label=category_label,
        timestamp=timestamp,
        detail=_optional_text(_field(raw, "detail")),
        payment_method=payment_method.lower() if payment_method else None,
        source_flow=source_flow,
    )


def normalize_all(
    records: Iterable[Mapping[str, Any]], default_timezone: str = DEFAULT_TIMEZONE
) -> list[Transaction]:
    """Normalize a batch of records, failing on the first bad one.

    Raises:
        ValidationError: With record_index set to the zero-based position of
            the offending record
    """
    transactions = []
    for index, raw in enumerate(records):
        try:
            transactions.append(normalize(raw, default_timezone))
        except ValidationError as e:
            e.record_index = index
            raise
    return transactions
