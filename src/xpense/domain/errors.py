"""Shared domain error messages and error types."""

from typing import Any, Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    # Position of the offending record when raised from a batch
    record_index: Optional[int] = None


class UnknownFlowType(ValidationError):
    """A transaction flow label that is not in the synonym table."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(unknown_flow(label))


class ConfigurationError(DomainError):
    """Invalid report configuration, such as an unknown timezone."""


def missing_field(field: str) -> str:
    """Return message for a required transaction field that is absent."""
    return f"Missing required field '{field}'"


def invalid_amount(value: Any, reason: Optional[str] = None) -> str:
    """Return message for an amount that cannot be used."""
    message = f"Invalid amount {value!r}"
    if reason:
        message += f": {reason}"
    return message


def negative_amount(value: Any) -> str:
    """Return message for an amount below zero."""
    return f"Amount must not be negative, got {value!r}"


def invalid_timestamp(value: Any, reason: Optional[str] = None) -> str:
    """Return message for an unparsable timestamp."""
    message = f"Could not parse timestamp {value!r}"
    if reason:
        message += f": {reason}"
    return message


def unknown_flow(label: str) -> str:
    """Return message for an unrecognized flow label."""
    return f"Unknown transaction type '{label}'"


def invalid_period(year: Any, month: Any) -> str:
    """Return message for a period outside the calendar."""
    if month is None:
        return f"Invalid year {year!r}"
    return f"Invalid period {year!r}-{month!r}"


def period_out_of_range(label: str) -> str:
    """Return message for a period whose neighbour falls outside the calendar."""
    return f"Period {label} is at the edge of the supported calendar (years 1-9999)"


def unknown_timezone(name: str) -> str:
    """Return message for a timezone id that cannot be resolved."""
    return f"Unknown timezone '{name}'"


def row_failed(row_num: int, error: Exception) -> str:
    """Return message for an input row that failed normalization."""
    return f"Row {row_num}: {error}"
