"""Utility functions for xpense."""

from xpense.utils.amount_parser import parse_amount
from xpense.utils.date_parser import parse_period, parse_timestamp

__all__ = ["parse_amount", "parse_period", "parse_timestamp"]
