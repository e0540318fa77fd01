"""Date, timestamp and period parsing utilities."""

import calendar
from datetime import date, datetime, time
from typing import Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from xpense.domain.entities import Period
from xpense.domain.errors import ValidationError
from xpense.domain.period import resolve_timezone

RELATIVE_PERIODS = ("this-month", "last-month", "this-year", "last-year")

# Two fallbacks that differ in year, month and day. Free-form text is parsed
# against both; a calendar field that changes was not present in the text.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2004, 2, 2))


def parse_timestamp(
    value: Union[str, date, datetime], default_timezone: str = "UTC"
) -> datetime:
    """Parse a timestamp into a timezone-aware datetime.

    Accepts datetime and date objects as well as strings in ISO-8601 or any
    format dateutil understands, provided the string names a full calendar
    date. Naive values (and plain dates, taken at midnight) are interpreted
    in default_timezone.

    Args:
        value: Timestamp value
        default_timezone: IANA zone id applied to naive values

    Returns:
        Aware datetime

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty timestamp string")
        try:
            parsed = date_parser.isoparse(text)
        except ValueError:
            parsed = _parse_full_date(text)
    else:
        raise ValueError(f"Unsupported timestamp type {type(value).__name__}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        parsed = parsed.replace(tzinfo=resolve_timezone(default_timezone))
    return parsed


def _parse_full_date(text: str) -> datetime:
    """Parse free-form text that must spell out year, month and day."""
    try:
        first, second = (date_parser.parse(text, default=fill) for fill in _FILL_DEFAULTS)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{text}': {e}")

    if first.date() != second.date():
        raise ValueError(f"Could not parse date '{text}': year, month and day are required")
    return first


def parse_period(period_str: str, today: Optional[date] = None) -> Period:
    """Parse a period string into a Period.

    Supports:
    - Months: "2024-03", "2024/03", "March 2024", "mar 2024"
    - Years: "2024"
    - Relative: "this-month", "last-month", "this-year", "last-year"

    Args:
        period_str: Period string
        today: Reference date for relative periods (defaults to date.today())

    Returns:
        Period

    Raises:
        ValidationError: If the period string is not recognized
    """
    text = period_str.strip().lower()
    if today is None:
        today = date.today()

    if text in RELATIVE_PERIODS:
        return get_relative_period(text, today)

    if text.isdigit() and len(text) == 4:
        return Period(int(text))

    for separator in ("-", "/"):
        year_part, sep, month_part = text.partition(separator)
        if sep and year_part.isdigit() and month_part.isdigit():
            return Period(int(year_part), int(month_part))

    words = text.split()
    if len(words) == 2 and words[1].isdigit():
        month = _month_from_name(words[0])
        if month is not None:
            return Period(int(words[1]), month)

    raise ValidationError(
        f"Unknown period: '{period_str}'. Use YYYY-MM, YYYY or one of: "
        + ", ".join(RELATIVE_PERIODS)
    )


def get_relative_period(period: str, today: Optional[date] = None) -> Period:
    """Resolve a relative period name against today's date.

    Args:
        period: One of this-month, last-month, this-year, last-year
        today: Reference date (defaults to date.today())

    Returns:
        Period

    Raises:
        ValidationError: If period is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = date.today()

    if period == "this-month":
        return Period(today.year, today.month)
    elif period == "last-month":
        # First day of last month
        start = (today - relativedelta(months=1)).replace(day=1)
        return Period(start.year, start.month)
    elif period == "this-year":
        return Period(today.year)
    elif period == "last-year":
        return Period((today - relativedelta(years=1)).year)

    raise ValidationError(
        f"Unknown period: '{period}'. Supported periods: " + ", ".join(RELATIVE_PERIODS)
    )


def _month_from_name(name: str) -> Optional[int]:
    for month in range(1, 13):
        if name in (
            calendar.month_name[month].lower(),
            calendar.month_abbr[month].lower(),
        ):
            return month
    return None
