"""Period arithmetic and period filtering.

Calendar membership is always evaluated in one reference timezone. The same
zone must be used for a period and for the period it is compared against,
otherwise a transaction near midnight on a month boundary could be counted in
both or in neither.
"""

from datetime import date, datetime, time, tzinfo
from typing import Iterable, Union

from dateutil import tz
from dateutil.relativedelta import relativedelta

from xpense.domain.entities import Period, Transaction
from xpense.domain.errors import (
    ConfigurationError,
    ValidationError,
    period_out_of_range,
    unknown_timezone,
)

DEFAULT_TIMEZONE = "UTC"

TimezoneLike = Union[str, tzinfo, None]


def resolve_timezone(zone: TimezoneLike = None) -> tzinfo:
    """Resolve an IANA zone id (or tzinfo) to a tzinfo instance.

    Args:
        zone: IANA zone id such as "Asia/Dhaka", a tzinfo, or None for UTC

    Returns:
        tzinfo

    Raises:
        ConfigurationError: If the zone id is unknown
    """
    if zone is None:
        return tz.UTC
    if isinstance(zone, tzinfo):
        return zone

    name = zone.strip()
    if name.upper() in ("UTC", "Z", "GMT"):
        return tz.UTC
    resolved = tz.gettz(name) if name else None
    if resolved is None:
        raise ConfigurationError(unknown_timezone(zone))
    return resolved


def previous_of(period: Period) -> Period:
    """Return the period immediately before the given one.

    The month before January is December of the previous year. January of
    year 1 and year 1 itself have no predecessor.
    """
    if period.year == 1 and period.month in (None, 1):
        raise ValidationError(period_out_of_range(period.label))
    if period.month is None:
        return Period(period.year - 1)
    start = date(period.year, period.month, 1) - relativedelta(months=1)
    return Period(start.year, start.month)


def period_bounds(period: Period, zone: TimezoneLike = None) -> tuple[datetime, datetime]:
    """Return the half-open [start, end) instants of a period in a timezone."""
    zone_info = resolve_timezone(zone)
    if period.year == 9999 and period.month in (None, 12):
        raise ValidationError(period_out_of_range(period.label))
    if period.month is None:
        start = date(period.year, 1, 1)
        end = start + relativedelta(years=1)
    else:
        start = date(period.year, period.month, 1)
        end = start + relativedelta(months=1)
    return (
        datetime.combine(start, time.min, tzinfo=zone_info),
        datetime.combine(end, time.min, tzinfo=zone_info),
    )


def local_period_of(
    timestamp: datetime, zone: TimezoneLike = None, by_month: bool = True
) -> Period:
    """Return the month (or year) period a timestamp falls in."""
    local = timestamp.astimezone(resolve_timezone(zone))
    if by_month:
        return Period(local.year, local.month)
    return Period(local.year)


def in_period(timestamp: datetime, period: Period, zone: TimezoneLike = None) -> bool:
    """Check whether a timestamp falls inside a period."""
    local = timestamp.astimezone(resolve_timezone(zone))
    if local.year != period.year:
        return False
    return period.month is None or local.month == period.month


def select_in_period(
    transactions: Iterable[Transaction],
    period: Period,
    reference_timezone: TimezoneLike = DEFAULT_TIMEZONE,
) -> list[Transaction]:
    """Select transactions whose timestamp falls in a period.

    Args:
        transactions: Normalized transactions
        period: Month or year period
        reference_timezone: Zone in which calendar fields are evaluated

    Returns:
        New list of matching transactions, in input order
    """
    zone_info = resolve_timezone(reference_timezone)
    return [txn for txn in transactions if in_period(txn.timestamp, period, zone_info)]


def group_by_period(
    transactions: Iterable[Transaction],
    reference_timezone: TimezoneLike = DEFAULT_TIMEZONE,
    by_month: bool = True,
) -> dict[Period, list[Transaction]]:
    """Group transactions by month or year."""
    from collections import defaultdict

    zone_info = resolve_timezone(reference_timezone)
    grouped: dict[Period, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        grouped[local_period_of(txn.timestamp, zone_info, by_month)].append(txn)
    return dict(grouped)
