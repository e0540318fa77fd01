"""Report configuration.

Values come from explicit arguments first, then environment variables, then
defaults. The CLI passes its options through click's envvar support, so the
same variables apply to both library and command line use.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from xpense.domain.errors import ConfigurationError
from xpense.domain.period import DEFAULT_TIMEZONE, resolve_timezone

TIMEZONE_ENV = "XPENSE_TIMEZONE"
INCLUDE_TRANSFERS_ENV = "XPENSE_INCLUDE_TRANSFERS"
INCLUDE_INFLOW_ENV = "XPENSE_INCLUDE_INFLOW"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class ReportConfig:
    """Options recognized by the reporting engine."""

    reference_timezone: str = DEFAULT_TIMEZONE
    include_transfers_in_breakdown: bool = False
    include_inflow_in_breakdown: bool = False

    def __post_init__(self):
        # Fail on unknown zones when the config is built, not mid-report
        resolve_timezone(self.reference_timezone)

    def with_overrides(
        self,
        reference_timezone: Optional[str] = None,
        include_transfers_in_breakdown: Optional[bool] = None,
        include_inflow_in_breakdown: Optional[bool] = None,
    ) -> "ReportConfig":
        """Return a copy with the given non-None values replaced."""
        changes = {}
        if reference_timezone is not None:
            changes["reference_timezone"] = reference_timezone
        if include_transfers_in_breakdown is not None:
            changes["include_transfers_in_breakdown"] = include_transfers_in_breakdown
        if include_inflow_in_breakdown is not None:
            changes["include_inflow_in_breakdown"] = include_inflow_in_breakdown
        return replace(self, **changes)


def parse_bool(name: str, value: str) -> bool:
    """Parse a boolean environment value."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: '{value}'")


def load_config(environ: Optional[Mapping[str, str]] = None) -> ReportConfig:
    """Build a ReportConfig from environment variables.

    Args:
        environ: Mapping to read from. If None, uses os.environ

    Returns:
        ReportConfig

    Raises:
        ConfigurationError: If a value is invalid
    """
    if environ is None:
        environ = os.environ

    timezone = environ.get(TIMEZONE_ENV) or DEFAULT_TIMEZONE

    include_transfers = False
    if INCLUDE_TRANSFERS_ENV in environ:
        include_transfers = parse_bool(INCLUDE_TRANSFERS_ENV, environ[INCLUDE_TRANSFERS_ENV])

    include_inflow = False
    if INCLUDE_INFLOW_ENV in environ:
        include_inflow = parse_bool(INCLUDE_INFLOW_ENV, environ[INCLUDE_INFLOW_ENV])

    return ReportConfig(
        reference_timezone=timezone,
        include_transfers_in_breakdown=include_transfers,
        include_inflow_in_breakdown=include_inflow,
    )
