"""Tests for report configuration loading."""

import pytest

from xpense.config import ReportConfig, load_config
from xpense.domain.errors import ConfigurationError


def test_defaults():
    config = load_config({})

    assert config.reference_timezone == "UTC"
    assert config.include_transfers_in_breakdown is False
    assert config.include_inflow_in_breakdown is False


def test_load_from_environment():
    config = load_config(
        {
            "XPENSE_TIMEZONE": "Asia/Dhaka",
            "XPENSE_INCLUDE_TRANSFERS": "yes",
            "XPENSE_INCLUDE_INFLOW": "0",
        }
    )

    assert config.reference_timezone == "Asia/Dhaka"
    assert config.include_transfers_in_breakdown is True
    assert config.include_inflow_in_breakdown is False


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("XPENSE_TIMEZONE", "Europe/Berlin")
    monkeypatch.delenv("XPENSE_INCLUDE_TRANSFERS", raising=False)
    monkeypatch.delenv("XPENSE_INCLUDE_INFLOW", raising=False)

    assert load_config().reference_timezone == "Europe/Berlin"


def test_invalid_boolean_raises():
    with pytest.raises(ConfigurationError, match="XPENSE_INCLUDE_TRANSFERS"):
        load_config({"XPENSE_INCLUDE_TRANSFERS": "maybe"})


def test_unknown_timezone_raises():
    with pytest.raises(ConfigurationError):
        ReportConfig(reference_timezone="Moon/Tranquility")


def test_with_overrides_only_replaces_given_values():
    base = ReportConfig(reference_timezone="Asia/Dhaka", include_transfers_in_breakdown=True)

    updated = base.with_overrides(include_inflow_in_breakdown=True)

    assert updated.reference_timezone == "Asia/Dhaka"
    assert updated.include_transfers_in_breakdown is True
    assert updated.include_inflow_in_breakdown is True
    assert base.include_inflow_in_breakdown is False


def test_config_is_immutable():
    config = ReportConfig()
    with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
        config.reference_timezone = "Asia/Dhaka"
