"""Tests for logging helpers."""

import logging

import pytest

from xpense.logging_setup import get_logger, parse_level


def test_parse_level_names_and_numbers():
    assert parse_level("debug") == logging.DEBUG
    assert parse_level("30") == logging.WARNING
    assert parse_level(logging.ERROR) == logging.ERROR


def test_parse_level_from_environment(monkeypatch):
    monkeypatch.setenv("XPENSE_LOG_LEVEL", "INFO")
    assert parse_level(None) == logging.INFO


def test_parse_level_default(monkeypatch):
    monkeypatch.delenv("XPENSE_LOG_LEVEL", raising=False)
    assert parse_level(None) == logging.WARNING


def test_parse_level_unknown():
    with pytest.raises(ValueError):
        parse_level("chatty")


def test_get_logger_is_namespaced():
    logger = get_logger("xpense.domain.report")

    assert logger.name == "xpense.domain.report"
    assert logging.getLogger("xpense").handlers
