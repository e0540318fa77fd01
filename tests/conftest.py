"""Shared pytest fixtures for xpense tests."""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from xpense.domain.entities import Flow, Transaction
from xpense.domain.normalizer import normalize_all


@pytest.fixture
def make_transaction():
    """Factory for normalized transactions with sensible defaults."""
    counter = {"next": 1}

    def _make(
        flow=Flow.OUTFLOW,
        amount="10.00",
        category="food",
        timestamp=None,
        payment_method="cash",
        detail=None,
        source_flow=None,
        txn_id=None,
    ):
        if txn_id is None:
            txn_id = f"T{counter['next']:03d}"
            counter["next"] += 1
        if timestamp is None:
            timestamp = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
        return Transaction(
            id=txn_id,
            flow=flow,
            amount=Decimal(amount),
            category=category.lower(),
            category_label=category,
            timestamp=timestamp,
            detail=detail,
            payment_method=payment_method,
            source_flow=source_flow or flow.value,
        )

    return _make


@pytest.fixture
def march_records():
    """Raw records for the March 2024 scenario, in the legacy field names."""
    return [
        {
            "id": "1",
            "type": "expense",
            "amount": "50",
            "category": "Food",
            "payment_method": "cash",
            "date": "2024-03-05T10:00:00Z",
        },
        {
            "id": "2",
            "type": "expense",
            "amount": "30",
            "category": "food",
            "payment_method": "bkash",
            "date": "2024-03-10T18:30:00Z",
        },
        {
            "id": "3",
            "type": "income",
            "amount": "200",
            "category": "Salary",
            "payment_method": "bank",
            "date": "2024-03-01T00:00:00Z",
        },
    ]


@pytest.fixture
def march_transactions(march_records):
    """Normalized March 2024 scenario."""
    return normalize_all(march_records)


@pytest.fixture
def history_records(march_records):
    """March 2024 scenario plus February, January and late 2023 activity."""
    return march_records + [
        {
            "id": "4",
            "type": "expense",
            "amount": "40",
            "category": "Transport",
            "payment_method": "cash",
            "date": "2024-02-20T09:00:00Z",
        },
        {
            "id": "5",
            "type": "earnings",
            "amount": "150",
            "category": "Freelance",
            "payment_method": "bkash",
            "date": "2024-02-28T23:59:59Z",
        },
        {
            "id": "6",
            "type": "bank_deposit",
            "amount": "500",
            "category": "bank",
            "payment_method": "bank",
            "date": "2024-03-12T08:00:00Z",
        },
        {
            "id": "7",
            "type": "expense",
            "amount": "25.50",
            "category": "Bills",
            "payment_method": "cash",
            "date": "2023-12-31T20:00:00Z",
        },
    ]


@pytest.fixture
def transactions_file(tmp_path, history_records):
    """Write the history scenario to a JSON file and return its path."""
    path = tmp_path / "transactions.json"
    path.write_text(json.dumps(history_records), encoding="utf-8")
    return str(path)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
