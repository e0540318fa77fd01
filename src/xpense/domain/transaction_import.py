"""Transaction file loading service."""

import csv
import json
from pathlib import Path
from typing import Any, Iterable, Mapping

from xpense.domain.errors import ValidationError, row_failed
from xpense.domain.normalizer import normalize
from xpense.domain.period import DEFAULT_TIMEZONE
from xpense.logging_setup import get_logger

logger = get_logger(__name__)


class TransactionLoader:
    """Service for loading raw transaction records from CSV or JSON files."""

    def __init__(self, default_timezone: str = DEFAULT_TIMEZONE, strict: bool = False):
        """Initialize transaction loader.

        Args:
            default_timezone: Zone for timestamps without an offset
            strict: If True, raise on the first invalid row instead of
                collecting errors
        """
        self.default_timezone = default_timezone
        self.strict = strict

    def load(self, file_path: str) -> dict[str, Any]:
        """Load and normalize transactions from a file.

        Files ending in .json hold a list of records or an object with a
        "transactions" list; anything else is read as CSV with a header row.

        Args:
            file_path: Path to the file

        Returns:
            Dict with:
            - transactions: list of normalized Transaction entities
            - errors: list of error messages for skipped rows

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValidationError: If the file structure is invalid, or a row is
                invalid and strict is set
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Transaction file not found: {file_path}")

        if path.suffix.lower() == ".json":
            records = self.read_json(path)
            first_row = 1
        else:
            records = self.read_csv(path)
            first_row = 2  # header is row 1

        return self.normalize_records(records, first_row=first_row)

    def normalize_records(
        self, records: Iterable[Mapping[str, Any]], first_row: int = 1
    ) -> dict[str, Any]:
        """Normalize records, collecting or raising row errors."""
        transactions = []
        errors = []

        for row_num, record in enumerate(records, start=first_row):
            try:
                transactions.append(normalize(record, self.default_timezone))
            except ValidationError as e:
                if self.strict:
                    e.record_index = row_num - first_row
                    raise
                message = row_failed(row_num, e)
                logger.warning("Skipping transaction: %s", message)
                errors.append(message)

        return {"transactions": transactions, "errors": errors}

    def read_json(self, path: Path) -> list[Mapping[str, Any]]:
        """Read raw records from a JSON file."""
        with open(path, "r", encoding="utf-8-sig") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Invalid JSON in {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("transactions")
        if not isinstance(data, list):
            raise ValidationError(
                f"JSON file must contain a list of transactions or a 'transactions' list: {path}"
            )
        return data

    def read_csv(self, path: Path) -> list[dict[str, Any]]:
        """Read raw records from a CSV file with a header row."""
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            # Try to detect delimiter
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)
            if reader.fieldnames is None:
                raise ValidationError("CSV file has no columns")

            rows = []
            for row in reader:
                rows.append(
                    {
                        key.strip(): (value.strip() if isinstance(value, str) else value)
                        for key, value in row.items()
                        if key is not None
                    }
                )
        return rows
