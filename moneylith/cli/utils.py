"""Shared helpers for CLI commands: input loading and formatting."""

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from moneylith.core.exceptions import InputFileError

ModelT = TypeVar("ModelT", bound=BaseModel)


def load_json(path: Path) -> Any:
    """Read and parse a JSON file.

    Raises:
        InputFileError: If the file does not exist or is not valid JSON.
    """
    if not path.exists():
        raise InputFileError(path, "file not found")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputFileError(path, f"invalid JSON ({e.msg} at line {e.lineno})") from e


def parse_records(
    data: Any,
    model: type[ModelT],
    path: Path,
    key: str | None = None,
) -> list[ModelT]:
    """Validate a list of records.

    data may be the list itself or an object holding the list under key.

    Raises:
        InputFileError: If no list is found or a record fails validation.
    """
    if isinstance(data, dict) and key is not None:
        data = data.get(key, [])
    if not isinstance(data, list):
        raise InputFileError(path, f"expected a list of {model.__name__} records")
    try:
        return [model.model_validate(item) for item in data]
    except ValidationError as e:
        raise InputFileError(path, f"invalid {model.__name__}: {e.errors()[0]['msg']}") from e


def load_records(path: Path, model: type[ModelT], key: str | None = None) -> list[ModelT]:
    """Load a JSON file and validate the records it contains."""
    return parse_records(load_json(path), model, path, key)


def load_model(path: Path, model: type[ModelT]) -> ModelT:
    """Load a JSON file holding a single object and validate it."""
    data = load_json(path)
    if not isinstance(data, dict):
        raise InputFileError(path, f"expected a {model.__name__} object")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InputFileError(path, f"invalid {model.__name__}: {e.errors()[0]['msg']}") from e


def format_currency(amount: Decimal | None, currency: str = "EUR") -> str:
    """Format an amount with thousands separators and two decimals."""
    if amount is None:
        return "-"
    return f"{amount:,.2f} {currency}"


def format_percentage(ratio: Decimal | None) -> str:
    """Format a ratio (0.25) as a percentage (25.0%)."""
    if ratio is None:
        return "-"
    return f"{ratio * 100:.1f}%"


def format_months(months: int | None) -> str:
    """Format a month count, None meaning "not reached"."""
    if months is None:
        return "not reached"
    return str(months)


def format_buffer(months: Decimal | None) -> str:
    """Format buffer months, None meaning no fixed costs or no assets."""
    if months is None:
        return "-"
    return f"{months:.1f}"
