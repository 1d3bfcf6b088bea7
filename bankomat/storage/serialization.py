"""Conversion between model dataclasses and JSON-ready dicts."""

from dataclasses import fields
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from bankomat.exceptions import SerializationError
from bankomat.models import Account, Transaction, TransactionType


def to_dict(obj: Account | Transaction) -> dict[str, Any]:
    """Convert a model to its persisted JSON form."""
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    return value


def account_from_dict(data: dict[str, Any]) -> Account:
    """Build an ``Account`` from its persisted form.

    Raises
    ------
    SerializationError
        If a field is missing or has the wrong shape.
    """
    try:
        return Account(
            id=_as_int(data["id"]),
            owner=str(data["owner"]),
            card=str(data["card"]),
            pin=str(data["pin"]),
            balance=_as_decimal(data["balance"]),
            blocked=_as_bool(data.get("blocked", False)),
        )
    except KeyError as exc:
        raise SerializationError(f"Account record is missing field {exc}") from exc
    except (TypeError, ValueError, InvalidOperation) as exc:
        raise SerializationError(f"Malformed account record: {exc}") from exc


def transaction_from_dict(data: dict[str, Any]) -> Transaction:
    """Build a ``Transaction`` from its persisted form.

    Raises
    ------
    SerializationError
        If a field is missing or has the wrong shape.
    """
    try:
        return Transaction(
            time=datetime.fromisoformat(data["time"]),
            from_id=_as_optional_int(data.get("from_id")),
            to_id=_as_optional_int(data.get("to_id")),
            type=TransactionType(data["type"]),
            amount=_as_decimal(data["amount"]),
            balance_after=_as_decimal(data["balance_after"]),
            note=str(data.get("note", "")),
        )
    except KeyError as exc:
        raise SerializationError(f"Transaction record is missing field {exc}") from exc
    except (TypeError, ValueError, InvalidOperation) as exc:
        raise SerializationError(f"Malformed transaction record: {exc}") from exc


def _as_decimal(value: Any) -> Decimal:
    # str() keeps floats written by hand ("balance": 12.5) exact to their repr
    result = Decimal(str(value))
    if not result.is_finite():
        raise ValueError(f"non-finite amount {value!r}")
    return result


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected integer, got {value!r}")
    return value


def _as_optional_int(value: Any) -> int | None:
    return None if value is None else _as_int(value)


def _as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected boolean, got {value!r}")
    return value
