"""Durable storage for accounts and transactions."""

from bankomat.storage.json_file import JsonFileStorage
from bankomat.storage.serialization import (
    account_from_dict,
    serialize_value,
    to_dict,
    transaction_from_dict,
)

__all__ = [
    "JsonFileStorage",
    "account_from_dict",
    "serialize_value",
    "to_dict",
    "transaction_from_dict",
]
