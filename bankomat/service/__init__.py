"""Business logic layer consumed by the presentation shells."""

from bankomat.service.banking import BankingService
from bankomat.service.session import LoginSession
from bankomat.service.validation import (
    format_money,
    is_valid_card,
    is_valid_pin,
    normalize_amount,
    parse_amount,
)

__all__ = [
    "BankingService",
    "LoginSession",
    "format_money",
    "is_valid_card",
    "is_valid_pin",
    "normalize_amount",
    "parse_amount",
]
