"""Enumeration types for ATM entities and results."""

from enum import Enum


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    TRANSFER = "TRANSFER"
    CHANGE_PIN = "CHANGE_PIN"


class ErrorCode(str, Enum):
    INVALID_FORMAT = "INVALID_FORMAT"
    NOT_FOUND_OR_BLOCKED = "NOT_FOUND_OR_BLOCKED"
    WRONG_PIN = "WRONG_PIN"
    LOCKED_OUT = "LOCKED_OUT"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    RECIPIENT_NOT_FOUND = "RECIPIENT_NOT_FOUND"
    SELF_TRANSFER = "SELF_TRANSFER"
    INVALID_PIN = "INVALID_PIN"
