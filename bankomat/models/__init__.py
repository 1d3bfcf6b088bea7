"""Domain models for the ATM."""

from bankomat.models.account import MAX_BALANCE, Account
from bankomat.models.enums import ErrorCode, TransactionType
from bankomat.models.result import LoginResult, OperationResult
from bankomat.models.transaction import Transaction

__all__ = [
    "MAX_BALANCE",
    "Account",
    "ErrorCode",
    "LoginResult",
    "OperationResult",
    "Transaction",
    "TransactionType",
]
