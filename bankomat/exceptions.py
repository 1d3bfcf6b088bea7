"""Custom exception hierarchy for bankomat.

Only infrastructure failures are raised. Domain failures (wrong PIN,
insufficient funds, ...) are reported through ``OperationResult``.
"""


class BankomatError(Exception):
    """Base exception for all bankomat errors."""


class StorageError(BankomatError):
    """Raised when reading or writing durable storage fails."""


class SerializationError(BankomatError):
    """Raised when a persisted record cannot be decoded."""


class InvalidEntityStateError(BankomatError):
    """Raised when an entity violates its field invariants."""


class ConfigurationError(BankomatError):
    """Raised when configuration is invalid or missing."""
