"""Transaction log entry."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from bankomat.models.enums import TransactionType


@dataclass(frozen=True)
class Transaction:
    """Immutable record of one committed operation."""

    time: datetime
    from_id: int | None
    to_id: int | None  # set for transfers only
    type: TransactionType
    amount: Decimal  # 0 for CHANGE_PIN
    balance_after: Decimal  # balance of the from_id account
    note: str = ""

    def is_related_to(self, account_id: int) -> bool:
        """Return True if the account is the origin or the counterparty."""
        return self.from_id == account_id or self.to_id == account_id
