"""Account model."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from bankomat.exceptions import InvalidEntityStateError

CARD_PATTERN = re.compile(r"[0-9]{16}")
PIN_PATTERN = re.compile(r"[0-9]{4}")

# Upper bound for balances and single amounts
MAX_BALANCE = Decimal("999999999999999.99")


@dataclass
class Account:
    """Bank account reachable through a card.

    ``card`` is the login key and must be unique across the store.
    ``blocked`` is one-way: nothing in the system unblocks an account.
    """

    id: int
    owner: str
    card: str  # 16 digits
    pin: str  # 4 digits
    balance: Decimal
    blocked: bool = False

    def validate(self) -> None:
        """Check field invariants, raising ``InvalidEntityStateError``."""
        if not self.owner.strip():
            raise InvalidEntityStateError(f"Account {self.id} has an empty owner")
        if not CARD_PATTERN.fullmatch(self.card):
            raise InvalidEntityStateError(f"Account {self.id} card must be 16 digits")
        if not PIN_PATTERN.fullmatch(self.pin):
            raise InvalidEntityStateError(f"Account {self.id} PIN must be 4 digits")
        if self.balance < 0:
            raise InvalidEntityStateError(f"Account {self.id} has a negative balance")
        if self.balance > MAX_BALANCE:
            raise InvalidEntityStateError(f"Account {self.id} balance exceeds {MAX_BALANCE}")
        try:
            exact = self.balance == self.balance.quantize(Decimal("0.01"))
        except InvalidOperation:
            exact = False
        if not exact:
            raise InvalidEntityStateError(
                f"Account {self.id} balance has more than 2 decimal places"
            )
