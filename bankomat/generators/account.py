"""Account generator for populating test account files."""

from decimal import Decimal
from typing import Iterator

from bankomat.generators.base import BaseGenerator
from bankomat.models import Account


class AccountGenerator(BaseGenerator):
    """Generate valid, unblocked accounts with unique card numbers."""

    MAX_BALANCE_CENTS = 500_000

    def __init__(self, seed: int | None = None, locale: str = "pl_PL") -> None:
        super().__init__(seed, locale)
        self._issued_cards: set[str] = set()

    def generate(self, account_id: int) -> Account:
        """Generate a single account.

        Parameters
        ----------
        account_id : int
            Id to assign to the account.

        Returns
        -------
        Account
            Generated account.
        """
        account = Account(
            id=account_id,
            owner=self.fake.first_name(),
            card=self._new_card(),
            pin=self.fake.numerify("####"),
            balance=Decimal(self.random.randint(0, self.MAX_BALANCE_CENTS)).scaleb(-2),
        )
        account.validate()
        return account

    def generate_batch(self, count: int, start_id: int = 1) -> Iterator[Account]:
        """Generate ``count`` accounts with sequential ids."""
        for account_id in range(start_id, start_id + count):
            yield self.generate(account_id)

    def _new_card(self) -> str:
        while True:
            card = self.fake.numerify("#" * 16)
            if card not in self._issued_cards:
                self._issued_cards.add(card)
                return card
