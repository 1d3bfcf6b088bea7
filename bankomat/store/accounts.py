"""Account store: authoritative in-memory collections backed by JSON files."""

import threading
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Iterator, TypeVar

from bankomat.exceptions import InvalidEntityStateError, SerializationError
from bankomat.logging import get_logger
from bankomat.models import Account, Transaction
from bankomat.storage import (
    JsonFileStorage,
    account_from_dict,
    to_dict,
    transaction_from_dict,
)

logger = get_logger(__name__)

ACCOUNTS_FILE = "accounts"
TRANSACTIONS_FILE = "transactions"

T = TypeVar("T")


def seed_accounts() -> list[Account]:
    """Starter accounts written on first run."""
    return [
        Account(
            id=1,
            owner="Liza",
            card="1111222233334444",
            pin="1234",
            balance=Decimal("1500.00"),
        ),
        Account(
            id=2,
            owner="Anna",
            card="5555666677778888",
            pin="5678",
            balance=Decimal("500.00"),
        ),
        Account(
            id=3,
            owner="Ola",
            card="9999000011112222",
            pin="0000",
            balance=Decimal("200.00"),
        ),
    ]


@dataclass
class AccountStore:
    """Sole owner of the account and transaction collections.

    All reads and writes of durable storage go through this class. Callers
    that mutate accounts must hold ``lock`` for the whole
    mutate-and-persist sequence.
    """

    storage: JsonFileStorage
    accounts: list[Account] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def initialize(self) -> None:
        """Create or load the account and transaction files."""
        with self.lock:
            self.storage.ensure_directory()

            if not self.storage.exists(ACCOUNTS_FILE):
                self.accounts = seed_accounts()
                self.persist_accounts()
                logger.info("Seeded %d starter accounts", len(self.accounts))
            else:
                self.accounts = self._load(ACCOUNTS_FILE, _decode_accounts)

            if not self.storage.exists(TRANSACTIONS_FILE):
                self.transactions = []
                self.persist_transactions()
            else:
                self.transactions = self._load(TRANSACTIONS_FILE, _decode_transactions)

            logger.info("Store ready: %s", self.summary())

    def _load(self, name: str, decode: Callable[[list[dict]], list[T]]) -> list[T]:
        """Load a collection, falling back to empty on a corrupt file."""
        try:
            return decode(self.storage.read_collection(name))
        except (SerializationError, InvalidEntityStateError) as exc:
            logger.warning(
                "Ignoring unreadable %s file, starting with an empty collection: %s",
                name,
                exc,
            )
            return []

    def find_by_card(self, card: str) -> Account | None:
        """Return the first account with this card number."""
        return next((a for a in self.accounts if a.card == card), None)

    def find_by_id(self, account_id: int) -> Account | None:
        """Return the first account with this id."""
        return next((a for a in self.accounts if a.id == account_id), None)

    def persist_accounts(self) -> None:
        """Overwrite the account file with the current collection."""
        with self.lock:
            self.storage.write_collection(ACCOUNTS_FILE, [to_dict(a) for a in self.accounts])

    def persist_transactions(self) -> None:
        """Overwrite the transaction file with the current log."""
        with self.lock:
            self.storage.write_collection(
                TRANSACTIONS_FILE, [to_dict(t) for t in self.transactions]
            )

    def append_transaction(self, transaction: Transaction) -> None:
        """Append to the log and persist it immediately.

        If the write fails the entry is dropped from memory again and the
        ``StorageError`` propagates.
        """
        with self.lock:
            self.transactions.append(transaction)
            try:
                self.persist_transactions()
            except Exception:
                self.transactions.pop()
                raise

    def recent_transactions_for(self, account_id: int, limit: int) -> Iterator[Transaction]:
        """Yield up to ``limit`` related transactions, newest first.

        Each call rescans the current log.
        """
        shown = 0
        for transaction in reversed(self.transactions):
            if shown >= limit:
                return
            if transaction.is_related_to(account_id):
                shown += 1
                yield transaction

    def summary(self) -> dict[str, int]:
        """Return summary counts of the store."""
        return {
            "accounts": len(self.accounts),
            "blocked_accounts": sum(1 for a in self.accounts if a.blocked),
            "transactions": len(self.transactions),
        }


def _decode_accounts(records: list[dict]) -> list[Account]:
    accounts = []
    ids: set[int] = set()
    cards: set[str] = set()
    for record in records:
        account = account_from_dict(record)
        account.validate()
        if account.id in ids:
            raise InvalidEntityStateError(f"Duplicate account id {account.id}")
        if account.card in cards:
            raise InvalidEntityStateError(f"Duplicate card on account {account.id}")
        ids.add(account.id)
        cards.add(account.card)
        accounts.append(account)
    return accounts


def _decode_transactions(records: list[dict]) -> list[Transaction]:
    return [transaction_from_dict(record) for record in records]
