"""Tests for AccountStore."""

import json
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Callable

import pytest

from bankomat.exceptions import StorageError
from bankomat.models import Account, Transaction, TransactionType
from bankomat.storage import JsonFileStorage, to_dict
from bankomat.store import AccountStore, seed_accounts


def make_tx(minute: int, from_id: int | None, to_id: int | None = None) -> Transaction:
    return Transaction(
        time=datetime(2024, 1, 1) + timedelta(minutes=minute),
        from_id=from_id,
        to_id=to_id,
        type=TransactionType.TRANSFER if to_id else TransactionType.DEPOSIT,
        amount=Decimal("1.00"),
        balance_after=Decimal("1.00"),
        note=f"tx {minute}",
    )


class TestInitialize:
    """Tests for first-run seeding and loading."""

    def test_seeds_fresh_directory(self, store: AccountStore, data_dir: Path) -> None:
        assert data_dir.is_dir()
        assert [a.id for a in store.accounts] == [1, 2, 3]
        assert [a.owner for a in store.accounts] == ["Liza", "Anna", "Ola"]
        assert [a.balance for a in store.accounts] == [
            Decimal("1500.00"),
            Decimal("500.00"),
            Decimal("200.00"),
        ]
        assert not any(a.blocked for a in store.accounts)
        assert store.transactions == []

    def test_seed_files_written(self, store: AccountStore, data_dir: Path) -> None:
        accounts = json.loads((data_dir / "accounts.json").read_text(encoding="utf-8"))
        transactions = json.loads((data_dir / "transactions.json").read_text(encoding="utf-8"))

        assert accounts[0] == {
            "id": 1,
            "owner": "Liza",
            "card": "1111222233334444",
            "pin": "1234",
            "balance": "1500.00",
            "blocked": False,
        }
        assert transactions == []

    def test_seed_cards_and_pins_distinct(self) -> None:
        accounts = seed_accounts()

        assert len({a.card for a in accounts}) == 3
        assert len({a.pin for a in accounts}) == 3
        for account in accounts:
            account.validate()

    def test_loads_existing_data(self, storage: JsonFileStorage) -> None:
        storage.ensure_directory()
        custom = Account(
            id=10, owner="Zoe", card="1212121212121212", pin="1111",
            balance=Decimal("42.00"), blocked=True,
        )
        storage.write_collection("accounts", [to_dict(custom)])

        store = AccountStore(storage)
        store.initialize()

        assert store.accounts == [custom]
        assert store.transactions == []
        assert storage.exists("transactions")

    def test_does_not_reseed_existing_empty_file(self, storage: JsonFileStorage) -> None:
        storage.ensure_directory()
        storage.write_collection("accounts", [])

        store = AccountStore(storage)
        store.initialize()

        assert store.accounts == []

    @pytest.mark.parametrize(
        "content",
        [
            "{broken",
            '{"id": 1}',
            '[{"id": 1, "owner": "A"}]',
            '[{"id": 1, "owner": "A", "card": "12", "pin": "0000", "balance": "1.00"}]',
            '[{"id": 1, "owner": "A", "card": "1111222233334444", "pin": "0000", "balance": "1e30"}]',
        ],
    )
    def test_corrupt_accounts_fall_back_to_empty(
        self, storage: JsonFileStorage, content: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.WARNING, logger="bankomat.store.accounts")
        storage.ensure_directory()
        storage.path_for("accounts").write_text(content, encoding="utf-8")

        store = AccountStore(storage)
        store.initialize()

        assert store.accounts == []
        assert "Ignoring unreadable accounts file" in caplog.text
        # the bad file is left for inspection
        assert storage.path_for("accounts").read_text(encoding="utf-8") == content

    def test_duplicate_cards_fall_back_to_empty(self, storage: JsonFileStorage) -> None:
        storage.ensure_directory()
        first, second = seed_accounts()[:2]
        second.card = first.card
        storage.write_collection("accounts", [to_dict(first), to_dict(second)])

        store = AccountStore(storage)
        store.initialize()

        assert store.accounts == []

    def test_duplicate_ids_fall_back_to_empty(self, storage: JsonFileStorage) -> None:
        storage.ensure_directory()
        first, second = seed_accounts()[:2]
        second.id = first.id
        storage.write_collection("accounts", [to_dict(first), to_dict(second)])

        store = AccountStore(storage)
        store.initialize()

        assert store.accounts == []

    def test_corrupt_transactions_fall_back_to_empty(
        self, storage: JsonFileStorage
    ) -> None:
        storage.ensure_directory()
        storage.path_for("transactions").write_text("[{]", encoding="utf-8")

        store = AccountStore(storage)
        store.initialize()

        assert len(store.accounts) == 3
        assert store.transactions == []


class TestLookup:
    """Tests for account lookup."""

    def test_find_by_card(self, store: AccountStore) -> None:
        account = store.find_by_card("5555666677778888")

        assert account is not None
        assert account.owner == "Anna"

    def test_find_by_card_missing(self, store: AccountStore) -> None:
        assert store.find_by_card("0000000000000000") is None
        assert store.find_by_card("5555") is None

    def test_find_by_id(self, store: AccountStore) -> None:
        account = store.find_by_id(3)

        assert account is not None
        assert account.card == "9999000011112222"

    def test_find_by_id_missing(self, store: AccountStore) -> None:
        assert store.find_by_id(99) is None

    def test_lookup_returns_live_entity(self, store: AccountStore) -> None:
        assert store.find_by_card("1111222233334444") is store.find_by_id(1)


class TestPersistence:
    """Tests for writing collections."""

    def test_append_transaction_persists(
        self, store: AccountStore, reopen: Callable[[], AccountStore]
    ) -> None:
        tx = make_tx(0, 1)
        store.append_transaction(tx)

        assert store.transactions == [tx]
        assert reopen().transactions == [tx]

    def test_append_failure_drops_entry(
        self, store: AccountStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def broken(name: str, records: list) -> None:
            raise StorageError("disk full")

        monkeypatch.setattr(store.storage, "write_collection", broken)

        with pytest.raises(StorageError):
            store.append_transaction(make_tx(0, 1))
        assert store.transactions == []

    def test_persist_accounts(
        self, store: AccountStore, reopen: Callable[[], AccountStore]
    ) -> None:
        store.accounts[0].balance = Decimal("1.23")
        store.accounts[1].blocked = True
        store.persist_accounts()

        fresh = reopen()
        assert fresh.accounts[0].balance == Decimal("1.23")
        assert fresh.accounts[1].blocked is True

    def test_reload_is_field_for_field_equal(
        self, store: AccountStore, reopen: Callable[[], AccountStore]
    ) -> None:
        store.accounts[2].pin = "4444"
        store.accounts[2].balance = Decimal("0.01")
        store.persist_accounts()
        for minute in range(5):
            store.append_transaction(make_tx(minute, 1, 2 if minute % 2 else None))

        fresh = reopen()

        assert fresh.accounts == store.accounts
        assert fresh.transactions == store.transactions

    def test_summary(self, store: AccountStore) -> None:
        store.accounts[0].blocked = True
        store.append_transaction(make_tx(0, 2))

        assert store.summary() == {
            "accounts": 3,
            "blocked_accounts": 1,
            "transactions": 1,
        }


class TestRecentTransactions:
    """Tests for the reverse history scan."""

    @pytest.fixture
    def history(self, store: AccountStore) -> AccountStore:
        # 1 deposits, 2 deposits, 1 -> 2 transfer, 3 deposits, 2 -> 1 transfer, 1 deposits
        for minute, (from_id, to_id) in enumerate(
            [(1, None), (2, None), (1, 2), (3, None), (2, 1), (1, None)]
        ):
            store.transactions.append(make_tx(minute, from_id, to_id))
        return store

    def test_newest_first_and_related_only(self, history: AccountStore) -> None:
        notes = [t.note for t in history.recent_transactions_for(1, 10)]

        assert notes == ["tx 5", "tx 4", "tx 2", "tx 0"]

    def test_limit(self, history: AccountStore) -> None:
        result = list(history.recent_transactions_for(2, 2))

        assert [t.note for t in result] == ["tx 4", "tx 2"]
        assert all(t.is_related_to(2) for t in result)

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit(self, history: AccountStore, limit: int) -> None:
        assert list(history.recent_transactions_for(1, limit)) == []

    def test_unknown_account(self, history: AccountStore) -> None:
        assert list(history.recent_transactions_for(42, 10)) == []

    def test_is_lazy(self, history: AccountStore) -> None:
        """Nothing is scanned until iteration starts."""
        scan = history.recent_transactions_for(3, 1)
        history.transactions.append(make_tx(99, 3))

        assert [t.note for t in scan] == ["tx 99"]

    def test_restartable(self, history: AccountStore) -> None:
        first = list(history.recent_transactions_for(3, 5))
        history.transactions.append(make_tx(50, 3))
        second = list(history.recent_transactions_for(3, 5))

        assert len(second) == len(first) + 1
        assert second[0].note == "tx 50"
