"""Pytest configuration and fixtures."""

import itertools
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

import pytest

from bankomat.models import Account
from bankomat.service import BankingService
from bankomat.storage import JsonFileStorage
from bankomat.store import AccountStore

LIZA_CARD = "1111222233334444"
ANNA_CARD = "5555666677778888"
OLA_CARD = "9999000011112222"


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Storage directory that does not exist yet."""
    return tmp_path / "data"


@pytest.fixture
def storage(data_dir: Path) -> JsonFileStorage:
    return JsonFileStorage(data_dir)


@pytest.fixture
def store(storage: JsonFileStorage) -> AccountStore:
    """Freshly seeded store."""
    store = AccountStore(storage)
    store.initialize()
    return store


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock advancing one minute per call."""
    ticks = itertools.count()
    start = datetime(2024, 1, 1, 9, 0, 0)
    return lambda: start + timedelta(minutes=next(ticks))


@pytest.fixture
def service(store: AccountStore, clock: Callable[[], datetime]) -> BankingService:
    return BankingService(store, clock=clock)


@pytest.fixture
def liza(store: AccountStore) -> Account:
    account = store.find_by_card(LIZA_CARD)
    assert account is not None
    return account


@pytest.fixture
def anna(store: AccountStore) -> Account:
    account = store.find_by_card(ANNA_CARD)
    assert account is not None
    return account


@pytest.fixture
def ola(store: AccountStore) -> Account:
    account = store.find_by_card(OLA_CARD)
    assert account is not None
    return account


@pytest.fixture
def reopen(data_dir: Path) -> Callable[[], AccountStore]:
    """Open a second store over the same directory."""

    def _reopen() -> AccountStore:
        fresh = AccountStore(JsonFileStorage(data_dir))
        fresh.initialize()
        return fresh

    return _reopen
