"""Repository for accounts and the transaction log."""

from bankomat.store.accounts import AccountStore, seed_accounts

__all__ = ["AccountStore", "seed_accounts"]
