"""Banking business logic: authentication and money movement."""

from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterator

from bankomat.exceptions import StorageError
from bankomat.logging import get_logger
from bankomat.models import (
    MAX_BALANCE,
    Account,
    ErrorCode,
    LoginResult,
    OperationResult,
    Transaction,
    TransactionType,
)
from bankomat.service.validation import (
    format_money,
    is_valid_card,
    is_valid_pin,
    normalize_amount,
)
from bankomat.store import AccountStore

logger = get_logger(__name__)

Amount = Decimal | int | float | str


class BankingService:
    """Validates and applies ATM operations against an ``AccountStore``.

    Domain failures come back as results carrying an ``ErrorCode``; only
    ``StorageError`` is raised. A failed operation never changes a balance,
    a PIN or the transaction log. A successful one is on disk before the
    result is returned.

    Parameters
    ----------
    store : AccountStore
        Initialized store holding the accounts.
    max_pin_tries : int
        Wrong PINs allowed per login session before the card is blocked.
    history_limit : int
        Default number of entries returned by ``recent_transactions``.
    currency : str
        Label appended to amounts in messages.
    clock : Callable[[], datetime]
        Source of transaction timestamps.
    """

    def __init__(
        self,
        store: AccountStore,
        max_pin_tries: int = 3,
        history_limit: int = 10,
        currency: str = "PLN",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self.max_pin_tries = max_pin_tries
        self.history_limit = history_limit
        self.currency = currency
        self._clock = clock

    def login(self, card: str, pin: str, tries_left: int) -> LoginResult:
        """Check a card/PIN pair.

        ``tries_left`` is the caller's remaining attempts for this session;
        the returned result carries the updated count. When it reaches zero
        the account is blocked and ``card_blocked`` is set.
        """
        card = card.strip()
        pin = pin.strip()

        if not is_valid_card(card):
            return LoginResult(
                ok=False,
                error="Card number must have 16 digits.",
                code=ErrorCode.INVALID_FORMAT,
                tries_left=tries_left,
            )
        if not is_valid_pin(pin):
            return LoginResult(
                ok=False,
                error="PIN must have 4 digits.",
                code=ErrorCode.INVALID_FORMAT,
                tries_left=tries_left,
            )

        with self._store.lock:
            account = self._store.find_by_card(card)
            if account is None or account.blocked:
                logger.warning("Login refused for unknown or blocked card ...%s", card[-4:])
                return LoginResult(
                    ok=False,
                    error="Card does not exist or is blocked.",
                    code=ErrorCode.NOT_FOUND_OR_BLOCKED,
                    tries_left=tries_left,
                )

            if account.pin != pin:
                tries_left -= 1
                if tries_left <= 0:
                    with self._rollback_on_failure(account):
                        account.blocked = True
                        self._store.persist_accounts()
                    logger.warning(
                        "Account %d blocked after too many wrong PINs",
                        account.id,
                        extra=_fields("lockout", account),
                    )
                    return LoginResult(
                        ok=False,
                        error="Wrong PIN. The card has been BLOCKED.",
                        code=ErrorCode.LOCKED_OUT,
                        tries_left=0,
                        card_blocked=True,
                    )

                logger.warning("Wrong PIN for account %d, %d tries left", account.id, tries_left)
                return LoginResult(
                    ok=False,
                    error=f"Wrong PIN. Tries left: {tries_left}",
                    code=ErrorCode.WRONG_PIN,
                    tries_left=tries_left,
                )

        logger.info("Account %d logged in", account.id, extra=_fields("login", account))
        return LoginResult(
            ok=True,
            info=f"Logged in. Welcome, {account.owner}!",
            account=account,
            tries_left=tries_left,
        )

    def deposit(self, account: Account, amount: Amount) -> OperationResult:
        """Credit cash to the account."""
        value = self._amount(amount)
        if isinstance(value, OperationResult):
            return value

        with self._store.lock:
            if account.balance + value > MAX_BALANCE:
                return self._balance_limit()

            with self._rollback_on_failure(account):
                account.balance += value
                self._store.persist_accounts()
                self._store.append_transaction(
                    self._transaction(
                        TransactionType.DEPOSIT, account, value, note="Cash deposit"
                    )
                )

        logger.info(
            "Deposit of %s to account %d committed",
            value,
            account.id,
            extra=_fields("deposit", account, amount=value),
        )
        return OperationResult.success(
            f"Deposited {self._money(value)}. New balance: {self._money(account.balance)}"
        )

    def withdraw(self, account: Account, amount: Amount) -> OperationResult:
        """Pay out cash from the account."""
        value = self._amount(amount)
        if isinstance(value, OperationResult):
            return value

        with self._store.lock:
            if value > account.balance:
                return OperationResult.failure(ErrorCode.INSUFFICIENT_FUNDS, "Insufficient funds.")

            with self._rollback_on_failure(account):
                account.balance -= value
                self._store.persist_accounts()
                self._store.append_transaction(
                    self._transaction(
                        TransactionType.WITHDRAW, account, value, note="Cash withdrawal"
                    )
                )

        logger.info(
            "Withdrawal of %s from account %d committed",
            value,
            account.id,
            extra=_fields("withdraw", account, amount=value),
        )
        return OperationResult.success(
            f"Withdrew {self._money(value)}. New balance: {self._money(account.balance)}"
        )

    def transfer(self, from_account: Account, to_card: str, amount: Amount) -> OperationResult:
        """Move money to the account owning ``to_card``.

        Both balances are written in a single ``persist_accounts`` call and
        recorded as one ``TRANSFER`` entry.
        """
        with self._store.lock:
            recipient = self._store.find_by_card(to_card.strip())
            if recipient is None:
                return OperationResult.failure(
                    ErrorCode.RECIPIENT_NOT_FOUND, "Recipient does not exist."
                )
            if recipient.id == from_account.id:
                return OperationResult.failure(
                    ErrorCode.SELF_TRANSFER, "Cannot transfer to your own account."
                )

            value = self._amount(amount)
            if isinstance(value, OperationResult):
                return value
            if value > from_account.balance:
                return OperationResult.failure(ErrorCode.INSUFFICIENT_FUNDS, "Insufficient funds.")
            if recipient.balance + value > MAX_BALANCE:
                return self._balance_limit()

            with self._rollback_on_failure(from_account, recipient):
                from_account.balance -= value
                recipient.balance += value
                self._store.persist_accounts()
                self._store.append_transaction(
                    self._transaction(
                        TransactionType.TRANSFER,
                        from_account,
                        value,
                        to_id=recipient.id,
                        note=f"to card {recipient.card}",
                    )
                )

        logger.info(
            "Transfer of %s from account %d to account %d committed",
            value,
            from_account.id,
            recipient.id,
            extra=_fields("transfer", from_account, amount=value, to_id=recipient.id),
        )
        return OperationResult.success(
            f"Transferred {self._money(value)} to {recipient.owner}. "
            f"Your balance: {self._money(from_account.balance)}"
        )

    def change_pin(self, account: Account, old_pin: str, new_pin: str) -> OperationResult:
        """Replace the account PIN after checking the current one."""
        with self._store.lock:
            if old_pin.strip() != account.pin:
                logger.warning("PIN change refused for account %d: wrong PIN", account.id)
                return OperationResult.failure(ErrorCode.WRONG_PIN, "Wrong PIN.")

            new_pin = new_pin.strip()
            if not is_valid_pin(new_pin):
                return OperationResult.failure(
                    ErrorCode.INVALID_PIN, "PIN must consist of 4 digits."
                )

            with self._rollback_on_failure(account):
                account.pin = new_pin
                self._store.persist_accounts()
                self._store.append_transaction(
                    self._transaction(
                        TransactionType.CHANGE_PIN, account, Decimal("0.00"), note="PIN change"
                    )
                )

        logger.info("PIN changed for account %d", account.id, extra=_fields("change_pin", account))
        return OperationResult.success("PIN has been changed.")

    def recent_transactions(self, account: Account, limit: int | None = None) -> Iterator[Transaction]:
        """Lazily yield the account's latest transactions, newest first."""
        if limit is None:
            limit = self.history_limit
        return self._store.recent_transactions_for(account.id, limit)

    def _amount(self, amount: Amount) -> Decimal | OperationResult:
        """Normalize an amount, or return the failure to report."""
        try:
            value = normalize_amount(amount)
        except ValueError:
            return OperationResult.failure(ErrorCode.INVALID_FORMAT, "Invalid amount.")
        if value <= 0:
            return OperationResult.failure(ErrorCode.INVALID_AMOUNT, "Amount must be > 0.")
        if value > MAX_BALANCE:
            return OperationResult.failure(ErrorCode.INVALID_AMOUNT, "Amount is too large.")
        return value

    def _balance_limit(self) -> OperationResult:
        return OperationResult.failure(
            ErrorCode.INVALID_AMOUNT, f"Balance cannot exceed {self._money(MAX_BALANCE)}."
        )

    def _transaction(
        self,
        type_: TransactionType,
        account: Account,
        amount: Decimal,
        to_id: int | None = None,
        note: str = "",
    ) -> Transaction:
        return Transaction(
            time=self._clock(),
            from_id=account.id,
            to_id=to_id,
            type=type_,
            amount=amount,
            balance_after=account.balance,
            note=note,
        )

    def _money(self, value: Decimal) -> str:
        return f"{format_money(value)} {self.currency}"

    @contextmanager
    def _rollback_on_failure(self, *accounts: Account) -> Iterator[None]:
        """Restore the accounts' state if a durable write fails."""
        snapshot = [(a, a.balance, a.pin, a.blocked) for a in accounts]
        try:
            yield
        except StorageError:
            logger.error(
                "Storage failure, rolling back accounts %s", [a.id for a in accounts]
            )
            for account, balance, pin, blocked in snapshot:
                account.balance = balance
                account.pin = pin
                account.blocked = blocked
            try:
                self._store.persist_accounts()
            except StorageError:
                logger.exception("Could not rewrite the account file after rollback")
            raise


def _fields(operation: str, account: Account, **values: object) -> dict:
    """Structured log fields, picked up by ``JsonFormatter``."""
    data = {"operation": operation, "account_id": account.id}
    data.update({k: str(v) if isinstance(v, Decimal) else v for k, v in values.items()})
    return {"extra": data}
