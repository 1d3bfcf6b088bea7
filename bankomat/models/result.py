"""Result objects returned by the banking service."""

from dataclasses import dataclass
from typing import Iterator

from bankomat.models.account import Account
from bankomat.models.enums import ErrorCode


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a service call.

    Unpacks as the ``(ok, error, info)`` triple shells branch on::

        ok, error, info = service.deposit(account, "100")
    """

    ok: bool
    error: str | None = None
    info: str = ""
    code: ErrorCode | None = None

    @classmethod
    def success(cls, info: str) -> "OperationResult":
        return cls(ok=True, info=info)

    @classmethod
    def failure(cls, code: ErrorCode, error: str) -> "OperationResult":
        return cls(ok=False, error=error, code=code)

    def __iter__(self) -> Iterator[object]:
        return iter((self.ok, self.error, self.info))


@dataclass(frozen=True)
class LoginResult(OperationResult):
    """Outcome of a login attempt."""

    account: Account | None = None
    tries_left: int = 0
    card_blocked: bool = False
