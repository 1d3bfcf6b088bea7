"""Per-terminal login attempt tracking."""

from bankomat.models import ErrorCode, LoginResult
from bankomat.service.banking import BankingService


class LoginSession:
    """Counts wrong PINs across attempts made at one terminal session.

    The counter starts at the service's ``max_pin_tries``, is decremented
    by every wrong PIN and is reset by a successful login. Once the service
    reports a lockout the session refuses all further attempts.
    """

    def __init__(self, service: BankingService) -> None:
        self._service = service
        self.tries_left = service.max_pin_tries
        self.locked = False

    def attempt(self, card: str, pin: str) -> LoginResult:
        if self.locked:
            return LoginResult(
                ok=False,
                error="Too many wrong PINs. Session is locked.",
                code=ErrorCode.LOCKED_OUT,
                card_blocked=True,
            )

        result = self._service.login(card, pin, self.tries_left)
        if result.ok:
            self.reset()
        else:
            self.tries_left = result.tries_left
            self.locked = result.card_blocked
        return result

    def reset(self) -> None:
        """Start a fresh session."""
        self.tries_left = self._service.max_pin_tries
        self.locked = False
