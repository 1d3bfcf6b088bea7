"""Text console front end."""

from decimal import Decimal
from typing import Callable

from bankomat.models import Account, OperationResult
from bankomat.service import BankingService, LoginSession, format_money, parse_amount

MENU_OPTIONS = (
    "Balance",
    "Deposit",
    "Withdraw",
    "Transfer",
    "History",
    "Change PIN",
    "Log out",
)


class ConsoleUI:
    """Prompt-driven ATM session on a text terminal.

    Parameters
    ----------
    service : BankingService
        Logic layer to drive.
    input_func : Callable[[str], str]
        Prompt reader (``input`` by default).
    output : Callable[[str], None]
        Line writer (``print`` by default).
    """

    def __init__(
        self,
        service: BankingService,
        input_func: Callable[[str], str] | None = None,
        output: Callable[[str], None] | None = None,
    ) -> None:
        self.service = service
        self._input = input_func or input
        self._output = output or print

    def run(self) -> None:
        """Serve sessions until an empty card number or end of input."""
        try:
            while True:
                account = self.login()
                if account is None:
                    break
                self.main_menu(account)
        except EOFError:
            self._output("")
        self._output("Goodbye!")

    def login(self) -> Account | None:
        """Ask for card and PIN until login succeeds, the user quits or the card locks."""
        session = LoginSession(self.service)

        while True:
            self._header("LOGIN")
            self._output("Empty card number exits the program.")
            card = self._ask("Card number (16 digits): ")
            if not card:
                return None
            pin = self._ask("PIN (4 digits): ")

            result = session.attempt(card, pin)
            if result.ok:
                self._output(result.info)
                return result.account

            self._output(result.error or "")
            if result.card_blocked:
                return None

    def main_menu(self, account: Account) -> None:
        actions: dict[str, Callable[[Account], None]] = {
            "1": self.show_balance,
            "2": self.do_deposit,
            "3": self.do_withdraw,
            "4": self.do_transfer,
            "5": self.show_history,
            "6": self.do_change_pin,
        }

        while True:
            self._header("MAIN MENU")
            self._output(
                f"User: {account.owner}   Balance: {self._money(account.balance)}"
            )
            for number, label in enumerate(MENU_OPTIONS, start=1):
                self._output(f"  {number}. {label}")

            choice = self._ask("Choose an option: ")
            if choice == str(len(MENU_OPTIONS)):
                return
            action = actions.get(choice)
            if action is None:
                self._output("Unknown option.")
                continue
            action(account)

    def show_balance(self, account: Account) -> None:
        self._header("BALANCE")
        self._output(f"Available funds: {self._money(account.balance)}")

    def do_deposit(self, account: Account) -> None:
        self._header("DEPOSIT")
        amount = self._ask_amount("Deposit amount")
        if amount is not None:
            self._report(self.service.deposit(account, amount))

    def do_withdraw(self, account: Account) -> None:
        self._header("WITHDRAW")
        amount = self._ask_amount("Withdrawal amount")
        if amount is not None:
            self._report(self.service.withdraw(account, amount))

    def do_transfer(self, account: Account) -> None:
        self._header("TRANSFER")
        card = self._ask("Recipient card (16 digits): ")
        amount = self._ask_amount("Transfer amount")
        if amount is not None:
            self._report(self.service.transfer(account, card, amount))

    def show_history(self, account: Account) -> None:
        self._header(f"HISTORY (last {self.service.history_limit})")
        count = 0
        for tx in self.service.recent_transactions(account):
            self._output(
                f"{tx.time:%Y-%m-%d %H:%M:%S} | {tx.type.value:<10} | "
                f"{format_money(tx.amount):>10} {self.service.currency} | {tx.note} | "
                f"balance: {format_money(tx.balance_after)}"
            )
            count += 1
        if count == 0:
            self._output("No operations.")

    def do_change_pin(self, account: Account) -> None:
        self._header("CHANGE PIN")
        old_pin = self._ask("Current PIN: ")
        new_pin = self._ask("New PIN (4 digits): ")
        self._report(self.service.change_pin(account, old_pin, new_pin))

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _ask_amount(self, label: str) -> Decimal | None:
        amount = parse_amount(self._ask(f"{label} (e.g. 100 or 99,99): "))
        if amount is None:
            self._output("Invalid amount.")
        return amount

    def _report(self, result: OperationResult) -> None:
        ok, error, info = result
        self._output(info if ok else error)

    def _header(self, title: str) -> None:
        self._output("=" * 33)
        self._output("BANKOMAT".center(33))
        self._output("=" * 33)
        self._output(title)

    def _money(self, value: Decimal) -> str:
        return f"{format_money(value)} {self.service.currency}"
