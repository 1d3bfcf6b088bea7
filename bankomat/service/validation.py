"""Input validation and money normalization shared by service and shells."""

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Any

from bankomat.models.account import CARD_PATTERN, PIN_PATTERN

CENTS = Decimal("0.01")


def is_valid_card(text: Any) -> bool:
    """Return True for exactly 16 decimal digits."""
    return isinstance(text, str) and CARD_PATTERN.fullmatch(text) is not None


def is_valid_pin(text: Any) -> bool:
    """Return True for exactly 4 decimal digits."""
    return isinstance(text, str) and PIN_PATTERN.fullmatch(text) is not None


def normalize_amount(value: Decimal | int | float | str) -> Decimal:
    """Convert user input to a 2-place ``Decimal``.

    Strings may use a comma as the decimal separator. Extra precision is
    rounded half-to-even, so ``"0.005"`` becomes ``0.00`` and ``"0.015"``
    becomes ``0.02``.

    Raises
    ------
    ValueError
        If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip().replace(",", "."))
        except InvalidOperation as exc:
            raise ValueError(f"Not an amount: {value!r}") from exc
    else:
        raise ValueError(f"Not an amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Not an amount: {value!r}")
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_EVEN)
    except InvalidOperation as exc:
        raise ValueError(f"Amount out of range: {value!r}") from exc


def parse_amount(text: str) -> Decimal | None:
    """Like ``normalize_amount`` but returns None for bad input."""
    try:
        return normalize_amount(text)
    except ValueError:
        return None


def format_money(value: Decimal) -> str:
    return f"{value:.2f}"
