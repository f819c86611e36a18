"""Amount parsing, rounding and formatting utilities."""

import re
from decimal import (
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Decimal,
    InvalidOperation,
)
from enum import Enum
from typing import Union

from accountshelper.domain.enums import Currency, ShowCurrencySymbols
from accountshelper.domain.errors import ValidationError

# Shown in place of an exactly-zero amount.
DEFAULT_ZERO_REPRESENTATION = "-"

Number = Union[Decimal, int, float, str]


class RoundingMode(Enum):
    """Rounding modes for ``round_to_scale``.

    HALF_UP rounds ties away from zero, so 2.555 -> 2.56 and -2.555 -> -2.56.
    """

    FLOOR = ROUND_FLOOR
    CEILING = ROUND_CEILING
    DOWN = ROUND_DOWN
    UP = ROUND_UP
    HALF_UP = ROUND_HALF_UP
    HALF_EVEN = ROUND_HALF_EVEN


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() avoids dragging binary noise into the decimal
        return Decimal(str(value))
    return Decimal(value)


def round_to_scale(
    value: Number, scale: int, mode: RoundingMode = RoundingMode.HALF_UP
) -> Decimal:
    """Round a value to ``scale`` fractional digits.

    Args:
        value: Value to round
        scale: Number of fractional digits to keep (0 rounds to an integer)
        mode: Rounding mode

    Returns:
        Rounded Decimal
    """
    exponent = Decimal(1).scaleb(-scale)
    return _to_decimal(value).quantize(exponent, rounding=mode.value)


def decimal_to_minor_units(value: Number) -> int:
    """Convert a major-unit amount to integer minor units (cents).

    Sub-cent input rounds to the nearest cent with ties away from zero:
    12.345 -> 1235, -5.67 -> -567.
    """
    return int(round_to_scale(_to_decimal(value) * 100, 0, RoundingMode.HALF_UP))


def minor_units_to_decimal(units: int) -> Decimal:
    """Convert integer minor units back to a two-decimal amount."""
    return Decimal(int(units)).scaleb(-2)


def format_amount(
    amount: Number,
    currency: Currency,
    show_symbol: Union[bool, ShowCurrencySymbols] = ShowCurrencySymbols.ALWAYS,
    zero: str = DEFAULT_ZERO_REPRESENTATION,
) -> str:
    """Render an amount for display.

    Zero renders as ``zero``. With a symbol, the currency's symbol and minor
    digits are used ("£1,234.50", "¥1,000"). Without one, every currency
    renders as a plain two-decimal number ("1000.00").

    Args:
        amount: Amount to format
        currency: Currency of the amount
        show_symbol: True/False, or a ShowCurrencySymbols setting
        zero: Representation for an exactly-zero amount

    Returns:
        Formatted string
    """
    value = _to_decimal(amount)
    if value == 0:
        return zero

    if isinstance(show_symbol, ShowCurrencySymbols):
        with_symbol = show_symbol.show(currency)
    else:
        with_symbol = bool(show_symbol)

    if not with_symbol:
        return f"{round_to_scale(value, 2):.2f}"

    digits = currency.minor_digits
    rounded = round_to_scale(abs(value), digits)
    sign = "-" if value < 0 else ""
    return f"{sign}{currency.symbol}{rounded:,.{digits}f}"


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles "123.45", "£123.45", "-£1,234.56", "(123.45)", "¥1000".

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    text = amount_str.strip()
    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = re.sub(r"[£$€¥,\s]", "", text)
    if text.startswith("-"):
        is_negative = not is_negative
        text = text[1:]

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount
