"""
Currency helpers.

Amounts are Decimal internally and only become strings here, at the
display boundary.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

DEFAULT_CURRENCY_SYMBOL = "₺"

# Leading numeric prefix, the part a lenient form parser accepts
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def to_decimal(amount: Union[Decimal, int, float, str]) -> Decimal:
    """Coerce a numeric value to Decimal without float artefacts."""
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        return Decimal(str(amount))
    return Decimal(amount)


def round_half_up(amount: Union[Decimal, int, float]) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    return int(to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(
    amount: Union[Decimal, int, float],
    symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> str:
    """
    Render an amount as Turkish lira with no decimals.

    Examples: 1500 -> "₺1.500", 1234567.5 -> "₺1.234.568", -200 -> "-₺200"
    """
    whole = round_half_up(amount)
    grouped = f"{abs(whole):,}".replace(",", ".")
    sign = "-" if whole < 0 else ""
    return f"{sign}{symbol}{grouped}"


def parse_turkish_number(value) -> Decimal:
    """
    Parse user input that may use ',' as the decimal separator.

    Reads the leading numeric part ("12,5 TL" -> 12.5). Anything that
    does not start with a number yields 0; this never raises.
    """
    if not isinstance(value, str):
        return Decimal("0")
    match = _NUMBER_PREFIX.match(value.strip().replace(",", ".", 1))
    if match is None:
        return Decimal("0")
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return Decimal("0")
