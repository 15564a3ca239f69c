"""
Decimal helpers shared by every calculation.

Internal math runs at full Decimal precision; values are quantized to
cents only when they leave a calculator.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def to_decimal(value: Optional[Number]) -> Decimal:
    """Coerce a number (or None) to Decimal without binary float artefacts."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """Round to two decimal places, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percent(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100 at full precision; zero when whole is zero."""
    if whole == 0:
        return ZERO
    return part / whole * HUNDRED


def money_str(value: Number) -> str:
    """Cent-rounded string form, used for money stored inside JSON columns."""
    return str(round_money(value))
