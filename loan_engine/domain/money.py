"""Currency helpers. All amounts are Decimal and rounded half away from zero to the cent."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Coerce input to Decimal. Floats go through str() so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_currency(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def monthly_rate(annual_rate_percent: Number) -> Decimal:
    """Annual percentage rate -> periodic monthly rate as a fraction"""
    return to_decimal(annual_rate_percent) / 12 / HUNDRED
