"""Small utilities for fixed-point amounts."""

from __future__ import annotations

from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP, localcontext
from typing import Union

Number = Union[int, float, str, Decimal]

# wide enough for 18-decimal amounts multiplied by 28-digit exchange rates
DECIMAL_PRECISION = 80


def ceil_div(n: int, d: int) -> int:
    """Integer division rounding up, for non-negative operands."""
    return -(-n // d)


def as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # go through repr so 0.1 stays 0.1
        return Decimal(repr(value))
    return Decimal(value)


def format_units(amount: int, decimals: int) -> Decimal:
    """Base units -> human amount, exact."""
    if decimals < 0:
        raise ValueError("decimals must be non-negative")
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(amount).scaleb(-decimals)


def parse_units(value: Number, decimals: int) -> int:
    """Human amount -> base units. Digits beyond ``decimals`` are truncated."""
    if decimals < 0:
        raise ValueError("decimals must be non-negative")
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        scaled = as_decimal(value).scaleb(decimals)
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def to_fixed(value: Number, places: int = 4) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return as_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_amount(amount: int, decimals: int, precision: int = 2) -> str:
    return f"{to_fixed(format_units(amount, decimals), precision):f}"
