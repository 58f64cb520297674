"""Fee, base cost and potential profit for a trade quote.

The market fee is stored on-chain as an 18-decimal fixed-point integer
(``10**18`` == 100%). The fee fraction is rounded half-up to ``precision``
decimals and applied as ``amount * round(fraction * 10**p) // 10**p``, so the
result is an exact integer and ``fee_paid + base_cost == amount_used``.
"""

from __future__ import annotations

from decimal import Decimal

from ..core.types import FeeQuote, TradeQuote
from ..core.utils import Number, format_units, to_fixed

FEE_DECIMALS = 18
FEE_PRECISION = 4


def fee_fraction_from_wei(fee: int, precision: int = FEE_PRECISION) -> Decimal:
    return to_fixed(format_units(fee, FEE_DECIMALS), precision)


def fee_percentage(fee: int, precision: int = FEE_PRECISION) -> Decimal:
    return fee_fraction_from_wei(fee, precision) * 100


def fee_paid(amount_used: int, fee_fraction: Number, precision: int = FEE_PRECISION) -> int:
    scale = 10**precision
    scaled_fraction = int(to_fixed(fee_fraction, precision).scaleb(precision))
    return amount_used * scaled_fraction // scale


def base_cost(amount_used: int, fee_fraction: Number, precision: int = FEE_PRECISION) -> int:
    return amount_used - fee_paid(amount_used, fee_fraction, precision)


def potential_profit(traded_shares: int, amount_used: int) -> int:
    if traded_shares == 0:
        return 0
    return traded_shares - amount_used


def fee_quote(quote: TradeQuote) -> FeeQuote:
    paid = fee_paid(quote.amount_used, quote.fee_fraction, quote.fee_precision)
    return FeeQuote(
        fee_paid=paid,
        base_cost=quote.amount_used - paid,
        potential_profit=potential_profit(quote.traded_shares, quote.amount_used),
    )
