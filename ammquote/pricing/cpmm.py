"""Fixed-product market maker (FPMM) math for N-outcome pools.

Marginal price of outcome i is proportional to the product of every *other*
outcome's reserve:

    p_i = prod_{j != i} h_j / sum_k prod_{j != k} h_j

For binary pools this reduces to ``p_yes = h_no / (h_yes + h_no)``.

The buy/sell amount functions reproduce the integer arithmetic of the
market maker contract (ceiling division, fee on the investment). The quoter
never calls them directly; they back the mock market maker and tests.
"""

from __future__ import annotations

from typing import List, Sequence

from .base import PricingModel
from ..core.utils import ceil_div

ONE = 10**18


class FixedProductPricing(PricingModel):
    def weights(self, holdings: Sequence[int]) -> List[int]:
        out = []
        for i in range(len(holdings)):
            p = 1
            for j, h in enumerate(holdings):
                if j != i:
                    p *= h
            out.append(p)
        return out


def marginal_prices(holdings: Sequence[int]) -> List[float]:
    """Prices in [0, 1] summing to 1. Degenerate pools fall back to uniform."""
    return FixedProductPricing().fractions(holdings)


def balance_after_trade(
    holdings: Sequence[int], outcome_index: int, amount: int, shares: int
) -> List[int]:
    """Pool reserves after a trade.

    Every reserve grows by ``amount``; the traded outcome additionally pays out
    ``shares``. Pass negative ``amount`` and ``shares`` for a sell.
    """
    return [
        h + amount - shares if i == outcome_index else h + amount
        for i, h in enumerate(holdings)
    ]


def calc_buy_amount(
    investment: int, outcome_index: int, pool: Sequence[int], fee: int = 0
) -> int:
    """Shares received for ``investment`` collateral. ``fee`` uses 18 decimals."""
    if not 0 <= outcome_index < len(pool):
        raise IndexError("outcome index out of range")
    investment_minus_fees = investment - investment * fee // ONE
    buy_balance = pool[outcome_index]
    ending = buy_balance
    for j, balance in enumerate(pool):
        if j != outcome_index:
            ending = ceil_div(ending * balance, balance + investment_minus_fees)
    return buy_balance + investment_minus_fees - ending


def calc_sell_amount(
    return_amount: int, outcome_index: int, pool: Sequence[int], fee: int = 0
) -> int:
    """Shares that must be sold to receive ``return_amount`` collateral."""
    if not 0 <= outcome_index < len(pool):
        raise IndexError("outcome index out of range")
    return_plus_fees = return_amount * ONE // (ONE - fee)
    sell_balance = pool[outcome_index]
    ending = sell_balance * ONE
    for j, balance in enumerate(pool):
        if j != outcome_index:
            if balance <= return_plus_fees:
                raise ValueError("return amount exceeds pool reserves")
            ending = ceil_div(ending * balance, balance - return_plus_fees)
    return return_plus_fees + ceil_div(ending, ONE) - sell_balance
