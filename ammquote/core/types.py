"""Core type definitions for the quoting core.

Amounts that live on-chain (pool holdings, shares, collateral) are plain ints in
base units. Probabilities and prices shown to the user are floats in [0, 100].
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class Outcome:
    name: str
    probability: float = 0.0


@dataclass(frozen=True)
class Token:
    symbol: str
    decimals: int
    address: str = ""


@dataclass(frozen=True)
class PoolBalance:
    """Market maker reserve (``holdings``) and trader position (``shares``) for one outcome."""

    outcome_index: int
    holdings: int
    shares: int = 0
    outcome_name: Optional[str] = None


@dataclass(frozen=True)
class ExchangeSnapshot:
    rate: Decimal = Decimal(0)
    ctoken_decimals: int = 8


@dataclass(frozen=True)
class FeeQuote:
    fee_paid: int
    base_cost: int
    potential_profit: int


@dataclass(frozen=True)
class TradeQuote:
    outcome_index: int
    traded_shares: int
    prices_after_trade: List[float]
    amount_used: int
    balance_after_trade: List[int] = field(default_factory=list)
    new_shares: List[int] = field(default_factory=list)
    fee_fraction: Decimal = Decimal(0)
    fee_precision: int = 4
    side: str = "buy"
