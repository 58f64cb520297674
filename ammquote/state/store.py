"""In-memory market snapshot; serves pool balances and the fee to the quoter."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional

from ..core.types import PoolBalance, Token
from ..exec.quoter import amount_error
from ..pricing.fees import fee_fraction_from_wei
from ..venue.base import MarketDataProvider


@dataclass
class Store(MarketDataProvider):
    pool: List[PoolBalance] = field(default_factory=list)
    fee: int = 0  # 18-decimal fixed point
    collateral: Optional[Token] = None
    fee_precision: int = 4

    def upsert_pool(self, balances: Iterable[PoolBalance]):
        self.pool = sorted(balances, key=lambda b: b.outcome_index)

    def set_holdings(self, holdings: Iterable[int], shares: Optional[Iterable[int]] = None):
        holdings = list(holdings)
        shares = list(shares) if shares is not None else [0] * len(holdings)
        if len(shares) != len(holdings):
            raise ValueError("holdings and shares must have the same length")
        self.pool = [
            PoolBalance(outcome_index=i, holdings=h, shares=s)
            for i, (h, s) in enumerate(zip(holdings, shares))
        ]

    def holdings(self) -> List[int]:
        return [b.holdings for b in self.pool]

    def current_pool(self) -> List[PoolBalance]:
        # copy so callers can't reorder our snapshot
        return list(self.pool)

    def current_fee_fraction(self) -> Decimal:
        return fee_fraction_from_wei(self.fee, self.fee_precision)

    def amount_error(self, amount: Optional[int], balance: Optional[int]) -> Optional[str]:
        """Validate a trade amount against the trader's balance of the collateral token."""
        if self.collateral is None:
            raise ValueError("store has no collateral token")
        return amount_error(amount, balance, self.collateral)
