"""Capabilities the quoting core consumes from its environment.

Real implementations wrap contract calls; the core only needs these shapes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Union

from ..core.types import PoolBalance


class MarketMakerOracle(ABC):
    """Asks the market maker how many shares a trade moves. Calls may fail."""

    @abstractmethod
    async def estimate_return(self, amount: int, outcome_index: int) -> int:
        """Shares received for investing ``amount`` collateral in ``outcome_index``."""
        ...

    async def estimate_sell(self, return_amount: int, outcome_index: int) -> int:
        """Shares to sell to get ``return_amount`` collateral back."""
        raise NotImplementedError(f"{type(self).__name__} does not quote sells")


class ExchangeRateSource(ABC):
    @abstractmethod
    async def current_exchange_rate(self) -> Union[int, Decimal]: ...

    async def supply_rate_per_block(self) -> int:
        raise NotImplementedError(f"{type(self).__name__} does not report supply rates")


class MarketDataProvider(ABC):
    @abstractmethod
    def current_pool(self) -> List[PoolBalance]: ...

    @abstractmethod
    def current_fee_fraction(self) -> Decimal: ...
