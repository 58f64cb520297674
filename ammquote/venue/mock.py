"""Mock market maker and rate source for simulation and tests.

The market maker answers with the same fixed-product integer math as the
on-chain contract, reading reserves from a :class:`Store`. Both mocks can be
told to fail, and can add latency so overlapping requests can be exercised.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Union

from .base import ExchangeRateSource, MarketMakerOracle
from ..core.errors import ExchangeRateError, OracleError
from ..pricing.cpmm import calc_buy_amount, calc_sell_amount
from ..state.store import Store


class MockMarketMaker(MarketMakerOracle):
    def __init__(self, store: Store, latency_s: float = 0.0):
        self.store = store
        self.latency_s = latency_s
        self.fail = False
        self.calls = 0

    async def _before_call(self):
        self.calls += 1
        if self.latency_s > 0:
            await asyncio.sleep(self.latency_s)
        if self.fail:
            raise OracleError("execution reverted")

    async def estimate_return(self, amount: int, outcome_index: int) -> int:
        await self._before_call()
        return calc_buy_amount(amount, outcome_index, self.store.holdings(), self.store.fee)

    async def estimate_sell(self, return_amount: int, outcome_index: int) -> int:
        await self._before_call()
        try:
            return calc_sell_amount(
                return_amount, outcome_index, self.store.holdings(), self.store.fee
            )
        except ValueError as e:
            raise OracleError(str(e)) from e


class MockRateSource(ExchangeRateSource):
    def __init__(self, rate: Union[int, Decimal] = 0, supply_rate_per_block: int = 0):
        self.rate = rate
        self.supply_rate = supply_rate_per_block
        self.fail = False

    async def current_exchange_rate(self) -> Union[int, Decimal]:
        if self.fail:
            raise ExchangeRateError("exchangeRateStored reverted")
        return self.rate

    async def supply_rate_per_block(self) -> int:
        return self.supply_rate
