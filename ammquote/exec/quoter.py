"""Trade quoting against an AMM pool.

``TradeQuoter`` asks the market maker oracle how many shares an amount moves
and derives post-trade reserves, prices and the trader's new share holding.
An oracle failure is not an error for the caller: the quote simply reports
zero shares. ``LiveQuote`` sits on top of it for user input, debouncing and
dropping results that were overtaken by newer input.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Awaitable, Callable, List, Optional, Sequence

from ..core.types import FeeQuote, PoolBalance, Token, TradeQuote
from ..core.utils import Number, as_decimal, format_amount
from ..io.metrics import inc_discarded, inc_oracle_failures, inc_quotes
from ..pricing.base import PricingModel
from ..pricing.cpmm import FixedProductPricing, balance_after_trade
from ..pricing.fees import FEE_PRECISION, fee_quote
from ..venue.base import MarketDataProvider, MarketMakerOracle
from .throttle import Debouncer

logger = logging.getLogger(__name__)

BUY = "buy"
SELL = "sell"


class TradeQuoter:
    def __init__(
        self,
        oracle: MarketMakerOracle,
        market: Optional[MarketDataProvider] = None,
        pricing: Optional[PricingModel] = None,
        timeout_s: Optional[float] = None,
        fee_precision: int = FEE_PRECISION,
    ):
        self.oracle = oracle
        self.market = market
        self.pricing = pricing or FixedProductPricing()
        self.timeout_s = timeout_s
        self.fee_precision = fee_precision

    def _snapshot(
        self, pool: Optional[Sequence[PoolBalance]], fee_fraction: Optional[Number]
    ) -> tuple[List[PoolBalance], Decimal]:
        if pool is None or fee_fraction is None:
            if self.market is None:
                raise ValueError("pool and fee_fraction are required without a market data provider")
            if pool is None:
                pool = self.market.current_pool()
            if fee_fraction is None:
                fee_fraction = self.market.current_fee_fraction()
        return list(pool), as_decimal(fee_fraction)

    async def _estimate(
        self,
        call: Callable[[int, int], Awaitable[int]],
        amount: int,
        outcome_index: int,
        side: str,
    ) -> int:
        try:
            if self.timeout_s is not None:
                shares = await asyncio.wait_for(call(amount, outcome_index), self.timeout_s)
            else:
                shares = await call(amount, outcome_index)
            return int(shares)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            inc_oracle_failures(side)
            logger.warning(
                "%s estimate failed for outcome %d, quoting zero shares: %s: %s",
                side,
                outcome_index,
                type(exc).__name__,
                exc,
            )
            return 0

    def _unchanged(
        self,
        pool: List[PoolBalance],
        outcome_index: int,
        fee_fraction: Decimal,
        side: str,
        amount_used: int = 0,
    ) -> TradeQuote:
        holdings = [b.holdings for b in pool]
        return TradeQuote(
            outcome_index=outcome_index,
            traded_shares=0,
            prices_after_trade=list(self.pricing.prices(holdings)),
            amount_used=amount_used,
            balance_after_trade=holdings,
            new_shares=[b.shares for b in pool],
            fee_fraction=fee_fraction,
            fee_precision=self.fee_precision,
            side=side,
        )

    async def _quote(
        self,
        side: str,
        amount: int,
        outcome_index: int,
        pool: Optional[Sequence[PoolBalance]],
        fee_fraction: Optional[Number],
    ) -> TradeQuote:
        snapshot, fraction = self._snapshot(pool, fee_fraction)
        if not 0 <= outcome_index < len(snapshot):
            raise IndexError(f"outcome index {outcome_index} out of range for {len(snapshot)} outcomes")
        if amount <= 0:
            return self._unchanged(snapshot, outcome_index, fraction, side)

        call = self.oracle.estimate_return if side == BUY else self.oracle.estimate_sell
        shares = await self._estimate(call, amount, outcome_index, side)
        sign = 1 if side == BUY else -1
        balance = balance_after_trade(
            [b.holdings for b in snapshot], outcome_index, sign * amount, sign * shares
        )
        if min(balance) <= 0:
            # a sell the pool can't cover (usually a reverted oracle call) leaves prices undefined
            logger.warning(
                "%s of %d on outcome %d would drain the pool, quoting no trade", side, amount, outcome_index
            )
            return self._unchanged(snapshot, outcome_index, fraction, side, amount_used=amount)
        inc_quotes(side)
        return TradeQuote(
            outcome_index=outcome_index,
            traded_shares=shares,
            prices_after_trade=list(self.pricing.prices(balance)),
            amount_used=amount,
            balance_after_trade=balance,
            new_shares=[
                b.shares + sign * shares if i == outcome_index else b.shares
                for i, b in enumerate(snapshot)
            ],
            fee_fraction=fraction,
            fee_precision=self.fee_precision,
            side=side,
        )

    async def quote(
        self,
        amount: int,
        outcome_index: int,
        pool: Optional[Sequence[PoolBalance]] = None,
        fee_fraction: Optional[Number] = None,
    ) -> TradeQuote:
        """Quote buying ``outcome_index`` with ``amount`` collateral.

        ``pool`` and ``fee_fraction`` default to the market data provider's
        current values. Non-positive amounts return a zero-effect quote
        without calling the oracle. ``pool`` is never modified.
        """
        return await self._quote(BUY, amount, outcome_index, pool, fee_fraction)

    async def quote_sell(
        self,
        return_amount: int,
        outcome_index: int,
        pool: Optional[Sequence[PoolBalance]] = None,
        fee_fraction: Optional[Number] = None,
    ) -> TradeQuote:
        """Mirror of :meth:`quote`: shares sold to get ``return_amount`` back."""
        return await self._quote(SELL, return_amount, outcome_index, pool, fee_fraction)


class LiveQuote:
    """Latest quote for a stream of user inputs; older results are dropped."""

    def __init__(self, quoter: TradeQuoter, debounce_s: float = 0.3, side: str = BUY):
        if side not in (BUY, SELL):
            raise ValueError(f"side must be {BUY!r} or {SELL!r}")
        self.quoter = quoter
        self.side = side
        self.current: Optional[TradeQuote] = None
        self._debouncer = Debouncer(debounce_s)
        self._task: Optional[asyncio.Task] = None

    @property
    def generation(self) -> int:
        return self._debouncer.generation

    @property
    def fees(self) -> Optional[FeeQuote]:
        return fee_quote(self.current) if self.current is not None else None

    def _discard(self, generation: int):
        inc_discarded()
        logger.debug(
            "discarding quote generation %d, latest is %d", generation, self._debouncer.generation
        )

    async def update(self, amount: int, outcome_index: int) -> Optional[TradeQuote]:
        """Quote for this input, or None if newer input arrived before it resolved."""
        generation = self._debouncer.next()
        if not await self._debouncer.settle(generation):
            self._discard(generation)
            return None
        if self.side == BUY:
            quote = await self.quoter.quote(amount, outcome_index)
        else:
            quote = await self.quoter.quote_sell(amount, outcome_index)
        if not self._debouncer.is_current(generation):
            self._discard(generation)
            return None
        self.current = quote
        return quote

    def submit(self, amount: int, outcome_index: int) -> asyncio.Task:
        """Schedule :meth:`update`, cancelling any request still in flight."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.ensure_future(self.update(amount, outcome_index))
        return self._task

    async def settled(self) -> Optional[TradeQuote]:
        """Wait until the most recently submitted input has been quoted.

        If that request failed its error is raised and ``current`` is cleared,
        so an older quote is never reported for newer input.
        """
        task = None
        while self._task is not None:
            task = self._task
            await asyncio.wait({task})
            if task is self._task:
                break
        if task is not None and not task.cancelled() and task.exception() is not None:
            self.current = None
            raise task.exception()
        return self.current


def is_negative_amount(amount: Optional[int]) -> bool:
    return amount is not None and amount < 0


def amount_error(amount: Optional[int], balance: Optional[int], token: Token) -> Optional[str]:
    """Message for an amount the trader can't cover, or None."""
    if amount is None or balance is None:
        return None
    if balance == 0 and amount > balance:
        return "Insufficient balance"
    if amount > balance:
        return f"Value must be less than or equal to {format_amount(balance, token.decimals, 5)} {token.symbol}"
    return None
