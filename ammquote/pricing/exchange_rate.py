"""Conversion between an interest-bearing cToken and its underlying token.

The protocol reports ``exchangeRate`` scaled by ``10**(18 + underlyingDecimals - 8)``.
Converted amounts are rounded to 4 decimal places before being re-encoded in
the target token's base units; displayed amounts depend on that rounding.
The rate stays 0 until :meth:`ExchangeRateConverter.refresh` succeeds, and
every conversion against a zero rate returns 0.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal, localcontext
from typing import List, Sequence

from ..core.errors import ExchangeRateError
from ..core.types import ExchangeSnapshot, FeeQuote, PoolBalance, Token
from ..core.utils import DECIMAL_PRECISION, as_decimal, format_units, parse_units, to_fixed
from ..io.metrics import inc_rate_refresh
from ..venue.base import ExchangeRateSource

logger = logging.getLogger(__name__)

CTOKEN_DECIMALS = 8
ROUNDING_PLACES = 4
BLOCKS_PER_DAY = 4 * 60 * 24
DAYS_PER_YEAR = 365

_BASE_FOR_CTOKEN = {
    "cdai": "dai",
    "cusdc": "usdc",
    "cusdt": "usdt",
    "cwbtc": "wbtc",
    "cbat": "bat",
    "ceth": "eth",
}


def is_ctoken(symbol: str) -> bool:
    return symbol.lower() in _BASE_FOR_CTOKEN


def base_symbol_for_ctoken(symbol: str) -> str:
    try:
        return _BASE_FOR_CTOKEN[symbol.lower()]
    except KeyError:
        raise ValueError(f"{symbol!r} is not a known cToken") from None


class ExchangeRateConverter:
    def __init__(self, source: ExchangeRateSource, ctoken_decimals: int = CTOKEN_DECIMALS):
        self.source = source
        self.snapshot = ExchangeSnapshot(rate=Decimal(0), ctoken_decimals=ctoken_decimals)

    @property
    def rate(self) -> Decimal:
        return self.snapshot.rate

    async def refresh(self) -> Decimal:
        """Pull the current rate. On failure the previous snapshot is kept and the error re-raised."""
        try:
            raw = await self.source.current_exchange_rate()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            inc_rate_refresh(ok=False)
            logger.warning("exchange rate refresh failed, keeping rate=%s: %s", self.rate, exc)
            if isinstance(exc, ExchangeRateError):
                raise
            raise ExchangeRateError(f"exchange rate unavailable: {exc}") from exc
        self.snapshot = ExchangeSnapshot(
            rate=as_decimal(raw), ctoken_decimals=self.snapshot.ctoken_decimals
        )
        inc_rate_refresh(ok=True)
        logger.debug("exchange rate refreshed: %s", self.snapshot.rate)
        return self.snapshot.rate

    init = refresh

    def _mantissa(self, base_decimals: int) -> int:
        if base_decimals < 0:
            raise ValueError("decimals must be non-negative")
        return 18 + base_decimals - self.snapshot.ctoken_decimals

    def to_base(self, amount_in_wrapped: int, base_decimals: int) -> int:
        rate = self.snapshot.rate
        if rate == 0:
            return 0
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            unit_value = rate.scaleb(-self._mantissa(base_decimals))
            amount = format_units(amount_in_wrapped, self.snapshot.ctoken_decimals) * unit_value
            return parse_units(to_fixed(amount, ROUNDING_PLACES), base_decimals)

    def to_wrapped(self, amount_in_base: int, base_decimals: int) -> int:
        rate = self.snapshot.rate
        if rate == 0:
            return 0
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            unit_value = Decimal(1).scaleb(self._mantissa(base_decimals)) / rate
            amount = format_units(amount_in_base, base_decimals) * unit_value
            return parse_units(to_fixed(amount, ROUNDING_PLACES), self.snapshot.ctoken_decimals)

    def pool_to_base(self, pool: Sequence[PoolBalance], base_token: Token) -> List[PoolBalance]:
        return [
            PoolBalance(
                outcome_index=b.outcome_index,
                holdings=self.to_base(b.holdings, base_token.decimals),
                shares=self.to_base(b.shares, base_token.decimals),
                outcome_name=b.outcome_name,
            )
            for b in pool
        ]

    def fees_to_base(self, fees: FeeQuote, base_token: Token) -> FeeQuote:
        """Fee, base cost and profit in the underlying token; cost and profit only when positive."""
        decimals = base_token.decimals
        return FeeQuote(
            fee_paid=self.to_base(fees.fee_paid, decimals),
            base_cost=self.to_base(fees.base_cost, decimals) if fees.base_cost > 0 else fees.base_cost,
            potential_profit=(
                self.to_base(fees.potential_profit, decimals)
                if fees.potential_profit > 0
                else fees.potential_profit
            ),
        )

    async def supply_rate_apy(self) -> float:
        """Annualised supply rate in percent, compounded daily."""
        supply_rate = await self.source.supply_rate_per_block()
        daily = supply_rate / 1e18 * BLOCKS_PER_DAY
        return ((daily + 1) ** (DAYS_PER_YEAR - 1) - 1) * 100
