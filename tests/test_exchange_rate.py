import asyncio
from decimal import Decimal

import pytest

from ammquote.core.errors import ExchangeRateError
from ammquote.core.types import FeeQuote, PoolBalance, Token
from ammquote.pricing.exchange_rate import (
    ExchangeRateConverter,
    base_symbol_for_ctoken,
    is_ctoken,
)
from ammquote.venue.base import ExchangeRateSource
from ammquote.venue.mock import MockRateSource

DAI_RATE = 200_000_000_000_000_000_000_000_000  # 1 cDAI = 0.02 DAI
DAI = Token("DAI", 18)


def _refreshed(rate=DAI_RATE):
    conv = ExchangeRateConverter(MockRateSource(rate=rate))
    asyncio.run(conv.refresh())
    return conv


def test_unrefreshed_converter_returns_zero():
    conv = ExchangeRateConverter(MockRateSource(rate=DAI_RATE))
    assert conv.rate == 0
    assert conv.to_base(10**8, 18) == 0
    assert conv.to_wrapped(10**18, 18) == 0


def test_to_base_and_back():
    conv = _refreshed()
    assert conv.rate == Decimal(DAI_RATE)
    assert conv.to_base(100 * 10**8, 18) == 2 * 10**18
    assert conv.to_wrapped(2 * 10**18, 18) == 100 * 10**8


def test_to_base_rounds_to_four_places():
    conv = _refreshed()
    # 1.23456789 cDAI -> 0.0246913578 DAI -> 0.0247
    assert conv.to_base(123456789, 18) == 247 * 10**14


def test_six_decimal_underlying():
    conv = _refreshed(rate=210_000_000_000_000)  # 1 cUSDC = 0.021 USDC
    assert conv.to_base(1000 * 10**8, 6) == 21_000_000


def test_conversions_are_near_inverse():
    conv = _refreshed()
    # half a unit at 4 places on each leg; base rounding is scaled by 1 / 0.02
    wrapped_tol = int((Decimal("0.00005") * 50 + Decimal("0.00005")) * 10**8)
    for x in (1, 10**8, 12345678900, 987654321987):
        assert abs(conv.to_wrapped(conv.to_base(x, 18), 18) - x) <= wrapped_tol
    base_tol = int((Decimal("0.00005") * Decimal("0.02") + Decimal("0.00005")) * 10**18)
    for x in (10**18, 1234567890000000000, 5 * 10**14):
        assert abs(conv.to_base(conv.to_wrapped(x, 18), 18) - x) <= base_tol


def test_failed_refresh_keeps_previous_rate():
    source = MockRateSource(rate=DAI_RATE)
    conv = ExchangeRateConverter(source)
    asyncio.run(conv.refresh())
    source.fail = True
    with pytest.raises(ExchangeRateError):
        asyncio.run(conv.refresh())
    assert conv.rate == Decimal(DAI_RATE)


def test_unexpected_source_error_is_wrapped():
    class Broken(ExchangeRateSource):
        async def current_exchange_rate(self):
            raise RuntimeError("node unavailable")

    conv = ExchangeRateConverter(Broken())
    with pytest.raises(ExchangeRateError):
        asyncio.run(conv.init())
    assert conv.to_base(10**8, 18) == 0


def test_ctoken_symbols():
    assert is_ctoken("cDAI")
    assert not is_ctoken("DAI")
    assert base_symbol_for_ctoken("cUSDC") == "usdc"
    with pytest.raises(ValueError):
        base_symbol_for_ctoken("dai")


def test_pool_and_fees_in_base_token():
    conv = _refreshed()
    pool = [PoolBalance(0, holdings=100 * 10**8, shares=10**8, outcome_name="Yes")]
    converted = conv.pool_to_base(pool, DAI)
    assert converted == [PoolBalance(0, holdings=2 * 10**18, shares=2 * 10**16, outcome_name="Yes")]

    fees = conv.fees_to_base(FeeQuote(fee_paid=10**8, base_cost=100 * 10**8, potential_profit=-5), DAI)
    assert fees == FeeQuote(fee_paid=2 * 10**16, base_cost=2 * 10**18, potential_profit=-5)


def test_supply_rate_apy():
    conv = ExchangeRateConverter(MockRateSource(supply_rate_per_block=10**10))
    assert asyncio.run(conv.supply_rate_apy()) == pytest.approx(2.1187, abs=1e-3)
    conv = ExchangeRateConverter(MockRateSource())
    assert asyncio.run(conv.supply_rate_apy()) == 0.0
