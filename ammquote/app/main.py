"""Bootstrap a quoting environment backed by the mock market maker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.config import Settings, load_settings
from ..core.types import Token
from ..exec.quoter import LiveQuote, TradeQuoter
from ..pricing.exchange_rate import ExchangeRateConverter
from ..state.store import Store
from ..venue.mock import MockMarketMaker, MockRateSource

# cDAI-like rate: 1 cDAI ~= 0.02 DAI
DEFAULT_RATE = 200_000_000_000_000_000_000_000_000


@dataclass
class Environment:
    store: Store
    market_maker: MockMarketMaker
    quoter: TradeQuoter
    live: LiveQuote
    converter: ExchangeRateConverter


def build_mock_environment(
    holdings: Sequence[int] = (100 * 10**18, 100 * 10**18),
    fee: int = 2 * 10**16,
    settings: Optional[Settings] = None,
) -> Environment:
    settings = settings or load_settings()
    store = Store(fee=fee, collateral=Token("DAI", 18), fee_precision=settings.fee_precision)
    store.set_holdings(holdings)
    market_maker = MockMarketMaker(store)
    quoter = TradeQuoter(
        market_maker,
        market=store,
        timeout_s=settings.oracle_timeout_s,
        fee_precision=settings.fee_precision,
    )
    live = LiveQuote(quoter, debounce_s=settings.debounce_s)
    converter = ExchangeRateConverter(MockRateSource(rate=DEFAULT_RATE))
    return Environment(store, market_maker, quoter, live, converter)
