import asyncio

import pytest

from ammquote.exec.quoter import LiveQuote, TradeQuoter
from ammquote.state.store import Store
from ammquote.venue.base import MarketMakerOracle


class DelayedOracle(MarketMakerOracle):
    """Answers ``2 * amount`` after a per-amount delay."""

    def __init__(self, delays=None):
        self.delays = delays or {}
        self.calls = []

    async def estimate_return(self, amount, outcome_index):
        self.calls.append(amount)
        await asyncio.sleep(self.delays.get(amount, 0))
        return 2 * amount

    async def estimate_sell(self, return_amount, outcome_index):
        self.calls.append(return_amount)
        return return_amount


def _live(oracle, debounce_s=0.0, side="buy"):
    store = Store(fee=10**16)
    store.set_holdings([1000, 1000])
    return LiveQuote(TradeQuoter(oracle, market=store), debounce_s=debounce_s, side=side)


def test_slow_older_quote_is_discarded():
    live = _live(DelayedOracle({1: 0.05}))

    async def run():
        return await asyncio.gather(live.update(1, 0), live.update(2, 0))

    first, second = asyncio.run(run())
    assert first is None
    assert second.amount_used == 2
    assert live.current is second
    assert live.generation == 2


def test_debounce_only_quotes_last_input():
    oracle = DelayedOracle()
    live = _live(oracle, debounce_s=0.02)

    async def run():
        return await asyncio.gather(live.update(1, 0), live.update(2, 0), live.update(3, 1))

    results = asyncio.run(run())
    assert results[:2] == [None, None]
    assert results[2].outcome_index == 1
    assert oracle.calls == [3]


def test_submit_cancels_requests_in_flight():
    oracle = DelayedOracle({1: 0.05, 2: 0.05})
    live = _live(oracle, debounce_s=0.01)

    async def run():
        live.submit(1, 0)
        live.submit(2, 0)
        live.submit(3, 0)
        return await live.settled()

    quote = asyncio.run(run())
    assert quote.amount_used == 3
    assert quote.traded_shares == 6
    assert oracle.calls == [3]


def test_settled_raises_when_latest_input_fails():
    live = _live(DelayedOracle())

    async def run():
        live.submit(10, 0)
        first = await live.settled()
        assert first.amount_used == 10
        live.submit(20, 5)
        with pytest.raises(IndexError):
            await live.settled()
        assert live.current is None
        assert live.fees is None
        live.submit(30, 1)
        return await live.settled()

    quote = asyncio.run(run())
    assert quote.amount_used == 30
    assert quote.outcome_index == 1


def test_fees_follow_latest_quote():
    live = _live(DelayedOracle())
    assert live.fees is None
    asyncio.run(live.update(1000, 0))
    fees = live.fees
    assert fees.fee_paid == 10
    assert fees.base_cost == 990
    assert fees.potential_profit == 1000


def test_sell_side():
    oracle = DelayedOracle()
    live = _live(oracle, side="sell")
    quote = asyncio.run(live.update(10, 0))
    assert quote.side == "sell"
    assert quote.new_shares == [-10, 0]


def test_bad_side():
    with pytest.raises(ValueError):
        _live(DelayedOracle(), side="hold")
