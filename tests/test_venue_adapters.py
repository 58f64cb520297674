import asyncio
from decimal import Decimal

import pytest

from ammquote.core.errors import OracleError
from ammquote.core.types import PoolBalance, Token
from ammquote.state.store import Store
from ammquote.venue.mock import MockMarketMaker, MockRateSource


def _store(holdings=(100, 100), fee=0):
    store = Store(fee=fee)
    store.set_holdings(holdings)
    return store


def test_store_serves_copies_of_pool():
    store = _store()
    pool = store.current_pool()
    pool.append(PoolBalance(2, 5))
    assert len(store.current_pool()) == 2


def test_store_fee_fraction():
    assert _store(fee=25 * 10**15).current_fee_fraction() == Decimal("0.025")


def test_store_upsert_orders_by_outcome():
    store = Store()
    store.upsert_pool([PoolBalance(1, 7), PoolBalance(0, 3)])
    assert store.holdings() == [3, 7]


def test_store_rejects_mismatched_shares():
    with pytest.raises(ValueError):
        Store().set_holdings([1, 2], shares=[1])


def test_store_checks_amount_against_collateral():
    store = Store(collateral=Token("DAI", 18))
    assert store.amount_error(10**18, 2 * 10**18) is None
    assert store.amount_error(10**18, 0) == "Insufficient balance"
    assert store.amount_error(3 * 10**18, 10**18) == "Value must be less than or equal to 1.00000 DAI"


def test_store_amount_error_needs_collateral():
    with pytest.raises(ValueError):
        Store().amount_error(1, 0)


def test_mock_market_maker_quotes_from_store():
    store = _store()
    mm = MockMarketMaker(store)
    assert asyncio.run(mm.estimate_return(10, 0)) == 19
    assert asyncio.run(mm.estimate_sell(10, 0)) == 22
    assert mm.calls == 2


def test_mock_market_maker_failures():
    mm = MockMarketMaker(_store())
    with pytest.raises(OracleError):
        asyncio.run(mm.estimate_sell(500, 0))
    mm.fail = True
    with pytest.raises(OracleError):
        asyncio.run(mm.estimate_return(10, 0))


def test_mock_rate_source():
    src = MockRateSource(rate=123, supply_rate_per_block=7)
    assert asyncio.run(src.current_exchange_rate()) == 123
    assert asyncio.run(src.supply_rate_per_block()) == 7
