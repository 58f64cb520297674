"""Entry point: quote a few buys against the mock market maker."""

from __future__ import annotations

import asyncio
import logging

from .main import build_mock_environment
from ..core.config import load_settings
from ..core.utils import format_amount


async def _run(settings):  # pragma: no cover - manual run
    env = build_mock_environment(settings=settings)
    await env.converter.refresh()
    # simulate typing "1", "10", "100" quickly; only the last one is quoted
    for amount in (10**18, 10 * 10**18, 100 * 10**18):
        env.live.submit(amount, 0)
    quote = await env.live.settled()
    fees = env.live.fees
    print("Shares:", format_amount(quote.traded_shares, 18))
    print("Prices after trade:", ", ".join(f"{p:.2f}%" for p in quote.prices_after_trade))
    print("Fee:", format_amount(fees.fee_paid, 18), "Base cost:", format_amount(fees.base_cost, 18))
    print("Potential profit:", format_amount(fees.potential_profit, 18))
    print("1 cDAI =", format_amount(env.converter.to_base(10**8, 18), 18, 4), "DAI")


def main():  # pragma: no cover - manual run
    settings = load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    asyncio.run(_run(settings))


if __name__ == "__main__":  # pragma: no cover
    main()
