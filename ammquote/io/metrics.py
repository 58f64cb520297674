"""Prometheus counters for the quoting pipeline."""

from __future__ import annotations

from prometheus_client import Counter

quotes_total = Counter("ammquote_quotes_total", "Trade quotes computed", ["side"])
oracle_failures_total = Counter(
    "ammquote_oracle_failures_total",
    "Oracle calls that failed or timed out and fell back to zero shares",
    ["side"],
)
quotes_discarded_total = Counter(
    "ammquote_quotes_discarded_total", "Quotes dropped because newer input arrived"
)
rate_refresh_total = Counter(
    "ammquote_rate_refresh_total", "Exchange rate refresh attempts", ["result"]
)


def inc_quotes(side: str = "buy") -> None:
    quotes_total.labels(side=side).inc()


def inc_oracle_failures(side: str = "buy") -> None:
    oracle_failures_total.labels(side=side).inc()


def inc_discarded(n: int = 1) -> None:
    quotes_discarded_total.inc(n)


def inc_rate_refresh(ok: bool) -> None:
    rate_refresh_total.labels(result="ok" if ok else "error").inc()
