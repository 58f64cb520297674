"""Exceptions raised by capability implementations.

The quoting core itself degrades to zero/neutral values instead of raising;
these types exist so oracle and rate-source implementations have something
meaningful to raise.
"""

from __future__ import annotations


class AmmQuoteError(Exception):
    """Base class for errors in this package."""


class OracleError(AmmQuoteError):
    """The market maker contract call failed or reverted."""


class ExchangeRateError(AmmQuoteError):
    """The exchange rate could not be read; the previous snapshot stays in place."""
