"""Collaborator interfaces consumed by the analytics core.

The core never stores or fetches data itself; it reads holdings, price
history and quotes through these protocols. Implementations may raise
``AccessError`` when the caller may not read a portfolio.
"""

from datetime import date
from typing import Protocol, runtime_checkable

from portfolio_analytics.models.core import HoldingSnapshot, PriceSeries


@runtime_checkable
class HoldingsSource(Protocol):
    """Provides the holdings of a portfolio."""

    def get_holdings(self, portfolio_id: str) -> list[HoldingSnapshot]:
        """Return the current holdings of ``portfolio_id`` (may be empty)."""


@runtime_checkable
class PriceHistorySource(Protocol):
    """Provides daily price history per ticker."""

    def get_closing_prices(self, ticker: str, start: date, end: date) -> PriceSeries:
        """Return bars dated within ``[start, end]``; empty when unknown."""


@runtime_checkable
class QuoteSource(Protocol):
    """Provides live quotes and FX rates."""

    def get_current_price(self, ticker: str) -> float | None:
        """Return the latest quote for ``ticker``, or None when absent."""

    def get_exchange_rate(self, base: str, quote: str) -> float | None:
        """Return units of ``quote`` per unit of ``base``, or None."""
