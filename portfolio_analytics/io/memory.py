"""In-memory market data collaborator.

Implements all three collaborator protocols over plain dictionaries. Used
by batch jobs that preload their data and throughout the test-suite.
"""

import logging
from datetime import date

from portfolio_analytics.models.core import HoldingSnapshot, PriceSeries
from portfolio_analytics.models.exceptions import AccessError


logger = logging.getLogger(__name__)


class InMemoryMarketData:
    """Holdings, price history, quotes and FX rates held in memory.

    Args:
        holdings: Portfolio id to holdings.
        prices: Ticker to full price history.
        quotes: Ticker to live quote.
        fx_rates: ``(base, quote)`` currency pair to rate.
        restricted: Portfolio ids whose access raises ``AccessError``.

    Examples:
        >>> data = InMemoryMarketData()
        >>> data.add_prices(PriceSeries.from_closes("AAA", [1.0, 2.0]))
        >>> len(data.get_closing_prices("AAA", date(1900, 1, 1), date(2999, 1, 1)))
        2
    """

    def __init__(
        self,
        holdings: dict[str, list[HoldingSnapshot]] | None = None,
        prices: dict[str, PriceSeries] | None = None,
        quotes: dict[str, float] | None = None,
        fx_rates: dict[tuple[str, str], float] | None = None,
        restricted: set[str] | None = None,
    ):
        self._holdings = dict(holdings or {})
        self._prices = dict(prices or {})
        self._quotes = dict(quotes or {})
        self._fx_rates = dict(fx_rates or {})
        self._restricted = set(restricted or ())

    def add_portfolio(self, portfolio_id: str, holdings: list[HoldingSnapshot]) -> None:
        self._holdings[portfolio_id] = list(holdings)

    def add_prices(self, series: PriceSeries) -> None:
        self._prices[series.ticker.upper()] = series

    def set_quote(self, ticker: str, price: float) -> None:
        self._quotes[ticker.upper()] = price

    def set_exchange_rate(self, base: str, quote: str, rate: float) -> None:
        self._fx_rates[(base.upper(), quote.upper())] = rate

    def get_holdings(self, portfolio_id: str) -> list[HoldingSnapshot]:
        if portfolio_id in self._restricted:
            raise AccessError("Access denied", context={"portfolio_id": portfolio_id})
        return list(self._holdings.get(portfolio_id, []))

    def get_closing_prices(self, ticker: str, start: date, end: date) -> PriceSeries:
        series = self._prices.get(ticker.upper())
        if series is None:
            logger.debug("No price history held for %s", ticker)
            return PriceSeries(ticker=ticker.upper())
        return series.between(start, end)

    def get_current_price(self, ticker: str) -> float | None:
        return self._quotes.get(ticker.upper())

    def get_exchange_rate(self, base: str, quote: str) -> float | None:
        base, quote = base.upper(), quote.upper()
        if base == quote:
            return 1.0
        rate = self._fx_rates.get((base, quote))
        if rate is not None:
            return rate
        inverse = self._fx_rates.get((quote, base))
        if inverse:
            return 1.0 / inverse
        return None
