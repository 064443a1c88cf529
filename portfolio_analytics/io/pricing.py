"""Current price and currency resolution shared by every engine.

Fallback order for the current price of a holding:

1. A price already attached to the holding snapshot.
2. The live quote from the quote collaborator.
3. The last close of the series fetched for the same request.
"""

import logging

from portfolio_analytics.models.core import HoldingSnapshot, PriceSeries
from portfolio_analytics.io.sources import QuoteSource


logger = logging.getLogger(__name__)


def resolve_current_price(
    ticker: str,
    quotes: QuoteSource | None,
    series: PriceSeries | None = None,
    holding: HoldingSnapshot | None = None,
) -> float | None:
    """
    Resolve the current price of ``ticker``.

    Args:
        ticker: Instrument symbol.
        quotes: Quote collaborator, if any.
        series: Price history already fetched for this request.
        holding: Holding snapshot that may carry a pre-resolved price.

    Returns:
        The first available price in fallback order, or None.
    """
    if holding is not None and holding.current_price is not None:
        return float(holding.current_price)

    if quotes is not None:
        quote = quotes.get_current_price(ticker)
        if quote is not None:
            return float(quote)
        logger.debug("No live quote for %s; using last close", ticker)

    if series is not None and not series.is_empty:
        return series.last_close

    logger.warning("No price available for %s", ticker)
    return None


def convert_to_base(
    amount: float,
    currency: str,
    base_currency: str,
    quotes: QuoteSource | None,
) -> float:
    """
    Convert ``amount`` from ``currency`` into ``base_currency``.

    A missing rate leaves the amount unconverted and logs a warning.

    Examples:
        >>> convert_to_base(100.0, "USD", "USD", None)
        100.0
    """
    if not currency or currency.upper() == base_currency.upper():
        return amount
    rate = quotes.get_exchange_rate(currency, base_currency) if quotes is not None else None
    if rate is None:
        logger.warning(
            "No FX rate %s->%s; value left unconverted", currency, base_currency
        )
        return amount
    return amount * rate
