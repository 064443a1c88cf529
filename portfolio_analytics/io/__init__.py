"""Collaborator protocols and market data sources."""

from portfolio_analytics.io.csv_source import CsvMarketData
from portfolio_analytics.io.memory import InMemoryMarketData
from portfolio_analytics.io.pricing import convert_to_base, resolve_current_price
from portfolio_analytics.io.sources import HoldingsSource, PriceHistorySource, QuoteSource

__all__ = [
    "CsvMarketData",
    "HoldingsSource",
    "InMemoryMarketData",
    "PriceHistorySource",
    "QuoteSource",
    "convert_to_base",
    "resolve_current_price",
]
