"""
Portfolio analytics core.

Risk analytics (VaR, CVaR, beta, ratios, drawdown, stress tests, Monte
Carlo), correlation and diversification analysis, single-ticker strategy
backtests, live trade signals and single-ticker advisory summaries.

Most callers only need ``AnalyticsService``::

    from portfolio_analytics import AnalyticsService, InMemoryMarketData

    data = InMemoryMarketData()
    service = AnalyticsService(data, data, data)
"""

from portfolio_analytics.config.parameters import AnalyticsSettings, load_settings
from portfolio_analytics.io.csv_source import CsvMarketData
from portfolio_analytics.io.memory import InMemoryMarketData
from portfolio_analytics.models.exceptions import (
    AccessError,
    AnalyticsError,
    DataGapError,
    DataIntegrityError,
    InputError,
)
from portfolio_analytics.service import AnalyticsService


__version__ = "0.1.0"

__all__ = [
    "AccessError",
    "AnalyticsError",
    "AnalyticsService",
    "AnalyticsSettings",
    "CsvMarketData",
    "DataGapError",
    "DataIntegrityError",
    "InMemoryMarketData",
    "InputError",
    "load_settings",
]
