"""
Pytest configuration and global fixtures.

This module provides shared test fixtures used across the test suite:
deterministic price-path builders, an in-memory market data collaborator
preloaded with a small portfolio, and the fixed analysis date.
"""

import logging
import random
from datetime import date

import numpy as np
import pytest

from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.io.memory import InMemoryMarketData
from portfolio_analytics.models.core import HoldingSnapshot, PriceSeries
from portfolio_analytics.models.enums import AssetClass


SEED = 42
AS_OF = date(2025, 6, 30)


def _apply_global_seed():
    """Apply global deterministic seed for tests."""
    random.seed(SEED)
    np.random.seed(SEED)


_apply_global_seed()


def random_walk(n: int, start: float = 100.0, drift: float = 0.0005, vol: float = 0.01, seed: int = SEED):
    """Geometric random walk of ``n`` closes."""
    rng = np.random.default_rng(seed)
    returns = drift + vol * rng.standard_normal(n - 1)
    return start * np.concatenate([[1.0], np.cumprod(1.0 + returns)])


def series(ticker: str, closes, end: date = AS_OF) -> PriceSeries:
    """Price series on consecutive business days ending at ``end``."""
    return PriceSeries.from_closes(ticker, closes, end=end)


@pytest.fixture()
def as_of():
    """Fixed analysis date used by every engine test."""
    return AS_OF


@pytest.fixture()
def make_series():
    """Factory building a business-day PriceSeries ending at AS_OF."""
    return series


@pytest.fixture()
def walk():
    """Factory building deterministic random-walk closes."""
    return random_walk


@pytest.fixture()
def settings():
    """Default analytics settings."""
    return AnalyticsSettings()


@pytest.fixture()
def restore_root_logger():
    """Restore root handlers and level changed by setup_logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def market_data():
    """
    In-memory collaborator holding portfolio "core" (three stocks), a
    benchmark and a bond without price history.

    Returns:
        InMemoryMarketData instance.
    """
    data = InMemoryMarketData()
    data.add_prices(series("AAA", random_walk(120, 100.0, seed=1)))
    data.add_prices(series("BBB", random_walk(120, 50.0, seed=2)))
    data.add_prices(series("CCC", random_walk(120, 20.0, vol=0.02, seed=3)))
    data.add_prices(series("SPY", random_walk(120, 400.0, vol=0.008, seed=4)))
    data.add_portfolio(
        "core",
        [
            HoldingSnapshot("AAA", 10, purchase_price=90.0, sector="Technology", name="Alpha Corp"),
            HoldingSnapshot("BBB", 20, purchase_price=80.0, sector="Financials", name="Beta Bank"),
            HoldingSnapshot("CCC", 50, purchase_price=25.0, asset_class=AssetClass.ETF),
        ],
    )
    return data
