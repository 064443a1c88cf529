"""Backtest rules and the strategy catalogue."""

from portfolio_analytics.strategy.base import BacktestRule
from portfolio_analytics.strategy.dca import run_dca
from portfolio_analytics.strategy.mean_reversion import run_mean_reversion
from portfolio_analytics.strategy.momentum import run_momentum
from portfolio_analytics.strategy.registry import (
    FALLBACK_STRATEGY_ID,
    STRATEGY_CATALOGUE,
    RegisteredStrategy,
    StrategyRegistry,
    build_default_registry,
    get_available_strategies,
    strategy_name,
)
from portfolio_analytics.strategy.sma_crossover import run_sma_crossover


__all__ = [
    "BacktestRule",
    "FALLBACK_STRATEGY_ID",
    "STRATEGY_CATALOGUE",
    "RegisteredStrategy",
    "StrategyRegistry",
    "build_default_registry",
    "get_available_strategies",
    "run_dca",
    "run_mean_reversion",
    "run_momentum",
    "run_sma_crossover",
    "strategy_name",
]
