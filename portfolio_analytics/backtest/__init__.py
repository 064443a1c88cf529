"""Backtest building blocks: drawdown, position state machine and metrics.

``BacktestEngine`` lives in ``portfolio_analytics.backtest.engine``; it is
not re-exported here because the strategy rules import this package.
"""

from portfolio_analytics.backtest.drawdown import compute_drawdown_curve, compute_max_drawdown, value_series_from_returns
from portfolio_analytics.backtest.execution import PositionTracker, trade_return_pct
from portfolio_analytics.backtest.metrics import (
    PROFIT_FACTOR_NO_LOSSES,
    TradeStats,
    annualized_sharpe,
    annualized_sortino,
    cagr_pct,
    compute_trade_stats,
    profit_factor,
)


__all__ = [
    "PROFIT_FACTOR_NO_LOSSES",
    "PositionTracker",
    "TradeStats",
    "annualized_sharpe",
    "annualized_sortino",
    "cagr_pct",
    "compute_drawdown_curve",
    "compute_max_drawdown",
    "compute_trade_stats",
    "profit_factor",
    "trade_return_pct",
    "value_series_from_returns",
]
