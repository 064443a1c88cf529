"""
Metrics aggregation for backtest performance.

This module computes trading performance metrics from the closed trades of a
rule backtest (win rate, average win/loss, profit factor) and the
return-based figures of the traded ticker itself (CAGR, Sharpe and Sortino
ratios).

All metrics handle the zero-trade and zero-volatility cases gracefully: trade
statistics fall back to 0 and ratios to None instead of raising.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike

from portfolio_analytics.models.backtest import TradeRecord
from portfolio_analytics.timeseries.stats import downside_deviation, mean, stddev


logger = logging.getLogger(__name__)

# Reported when there are winning trades but no losing ones
PROFIT_FACTOR_NO_LOSSES = 999.0
EPSILON = 1e-10


@dataclass(frozen=True)
class TradeStats:
    """Win/loss statistics of a trade list, in percent."""

    winning_trades: int
    losing_trades: int
    win_rate_pct: float
    avg_win_pct: float
    avg_loss_pct: float
    profit_factor: float


def compute_trade_stats(trades: Sequence[TradeRecord]) -> TradeStats:
    """
    Compute win/loss statistics from closed trades.

    A trade with a positive return is a win; every other trade (including a
    flat one) counts as a loss. Average loss is reported as a positive
    magnitude.

    Args:
        trades: Closed trades of one backtest.

    Returns:
        TradeStats; all zeros when there are no trades.

    Examples:
        >>> from datetime import date
        >>> day = date(2025, 1, 2)
        >>> trades = [
        ...     TradeRecord(day, day, 100.0, 110.0, 10.0),
        ...     TradeRecord(day, day, 100.0, 95.0, -5.0),
        ... ]
        >>> stats = compute_trade_stats(trades)
        >>> stats.win_rate_pct, stats.avg_loss_pct, stats.profit_factor
        (50.0, 5.0, 2.0)
    """
    trade_count = len(trades)
    if trade_count == 0:
        logger.info("No trades to compute metrics from")
        return TradeStats(0, 0, 0.0, 0.0, 0.0, 0.0)

    returns = np.array([trade.return_pct for trade in trades], dtype=np.float64)
    wins = returns > 0
    win_count = int(np.sum(wins))
    loss_count = trade_count - win_count

    total_win = float(np.sum(returns[wins]))
    total_loss = float(np.sum(np.abs(returns[~wins])))

    stats = TradeStats(
        winning_trades=win_count,
        losing_trades=loss_count,
        win_rate_pct=win_count / trade_count * 100.0,
        avg_win_pct=total_win / win_count if win_count > 0 else 0.0,
        avg_loss_pct=total_loss / loss_count if loss_count > 0 else 0.0,
        profit_factor=profit_factor(total_win, total_loss),
    )
    logger.debug(
        "Trade stats: %d trades, win_rate=%.2f%%, profit_factor=%.2f",
        trade_count,
        stats.win_rate_pct,
        stats.profit_factor,
    )
    return stats


def profit_factor(total_win: float, total_loss: float) -> float:
    """
    Gross wins divided by gross losses.

    Examples:
        >>> profit_factor(10.0, 5.0)
        2.0
        >>> profit_factor(10.0, 0.0)
        999.0
        >>> profit_factor(0.0, 0.0)
        0.0
    """
    if total_loss > 0:
        return total_win / total_loss
    return PROFIT_FACTOR_NO_LOSSES if total_win > 0 else 0.0


def cagr_pct(total_return_pct: float, years: float) -> float:
    """
    Compound annual growth rate in percent.

    Returns 0 for a non-positive period or a total loss of 100% or more.

    Examples:
        >>> round(cagr_pct(21.0, 2.0), 6)
        10.0
        >>> cagr_pct(15.0, 0.0)
        0.0
    """
    growth = 1.0 + total_return_pct / 100.0
    if years <= 0 or growth <= 0:
        return 0.0
    return (growth ** (1.0 / years) - 1.0) * 100.0


def annualized_sharpe(
    returns: ArrayLike, risk_free_rate: float, trading_days: int = 252
) -> float | None:
    """
    Annualized Sharpe ratio ``(mean * N - rf) / (stdev * sqrt(N))``.

    Returns None when the return volatility is ~0.
    """
    volatility = stddev(returns) * math.sqrt(trading_days)
    if volatility < EPSILON:
        return None
    return (mean(returns) * trading_days - risk_free_rate) / volatility


def annualized_sortino(
    returns: ArrayLike, risk_free_rate: float, trading_days: int = 252
) -> float | None:
    """
    Annualized Sortino ratio using the daily risk-free rate as target.

    Returns None when the downside deviation is ~0.
    """
    downside = downside_deviation(returns, risk_free_rate / trading_days) * math.sqrt(trading_days)
    if downside < EPSILON:
        return None
    return (mean(returns) * trading_days - risk_free_rate) / downside
